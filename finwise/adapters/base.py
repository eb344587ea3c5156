"""Base completion adapter interface."""
from abc import ABC, abstractmethod


class CompletionAdapter(ABC):
    """Abstract base class for text-completion providers."""

    def __init__(self, model_id: str, **kwargs):
        """
        Initialize the adapter.

        Args:
            model_id: Identifier for the model (e.g., "gemini-2.0-flash", "gpt-4o-mini")
            **kwargs: Additional provider-specific configuration
        """
        self.model_id = model_id
        self.config = kwargs

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """
        Complete a prompt.

        Args:
            prompt: The prompt text
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens

        Returns:
            The generated text

        Raises:
            CompletionServiceError: Transport failure, error status or empty answer
        """
        pass
