"""Factory for creating completion adapters."""
import logging
from typing import Optional
from finwise.adapters.base import CompletionAdapter
from finwise.adapters.mock import MockCompletionAdapter
from finwise.adapters.openai_adapter import OpenAIAdapter
from finwise.adapters.anthropic_adapter import AnthropicAdapter
from finwise.adapters.gemini_adapter import GeminiAdapter
from finwise.config import settings

logger = logging.getLogger(__name__)


def get_completion_adapter(model_id: str, **kwargs) -> CompletionAdapter:
    """
    Factory function to create the appropriate adapter based on model_id.

    Args:
        model_id: Model identifier (e.g., "mock:finwise", "gemini-2.0-flash", "gpt-4o-mini",
            "claude-3-5-haiku-latest", "openai:llama3" for an OpenAI-compatible endpoint)
        **kwargs: Additional configuration for the adapter

    Returns:
        CompletionAdapter instance

    Raises:
        ValueError: The provider's API key is not configured
    """
    lowered = model_id.lower()
    if lowered.startswith("mock:"):
        return MockCompletionAdapter(model_id, **kwargs)
    elif "gemini" in lowered or "google" in lowered:
        return GeminiAdapter(model_id, **kwargs)
    elif "claude" in lowered or "anthropic" in lowered:
        return AnthropicAdapter(model_id, **kwargs)
    elif lowered.startswith(("gpt-", "o1-", "openai:")) or "openai" in lowered:
        return OpenAIAdapter(model_id, **kwargs)
    else:
        raise ValueError(f"Unknown completion model: {model_id}")


def build_default_adapter() -> Optional[CompletionAdapter]:
    """
    Adapter for the configured completion model, or None when it cannot be built.

    A missing API key is the normal "service unconfigured" state: the
    assistant then answers from its fallback table.
    """
    try:
        return get_completion_adapter(settings.completion_model)
    except ValueError as e:
        logger.info("Completion service disabled", extra={"model": settings.completion_model, "reason": str(e)})
        return None
