"""Mock completion adapter for testing without API calls."""
import asyncio
from typing import List, Optional
from finwise.adapters.base import CompletionAdapter
from finwise.errors import CompletionServiceError


class MockCompletionAdapter(CompletionAdapter):
    """Mock adapter that returns deterministic answers and records its prompts."""

    # Deterministic responses based on model_id
    MODEL_RESPONSES = {
        "mock:finwise": "  Based on your data, you are on track. Keep tracking your expenses!  ",
        "mock:empty": "",
    }

    def __init__(self, model_id: str = "mock:finwise", **kwargs):
        super().__init__(model_id, **kwargs)
        self.response: Optional[str] = kwargs.get(
            "response",
            self.MODEL_RESPONSES.get(model_id, self.MODEL_RESPONSES["mock:finwise"]),
        )
        self.error: Optional[Exception] = kwargs.get("error")
        self.delay: float = kwargs.get("delay", 0.0)
        self.prompts: List[str] = []

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Return the configured answer, or fail the way a provider would."""
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if not self.response or not self.response.strip():
            raise CompletionServiceError(f"{self.model_id} returned an empty answer")
        return self.response
