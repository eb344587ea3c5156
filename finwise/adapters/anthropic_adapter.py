"""Anthropic Claude completion adapter."""
from anthropic import AsyncAnthropic
from finwise.adapters.base import CompletionAdapter
from finwise.config import settings
from finwise.errors import CompletionServiceError


class AnthropicAdapter(CompletionAdapter):
    """Anthropic Claude API adapter."""

    def __init__(self, model_id: str = "claude-3-5-haiku-latest", **kwargs):
        super().__init__(model_id, **kwargs)
        api_key = kwargs.get("api_key") or settings.anthropic_api_key
        if not api_key:
            raise ValueError("Anthropic API key required")
        self.client = AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Complete a prompt using the Anthropic API."""
        try:
            response = await self.client.messages.create(
                model=self.model_id,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "user", "content": prompt}
                ],
            )
            content = "".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            )
        except Exception as e:
            raise CompletionServiceError(f"Anthropic API error: {str(e)}") from e

        if not content.strip():
            raise CompletionServiceError("Anthropic API returned an empty answer")
        return content
