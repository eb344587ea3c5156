"""OpenAI completion adapter (also serves OpenAI-compatible endpoints)."""
from openai import AsyncOpenAI
from finwise.adapters.base import CompletionAdapter
from finwise.config import settings
from finwise.errors import CompletionServiceError


class OpenAIAdapter(CompletionAdapter):
    """OpenAI API adapter."""

    def __init__(self, model_id: str = "gpt-4o-mini", **kwargs):
        super().__init__(model_id, **kwargs)
        api_key = kwargs.get("api_key") or settings.openai_api_key
        base_url = kwargs.get("base_url") or settings.openai_base_url or None
        if not api_key:
            raise ValueError("OpenAI API key required")
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        # "openai:<model>" selects a model on a compatible endpoint
        if model_id.startswith("openai:"):
            self.remote_model = model_id[len("openai:"):]
        else:
            self.remote_model = model_id

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Complete a prompt using the OpenAI API."""
        try:
            response = await self.client.chat.completions.create(
                model=self.remote_model,
                messages=[
                    {"role": "user", "content": prompt}
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise CompletionServiceError(f"OpenAI API error: {str(e)}") from e

        if not content or not content.strip():
            raise CompletionServiceError("OpenAI API returned an empty answer")
        return content
