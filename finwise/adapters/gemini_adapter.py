"""Google Gemini completion adapter."""
import google.generativeai as genai
from finwise.adapters.base import CompletionAdapter
from finwise.config import settings
from finwise.errors import CompletionServiceError

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiAdapter(CompletionAdapter):
    """Google Gemini API adapter."""

    def __init__(self, model_id: str = "gemini-2.0-flash", **kwargs):
        super().__init__(model_id, **kwargs)
        api_key = kwargs.get("api_key") or settings.gemini_api_key
        if not api_key:
            raise ValueError("Gemini API key required")
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_id, safety_settings=SAFETY_SETTINGS)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """Complete a prompt using the Gemini API."""
        generation_config = genai.types.GenerationConfig(
            temperature=temperature,
            top_k=1,
            top_p=1,
            max_output_tokens=max_tokens,
        )
        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=generation_config,
            )
            content = response.text
        except Exception as e:
            raise CompletionServiceError(f"Gemini API error: {str(e)}") from e

        if not content or not content.strip():
            raise CompletionServiceError("Gemini API returned an empty answer")
        return content
