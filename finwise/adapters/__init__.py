from .base import CompletionAdapter
from .mock import MockCompletionAdapter
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter
from .gemini_adapter import GeminiAdapter
from .factory import get_completion_adapter, build_default_adapter

__all__ = [
    "CompletionAdapter",
    "MockCompletionAdapter",
    "OpenAIAdapter",
    "AnthropicAdapter",
    "GeminiAdapter",
    "get_completion_adapter",
    "build_default_adapter",
]
