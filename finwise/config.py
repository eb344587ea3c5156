"""Configuration settings for the application."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "FinWise Assistant API"
    debug: bool = False
    log_level: str = "INFO"
    database_path: str = "finwise.db"

    # Completion service. A provider is only called when its key is set.
    completion_model: str = "gemini-2.0-flash"
    completion_temperature: float = 0.7
    completion_max_tokens: int = 2048
    completion_timeout_seconds: float = 20.0
    gemini_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = ""
    anthropic_api_key: str = ""

    chat_poll_interval_seconds: float = 1.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
