"""Configuration settings for Blueprint Studio."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # API Keys
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None

    # Generation
    openai_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.7
    generation_max_tokens: int = 2500
    generation_timeout_seconds: float = 60.0
    generation_max_retries: int = 2  # retries after the first attempt
    generation_retry_backoff_seconds: float = 1.0

    # Brief defaults
    default_platform: str = "YouTube"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    disconnect_poll_seconds: float = 0.5

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env


settings = Settings()
