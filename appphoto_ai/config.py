"""Configuration management for AppPhoto AI.

Loads settings from environment variables (and an optional .env file).
Nothing is validated at import time; call ``init_settings`` from the startup
path to obtain checked settings.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from appphoto_ai.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    chat_model: str = "gpt-4o-mini"

    # Sampling
    extraction_temperature: float = 0.0
    chat_temperature: float = 0.7

    # Advisory upload ceiling enforced by the front ends
    max_upload_mb: int = 10

    def get_api_key(self) -> str:
        """Get the OpenAI API key.

        Returns:
            The configured API key

        Raises:
            ConfigurationError: If the API key is not set
        """
        if not self.openai_api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY not set. Please add it to your .env file. "
                "Copy .env.example to .env and add your API key."
            )
        return self.openai_api_key


def init_settings(**overrides) -> Settings:
    """Build settings and check that the process can talk to the model.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the API key is missing
    """
    load_dotenv()
    settings = Settings(**overrides)
    settings.get_api_key()
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide validated settings (initialized on first use)."""
    return init_settings()
