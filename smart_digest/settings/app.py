"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    config_path: str | None = Field(
        default=None, validation_alias="SMART_DIGEST_CONFIG"
    )

    def api_key_for_provider(self, provider: str) -> str | None:
        """Return the environment API key for a provider identifier."""
        keys = {
            "openai": self.openai_api_key,
            "gemini": self.gemini_api_key,
        }
        return keys.get(provider)
