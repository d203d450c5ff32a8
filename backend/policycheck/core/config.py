"""Application settings via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Load from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "PolicyCheck API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Generative review (optional)
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    generative_enabled: bool = True
    generative_timeout_seconds: float = 30.0

    # Valkey result cache (optional)
    valkey_host: str = "localhost"
    valkey_port: int = 6379
    valkey_password: str | None = None
    cache_ttl_seconds: int = 3600

    # Policy fetching
    fetch_timeout_seconds: float = 10.0
    fetch_use_browser: bool = False

    # Signed assessments
    signing_key: str | None = Field(
        None,
        validation_alias=AliasChoices("policycheck_signing_key", "signing_key"),
        description="Ed25519 private key as a 64-char hex seed",
    )
    signing_key_id: str = "policycheck-1"
    issuer: str = "policycheck.tools"
    public_base_url: str = "https://policycheck.tools"
    assessment_ttl_seconds: int = 300

    @property
    def generative_available(self) -> bool:
        return self.generative_enabled and bool(self.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
