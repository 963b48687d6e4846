"""Application configuration using Pydantic Settings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ORCHESTRATOR_URL = "http://localhost:4000"
SECRET_FILE_ENV_VARS = (
    "OPENAI_API_KEY",
    "AZURE_SPEECH_KEY",
)


def _load_secret_file_env_vars() -> None:
    """Allow secrets to be sourced from *_FILE env vars (Docker secrets)."""
    for env_var in SECRET_FILE_ENV_VARS:
        file_var = f"{env_var}_FILE"
        file_path = os.getenv(file_var)
        if not file_path:
            continue
        try:
            value = Path(file_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(f"Failed to read {file_var} at {file_path}") from exc
        if not value:
            raise ValueError(f"{file_var} is empty")
        os.environ[env_var] = value


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ----- Application -----
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False

    # ----- Orchestration backend (primary path) -----
    orchestrator_base_url: str = DEFAULT_ORCHESTRATOR_URL
    orchestrator_timeout_seconds: float = 60.0

    # ----- OpenAI (degraded chat, general-purpose speech, transcription) -----
    openai_api_key: str = ""
    openai_timeout_seconds: float = 30.0
    openai_chat_model: str = "gpt-4"
    fallback_temperature: float = 0.7
    fallback_max_tokens: int = 300  # short answers in degraded mode
    openai_tts_model: str = "tts-1-hd"
    openai_tts_voice: str = "alloy"
    openai_tts_speed: float = Field(default=0.92, gt=0.25, lt=1.0)
    openai_transcription_model: str = "whisper-1"

    # ----- Azure Speech (Arabic/Amazigh script) -----
    azure_speech_key: str = ""
    azure_speech_region: str = "francecentral"
    azure_speech_voice: str = "ar-MA-MounaNeural"
    azure_speech_locale: str = "ar-MA"
    speech_timeout_seconds: float = 30.0

    # ----- Response defaults -----
    default_language: str = "fr"

    # ----- Rate limiting -----
    rate_limit_enabled: bool = True

    # ----- CORS -----
    # Can be set as JSON list or comma-separated string
    cors_origins_str: str = Field(default="http://localhost:3000", alias="cors_origins")

    @property
    def cors_origins(self) -> list[str]:
        """Parse cors_origins from comma-separated string or JSON list."""
        v = self.cors_origins_str
        if not v:
            return ["http://localhost:3000"]
        if v.startswith("["):
            import json

            raw = json.loads(v)
            if not isinstance(raw, list) or not all(isinstance(origin, str) for origin in raw):
                raise ValueError("CORS_ORIGINS must be a JSON list of strings")
            return raw
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def azure_speech_endpoint(self) -> str:
        return f"https://{self.azure_speech_region}.tts.speech.microsoft.com/cognitiveservices/v1"

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Ensure sane settings in production environment."""
        if self.is_production:
            if self.app_debug:
                raise ValueError("APP_DEBUG must be false in production!")
            if self.orchestrator_base_url == DEFAULT_ORCHESTRATOR_URL:
                raise ValueError("ORCHESTRATOR_BASE_URL must point to the production backend!")
            if not self.openai_api_key:
                raise ValueError("OPENAI_API_KEY must be set in production!")
            if any(origin in {"*", "http://localhost:3000"} for origin in self.cors_origins):
                raise ValueError("CORS_ORIGINS must be restricted in production!")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    _load_secret_file_env_vars()
    return Settings()
