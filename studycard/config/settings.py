from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Gemini generative model configuration."""

    api_key: Optional[SecretStr] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    analysis_model: str = "gemini-2.5-flash"
    speech_model: str = "gemini-2.5-flash-preview-tts"
    voice_name: str = "Kore"
    timeout_seconds: float = Field(default=60.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class FetchConfig(BaseSettings):
    """Image retrieval configuration."""

    relay_base_url: str = Field(
        default="https://corsproxy.io/?",
        description="Relay endpoint; the percent-encoded image URL is appended to it.",
    )
    timeout_seconds: float = Field(default=15.0, gt=0)
    follow_redirects: bool = True

    model_config = SettingsConfigDict(
        env_prefix="FETCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class AudioConfig(BaseSettings):
    """Output contract of the speech service and the pause between phrases."""

    sample_rate: int = Field(default=24000, ge=1)
    channels: int = Field(default=1, ge=1)
    sample_width: int = Field(default=2, ge=1)
    pause_seconds: int = Field(default=3, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class CatalogConfig(BaseSettings):
    """Flashcard images offered to the UI."""

    urls: list[str] = Field(default_factory=list)

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "StudyCard Speech Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"

    # Gemini
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    # Image retrieval
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    # Audio
    audio: AudioConfig = Field(default_factory=AudioConfig)

    # Catalog
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
