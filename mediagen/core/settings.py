"""Application configuration module."""

from __future__ import annotations

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

VERTEX_HOST_TEMPLATE = "https://{location}-aiplatform.googleapis.com"
TTS_BASE_URL = "https://texttospeech.googleapis.com"
STORAGE_BASE_URL = "https://storage.googleapis.com"


class Settings(BaseSettings):
    """Centralised application settings."""

    project_id: str = Field("", alias="PROJECT_ID")
    location: str = Field("us-central1", alias="LOCATION")
    app_host: str = Field("0.0.0.0", alias="APP_HOST")
    app_port: int = Field(8080, alias="PORT")
    log_level: str = Field("info", alias="LOG_LEVEL")
    access_token: str = Field("", alias="ACCESS_TOKEN")
    http_timeout_seconds: float = Field(120.0, alias="HTTP_TIMEOUT_SECONDS")

    lro_initial_delay_seconds: float = Field(5.0, alias="LRO_INITIAL_DELAY_SECONDS")
    lro_max_delay_seconds: float = Field(60.0, alias="LRO_MAX_DELAY_SECONDS")
    lro_backoff_multiplier: float = Field(1.5, alias="LRO_BACKOFF_MULTIPLIER")
    lro_max_attempts: int = Field(120, alias="LRO_MAX_ATTEMPTS")

    strict_input_resolution: bool = Field(False, alias="STRICT_INPUT_RESOLUTION")

    vertex_base_url: str | None = Field(None, alias="VERTEX_BASE_URL")
    tts_base_url: str = Field(TTS_BASE_URL, alias="TTS_BASE_URL")
    storage_base_url: str = Field(STORAGE_BASE_URL, alias="STORAGE_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def vertex_host(self) -> str:
        """Return the regional Vertex AI host, unless overridden."""

        if self.vertex_base_url:
            return self.vertex_base_url.rstrip("/")
        return VERTEX_HOST_TEMPLATE.format(location=self.location)

    def vertex_model_endpoint(self, model: str, method: str = "predict") -> str:
        """Return the publisher model endpoint for ``method`` on ``model``."""

        return (
            f"{self.vertex_host}/v1/projects/{self.project_id}/locations/{self.location}"
            f"/publishers/google/models/{model}:{method}"
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
