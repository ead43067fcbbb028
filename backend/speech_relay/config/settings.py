from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Google Cloud
    GOOGLE_APPLICATION_CREDENTIALS: str | None = Field(None)
    GOOGLE_PROJECT_ID: str | None = Field(None)
    GOOGLE_LOCATION: str = Field("global")

    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(3000)
    DEBUG: bool = Field(False)
    LOG_LEVEL: str = Field("INFO")

    # Relay behaviour
    DEFAULT_MODE: Literal["stream", "batch"] = Field("stream")
    DEFAULT_SOURCE_LANGUAGE: str = Field("en")
    DEFAULT_TARGET_LANGUAGE: str = Field("vi")
    ECHO_ORIGINAL: bool = Field(False)
    ECHO_DELAY_SEC: float = Field(0.3)
    STRIP_FILLER_WORDS: bool = Field(False)

    # Audio coming from the browser recorder
    AUDIO_ENCODING: str = Field("WEBM_OPUS")
    AUDIO_SAMPLE_RATE_HZ: int = Field(48000)

    TTS_CACHE_SIZE: int = Field(100)

    # Metrics
    METRICS_ENABLED: bool = Field(False)
    METRICS_PORT: int = Field(8001)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()
