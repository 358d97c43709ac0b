from __future__ import annotations

from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
    )

    # Persistence
    STORE_BACKEND: Literal["memory", "supabase"] = "memory"
    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Recipe extraction (LLM)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Speech-to-text
    TRANSCRIPTION_LANGUAGE: str = "de"
    WHISPER_MODEL: str = "medium"
    WHISPER_DEVICE: Literal["auto", "cuda", "cpu"] = "auto"
    WHISPER_BEAM_SIZE: int = 5

    # Video import
    IMPORT_TEMP_DIR: str = "data/tmp"
    FFMPEG_BINARY: str = "ffmpeg"
    FFPROBE_BINARY: str = "ffprobe"
    TRANSCODE_TIMEOUT_SECONDS: int = 300
    MAX_UPLOAD_MB: int = 200


settings = Settings()
