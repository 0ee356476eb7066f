"""Application configuration using Pydantic Settings."""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "therapy-session-tracker"
    app_version: str = "0.1.0"

    # Logging
    log_level: str = "INFO"

    # Storage settings
    storage_backend: Literal["file", "local", "dynamodb"] = "file"
    storage_dir: str = ".therapy_sessions"
    session_storage_key: str = "speech_therapy_current_session"

    # Session defaults
    default_session_duration: int = 45  # minutes
    tick_interval: float = 1.0  # seconds per elapsed-clock tick

    # AWS settings for the DynamoDB storage backend
    aws_region: str = "us-west-2"
    sessions_table_name: str = "TherapySessions"

