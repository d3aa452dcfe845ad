# session_scheduler/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    APP_NAME: str = "Session Scheduler Engine"

    # Root level for the session_scheduler logger
    LOG_LEVEL: str = "INFO"

    # Roster label for vote records that don't say where they were cast
    DEFAULT_VOTE_SOURCE: str = "web"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
