"""
Environment-driven settings for the task list service, using pydantic-settings.

Every field can be overridden with a TASKLIST_-prefixed environment variable
or a line in a local .env file, e.g. TASKLIST_PORT=9000.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    # Storage
    DATABASE_PATH: Path = Path("database.json")

    # Logging
    LOG_LEVEL: str = "INFO"

    # Cross-origin policy: any http://localhost origin, or the literal "null"
    CORS_ORIGIN_REGEX: str = r"http://localhost.*|null"
    CORS_MAX_AGE: int = 3600

    class Config:
        env_prefix = "TASKLIST_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
