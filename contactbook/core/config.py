"""
Configuration helpers for the contact book backend.

Every tunable is read from an environment variable once and exposed through
a frozen Settings object, so the rest of the package never touches os.environ.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    max_image_bytes: int
    db_timeout_seconds: int
    log_level: str
    sql_echo: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=(os.getenv("DATABASE_URL") or "sqlite:///contactbook.db").strip(),
        max_image_bytes=_int(os.getenv("MAX_IMAGE_BYTES", "64000"), 64000),
        db_timeout_seconds=_int(os.getenv("DB_TIMEOUT_SECONDS", "10"), 10),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        sql_echo=_bool(os.getenv("SQL_ECHO"), False),
    )
