# backend/studyroom/core/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    """Runtime settings for the study room service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development")
    is_testing: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./studyroom.db")
    redis_url: Optional[str] = Field(default=None)

    # Local time for "today", Sunday detection and the weekly reset boundary
    timezone: str = Field(default="Asia/Seoul")

    max_daily_hours_per_student: int = Field(default=2, ge=1)
    retention_days: int = Field(default=7, ge=0)

    weekly_reset_enabled: bool = Field(default=True)

    booking_lock_timeout_seconds: float = Field(default=5.0, gt=0)
    booking_lock_ttl_seconds: int = Field(default=30, ge=1)

    admin_token: Optional[SecretStr] = Field(default=None)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
