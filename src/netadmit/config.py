"""Runtime settings for netadmit.

Settings are read from ``NETADMIT_*`` environment variables (and a ``.env``
file if present) via pydantic-settings.

Environment Variables:
    NETADMIT_FAIL_FAST: Stop at the first failing rule (default: true).
    NETADMIT_LOG_LEVEL: Minimum log level (default: INFO).
    NETADMIT_JSON_LOGS: Render logs as JSON lines (default: false).

Example:
    >>> from netadmit.config import get_settings
    >>> get_settings().fail_fast
    True
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_settings: AdmissionSettings | None = None


class AdmissionSettings(BaseSettings):
    """Settings controlling rule chain aggregation and logging."""

    model_config = SettingsConfigDict(
        env_prefix="NETADMIT_",
        env_file=".env",
        extra="ignore",
    )

    fail_fast: bool = Field(
        default=True,
        description="Stop at the first failing rule instead of collecting all errors",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON instead of console output",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_settings() -> AdmissionSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        _settings = AdmissionSettings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them.

    Intended for tests that change NETADMIT_* variables.
    """
    global _settings
    _settings = None
