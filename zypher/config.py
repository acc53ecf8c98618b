"""
Zypher runtime settings.

Only operational knobs live here; the cryptographic parameters are fixed
constants in :mod:`zypher.algo` because they are part of the artifact
format.
"""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseSettings):
    app_name: str = "Zypher"
    log_level: str = "INFO"

    # worker pool size for concurrent seal / open jobs
    max_workers: int = 4

    # files are held fully in memory
    max_upload_mb: int = 200

    model_config = SettingsConfigDict(
        env_prefix="ZYPHER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level

    @field_validator("max_workers", "max_upload_mb")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


def configure_logging(level: str | None = None) -> None:
    """Install a root handler; call once from an entry point."""
    logging.basicConfig(level=level or settings.log_level, format=LOG_FORMAT)


settings = Settings()
