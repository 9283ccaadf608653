"""Settings: environment-driven server configuration."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Server limits, identification header and logging options.

    Values are read from ``EXPRESSO_*`` environment variables or a ``.env``
    file. ``read_timeout`` bounds the request body read and ``write_timeout``
    bounds file reads performed while sending a response.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPRESSO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=0, le=65535)

    read_timeout: float = Field(default=10.0, gt=0)
    write_timeout: float = Field(default=10.0, gt=0)
    max_header_bytes: int = Field(default=1 << 20, ge=1024)

    powered_by: str = Field(default="Expresso")

    log_level: str = Field(default="INFO")
    log_color: bool = Field(default=True)
    debug: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LEVELS:
            raise ValueError(
                f"Invalid log_level '{v}'. Must be one of: {sorted(_VALID_LEVELS)}"
            )
        return upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Install a stream handler on the ``expresso`` logger tree."""
    settings = settings or get_settings()
    root = logging.getLogger("expresso")
    root.setLevel(settings.log_level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
