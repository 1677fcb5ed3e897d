"""Configuration for peanutfm.

Created: 2026-10-19

Settings come from ``PEANUTFM_*`` environment variables or a ``.env`` file
in the working directory. ``get_settings()`` caches the loaded instance;
tests reset it through ``peanutfm.lifecycle.reset_all()``.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from peanutfm import lifecycle

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".peanutfm"


def get_config_dir() -> Path:
    """Get/create the config directory (``~/.peanutfm`` by default)."""
    override = os.environ.get("PEANUTFM_CONFIG_DIR")
    d = Path(override).expanduser() if override else _DEFAULT_CONFIG_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


class Settings(BaseSettings):
    """Runtime settings."""

    model_config = SettingsConfigDict(
        env_prefix="PEANUTFM_",
        env_file=".env",
        extra="ignore",
    )

    server_url: str = Field(
        default="http://127.0.0.1:3000",
        description="Base URL of the file server (scheme + host + port)",
    )
    request_timeout: float = Field(default=15.0, gt=0)
    transfer_timeout: float = Field(
        default=60.0, gt=0, description="Timeout for upload and download calls"
    )

    notification_display_seconds: float = Field(default=2.7, ge=0)
    notification_exit_seconds: float = Field(default=0.3, ge=0)

    collation_locale: str = Field(
        default="",
        description="Locale used to order names (e.g. 'zh_CN.UTF-8'); empty keeps the process locale",
    )
    new_file_name: str = "New File"
    download_dir: Path | None = None
    log_level: str = "INFO"

    @field_validator("server_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("new_file_name")
    @classmethod
    def _non_blank_name(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("new_file_name must be a non-empty name without '/'")
        return v

    @classmethod
    def load(cls) -> Settings:
        """Load a fresh, uncached Settings instance."""
        return cls()

    def resolved_download_dir(self) -> Path:
        """Directory downloads land in (``<config_dir>/downloads`` unless configured)."""
        d = self.download_dir.expanduser() if self.download_dir else get_config_dir() / "downloads"
        d.mkdir(parents=True, exist_ok=True)
        return d


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    settings = Settings.load()
    logger.debug("Loaded settings for server %s", settings.server_url)
    return settings


lifecycle.register("settings", reset=get_settings.cache_clear)
