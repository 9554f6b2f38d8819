"""Environment-driven settings for linkstate.

Values are read from ``LINKSTATE_``-prefixed environment variables and an
optional ``.env`` file; unknown variables are ignored.

Examples:
    >>> from linkstate.core.settings import LinkStateSettings
    >>> LinkStateSettings(batch_size=0).batch_size
    0

    LINKSTATE_BATCH_SIZE=0 LINKSTATE_LOG_LEVEL=DEBUG python app.py
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LinkStateSettings(BaseSettings):
    """Settings shared by the engine, the sparse factory and the default transport.

    Fields
    ──────
    log_level     : structlog log level
    log_format    : ``json`` | ``console`` | ``auto`` (JSON when stdout is not a tty)
    batch_size    : default for item hydration; > 0 concurrent, otherwise sequential
    mapped_title  : attribute that receives a feed item's title on sparse items
    http_timeout  : seconds, applied by the httpx transport
    accept        : ``Accept`` header sent by the httpx transport
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKSTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console", "auto"] = "auto"

    # ── Synchronization ──────────────────────────────────────────
    batch_size: int = 1
    mapped_title: str = "name"

    # ── Transport ────────────────────────────────────────────────
    http_timeout: float = Field(default=30.0, gt=0)
    accept: str = "application/json"


@lru_cache(maxsize=1)
def get_settings() -> LinkStateSettings:
    """Return the process-wide settings (read once)."""
    return LinkStateSettings()
