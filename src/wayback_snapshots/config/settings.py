"""Client settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
variable is prefixed with ``WAYBACK_`` (e.g. ``WAYBACK_TIMEOUT_MS=30000``).

Usage::

    from wayback_snapshots.config.settings import get_settings

    settings = get_settings()
    client = ArchiveClient(settings)

Settings are held by each :class:`~wayback_snapshots.wayback.client.ArchiveClient`
instance.  Build an ``ArchiveSettings`` directly to run clients with
different policies side by side.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wayback_snapshots.wayback.config import (
    WB_CDX_BASE_URL,
    WB_DEFAULT_BACKOFF_BASE_MS,
    WB_DEFAULT_MAX_RETRIES,
    WB_DEFAULT_TIMEOUT_MS,
    WB_USER_AGENT,
    WB_WEB_BASE_URL,
)


class ArchiveSettings(BaseSettings):
    """Timeout, retry and endpoint configuration for the archive client.

    All fields have defaults, so an empty environment yields a working client.
    """

    model_config = SettingsConfigDict(
        env_prefix="WAYBACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Request lifecycle
    # ------------------------------------------------------------------

    timeout_ms: int = Field(default=WB_DEFAULT_TIMEOUT_MS, gt=0)
    """Timeout applied to every underlying network call, in milliseconds."""

    max_retries: int = Field(default=WB_DEFAULT_MAX_RETRIES, ge=0)
    """Retries allowed after an HTTP 429 before giving up.

    An operation makes at most ``max_retries + 1`` network attempts.
    """

    backoff_base_ms: int = Field(default=WB_DEFAULT_BACKOFF_BASE_MS, ge=0)
    """Backoff unit.  Retry *n* (zero-based) waits ``2**n * backoff_base_ms``."""

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    cdx_base_url: str = WB_CDX_BASE_URL
    """CDX index endpoint queried by ``get_snapshots``."""

    web_base_url: str = WB_WEB_BASE_URL
    """Playback base; snapshot URLs are ``{web_base_url}/{timestamp}/{url}``."""

    raw_playback: bool = False
    """Request raw archived content via the ``id_`` playback modifier.

    Raw playback omits the Wayback toolbar and the archive's link rewriting.
    """

    user_agent: str = WB_USER_AGENT
    """``User-Agent`` header sent with every request."""

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Level passed to :func:`~wayback_snapshots.core.logging_config.configure_logging`."""


@lru_cache
def get_settings() -> ArchiveSettings:
    """Return the cached environment-backed settings.

    Uses ``functools.lru_cache`` so that Pydantic Settings reads the environment
    and .env file exactly once per process lifetime.  In tests, call
    ``get_settings.cache_clear()`` after patching environment variables.

    Returns:
        ArchiveSettings: The validated settings object.
    """
    return ArchiveSettings()
