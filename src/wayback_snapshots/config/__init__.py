"""Configuration package for the Wayback snapshot client.

Re-exports the settings symbols so callers can write::

    from wayback_snapshots.config import ArchiveSettings, get_settings
"""

from __future__ import annotations

from wayback_snapshots.config.settings import ArchiveSettings, get_settings

__all__ = [
    "ArchiveSettings",
    "get_settings",
]
