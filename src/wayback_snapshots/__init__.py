"""Wayback Machine snapshot client.

Discover archived captures of a URL or domain and fetch their HTML::

    from wayback_snapshots import ArchiveClient

    client = ArchiveClient()
    snapshots = await client.get_snapshots("example.com", limit=5)
    content = await client.get_snapshot_html(snapshots[0])
"""

from __future__ import annotations

from wayback_snapshots.core.exceptions import (
    ArchiveClientError,
    ArchiveTimeoutError,
    FetchFailureError,
    HttpStatusError,
    RateLimitExceededError,
    SnapshotValidationError,
)
from wayback_snapshots.wayback.client import ArchiveClient
from wayback_snapshots.wayback.models import Snapshot, SnapshotContent

__all__ = [
    "ArchiveClient",
    "ArchiveClientError",
    "ArchiveTimeoutError",
    "FetchFailureError",
    "HttpStatusError",
    "RateLimitExceededError",
    "Snapshot",
    "SnapshotContent",
    "SnapshotValidationError",
]
