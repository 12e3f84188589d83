"""Result types returned by :class:`~wayback_snapshots.wayback.client.ArchiveClient`."""

from __future__ import annotations

from dataclasses import dataclass, field

from wayback_snapshots.wayback._fetcher import parse_wb_timestamp


@dataclass(frozen=True)
class Snapshot:
    """One archived capture of a page, as listed by the CDX index.

    Attributes:
        timestamp: 14-digit CDX capture timestamp (``YYYYMMDDHHmmss``).
        original_url: URL the capture was taken of, as recorded by the archive.
        status_code: HTTP status of the original capture, or ``None`` when the
            index did not report a numeric one.
    """

    timestamp: str
    original_url: str
    status_code: int | None = None

    @property
    def captured_at(self) -> str | None:
        """Capture time as an ISO 8601 UTC string, or ``None`` if unparseable."""
        return parse_wb_timestamp(self.timestamp)


@dataclass(frozen=True)
class SnapshotContent:
    """Archived page body for a single snapshot.

    ``length`` is derived from ``html`` and cannot be passed in.

    Attributes:
        html: Response body decoded as text.
        snapshot_url: Playback URL the body was fetched from.
        length: Number of characters in ``html``.
    """

    html: str
    snapshot_url: str
    length: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "length", len(self.html))
