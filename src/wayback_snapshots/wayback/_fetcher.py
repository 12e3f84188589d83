"""Pure helpers for Wayback Machine CDX queries and playback URLs.

Internal module used by
:class:`~wayback_snapshots.wayback.client.ArchiveClient`.
Not part of the public API.

Provides:
- :func:`normalize_target`: reduce a URL or domain to the CDX ``url`` form.
- :func:`build_cdx_params`: query parameters for one CDX index lookup.
- :func:`build_snapshot_url`: playback URL for a capture.
- :func:`parse_status_code`: lenient integer parse of a CDX status field.
- :func:`format_wb_timestamp`: format datetime values for CDX API params.
- :func:`parse_wb_timestamp`: parse CDX timestamps to ISO 8601.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit

from wayback_snapshots.core.exceptions import SnapshotValidationError
from wayback_snapshots.wayback.config import (
    WB_DEFAULT_FIELDS,
    WB_DEFAULT_OUTPUT,
    WB_DEFAULT_STATUS_FILTER,
    WB_RAW_PLAYBACK_MODIFIER,
)

logger = logging.getLogger(__name__)

_SCHEME_PREFIXES: tuple[str, ...] = ("http://", "https://")
_SCHEME_PREFIX_RE = re.compile(r"^https?://")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def normalize_target(target: str) -> str:
    """Normalize a target URL or bare domain for the CDX ``url`` parameter.

    ``"https://Example.com/page/?q=1"`` becomes ``"example.com/page"``;
    ``"example.com"`` is returned unchanged.

    Steps:

    1. Trim surrounding whitespace.
    2. If the value starts with ``http://`` or ``https://`` and parses to a
       URL with a host, replace it with ``host + path``.  Scheme, userinfo,
       port, query and fragment are dropped.  If it does not parse, strip
       the scheme prefix textually instead.
    3. Strip one trailing ``/`` and any whitespace it leaves exposed.

    Args:
        target: URL or domain supplied by the caller.

    Returns:
        The normalized target.  Never raises.
    """
    normalized = target.strip()
    if normalized.startswith(_SCHEME_PREFIXES):
        try:
            parsed = urlsplit(normalized)
            hostname = parsed.hostname
            path = parsed.path
        except ValueError:
            hostname = None
            path = ""
        if hostname:
            normalized = hostname + (path or "/")
        else:
            normalized = _SCHEME_PREFIX_RE.sub("", normalized)
    if normalized.endswith("/"):
        normalized = normalized[:-1].rstrip()
    return normalized


def build_cdx_params(
    url: str,
    limit: int,
    wb_from: str | None = None,
    wb_to: str | None = None,
) -> dict[str, Any]:
    """Build query parameters for a CDX index lookup.

    Args:
        url: Normalized target (see :func:`normalize_target`).
        limit: Maximum rows requested from the index.
        wb_from: WB-formatted start timestamp or ``None``.
        wb_to: WB-formatted end timestamp or ``None``.

    Returns:
        Dict suitable for ``httpx`` ``params=``.
    """
    params: dict[str, Any] = {
        "url": url,
        "output": WB_DEFAULT_OUTPUT,
        "fl": WB_DEFAULT_FIELDS,
        "filter": WB_DEFAULT_STATUS_FILTER,
        "limit": str(limit),
    }
    if wb_from:
        params["from"] = wb_from
    if wb_to:
        params["to"] = wb_to
    return params


def build_snapshot_url(
    web_base_url: str,
    timestamp: str,
    original_url: str,
    raw: bool = False,
) -> str:
    """Build the playback URL for one capture.

    The archive expects the full original URL, scheme included, after the
    timestamp, so *original_url* is embedded verbatim.

    Args:
        web_base_url: Playback base, e.g. ``https://web.archive.org/web``.
        timestamp: 14-digit CDX capture timestamp.
        original_url: Captured URL as listed by the index.
        raw: Append the ``id_`` modifier to request unmodified content.

    Returns:
        ``{web_base_url}/{timestamp}/{original_url}``.
    """
    modifier = WB_RAW_PLAYBACK_MODIFIER if raw else ""
    return f"{web_base_url}/{timestamp}{modifier}/{original_url}"


def parse_status_code(value: Any) -> int | None:
    """Parse the CDX ``statuscode`` field.

    The index reports ``"-"`` for captures without a status (revisits,
    warc/revisit records), so non-numeric values map to ``None``.  A leading
    integer is accepted even when followed by other characters.

    Args:
        value: Raw field value (normally a string).

    Returns:
        Integer status code, or ``None``.
    """
    if not value:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def format_wb_timestamp(value: datetime | str | None) -> str | None:
    """Format a datetime value as a Wayback Machine CDX timestamp string.

    CDX API timestamp format: ``YYYYMMDDHHmmss`` (14 digits).  Aware values
    are converted to UTC; naive values are taken as UTC already.

    Args:
        value: Datetime object, ISO 8601 string, or ``None``.

    Returns:
        CDX-formatted timestamp string or ``None`` when *value* is ``None``.

    Raises:
        SnapshotValidationError: If *value* is a string that is not ISO 8601.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat() accepts a trailing "Z" only from Python 3.11.
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise SnapshotValidationError(
                f"Invalid ISO 8601 date: {value!r}"
            ) from exc
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y%m%d%H%M%S")


def parse_wb_timestamp(timestamp: str | None) -> str | None:
    """Parse a Wayback Machine CDX timestamp to an ISO 8601 string.

    Args:
        timestamp: Raw CDX ``timestamp`` field value.

    Returns:
        ISO 8601 datetime string with UTC timezone, or ``None``.
    """
    if not timestamp:
        return None
    try:
        dt = datetime.strptime(timestamp, "%Y%m%d%H%M%S")
    except ValueError:
        logger.debug("wayback: could not parse timestamp '%s'", timestamp)
        return None
    return dt.replace(tzinfo=timezone.utc).isoformat()
