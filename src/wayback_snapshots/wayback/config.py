"""Constants for the Wayback Machine snapshot client.

Defines CDX API and playback endpoints, default query parameters, request
headers and the default timeout/retry policy used by
:class:`~wayback_snapshots.wayback.client.ArchiveClient`.

The CDX API is free and unauthenticated, and rate-limits by IP.  It answers
HTTP 429 when the caller is too fast; the client backs off exponentially.

Reference: https://github.com/internetarchive/wayback/tree/master/wayback-cdx-server
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# API constants
# ---------------------------------------------------------------------------

WB_CDX_BASE_URL: str = "https://web.archive.org/cdx/search/cdx"
"""Base URL for the Wayback Machine CDX API.

Query parameters are appended as standard query string parameters.
"""

WB_WEB_BASE_URL: str = "https://web.archive.org/web"
"""Base URL for snapshot playback: ``{base}/{timestamp}/{original_url}``."""

WB_RAW_PLAYBACK_MODIFIER: str = "id_"
"""Suffix appended to the timestamp to request raw archived content.

``/web/20200101000000id_/http://example.com`` returns the page as captured,
without the Wayback Machine toolbar or rewritten links.
"""

WB_DEFAULT_OUTPUT: str = "json"
"""Output format for CDX API responses.

``json`` returns a 2D array: first row is field names, subsequent rows are
capture records ``[urlkey?, timestamp, original, mimetype, statuscode, ...]``
in the order given by the header row.
"""

WB_DEFAULT_FIELDS: str = "timestamp,original,mimetype,statuscode,digest,length"
"""Fields requested from the CDX API, in row order.

Without ``fl`` the index prepends ``urlkey`` to every row.  Pinning the field
list keeps ``timestamp`` at position 0 and ``statuscode`` at position 3.
"""

WB_DEFAULT_STATUS_FILTER: str = "statuscode:200"
"""Status code filter applied to CDX queries.

Only return captures where the HTTP status was 200 (OK) to exclude
redirects, error pages, and partial content responses.
"""

WB_DEFAULT_LIMIT: int = 10
"""Default maximum number of CDX rows requested per ``get_snapshots`` call."""

WB_HEALTH_CHECK_TARGET: str = "example.com"
"""Domain queried by ``health_check``; reliably archived for decades."""

# ---------------------------------------------------------------------------
# Request headers
# ---------------------------------------------------------------------------

WB_USER_AGENT: str = "WaybackSnapshots/1.0 (snapshot-client; research use)"
"""User-Agent sent with CDX and playback requests."""

WB_HTML_ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
"""``Accept`` header for snapshot playback requests, HTML first."""

# ---------------------------------------------------------------------------
# Timeout and retry policy
# ---------------------------------------------------------------------------

WB_DEFAULT_TIMEOUT_MS: int = 120_000
"""Per-request timeout in milliseconds."""

WB_DEFAULT_MAX_RETRIES: int = 3
"""Retries after HTTP 429 before raising ``RateLimitExceededError``."""

WB_DEFAULT_BACKOFF_BASE_MS: int = 2_000
"""Backoff unit: waits are 2s, 4s, 8s for retries 0, 1, 2."""

WB_HEALTH_CHECK_TIMEOUT_MS: int = 15_000
"""Upper bound on the health-check request, regardless of ``timeout_ms``."""
