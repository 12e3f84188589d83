"""Wayback Machine snapshot client.

Discovers archived captures of a URL or domain through the CDX index API
and fetches the archived HTML of a chosen capture.

**Design notes**:

- Every network call runs under ``asyncio.wait_for`` with the configured
  timeout; on expiry the request is cancelled and
  :class:`~wayback_snapshots.core.exceptions.ArchiveTimeoutError` is raised.
- HTTP 429 is retried in a loop with exponential backoff
  (``2**n * backoff_base_ms``) up to ``max_retries`` times.  Timeouts and
  other HTTP errors are not retried.
- No state is shared between calls.  Without an injected client, each
  operation opens and closes its own :class:`httpx.AsyncClient`.
- Pure URL and timestamp helpers live in :mod:`._fetcher`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import httpx

from wayback_snapshots.config.settings import ArchiveSettings, get_settings
from wayback_snapshots.core.exceptions import (
    ArchiveTimeoutError,
    FetchFailureError,
    HttpStatusError,
    RateLimitExceededError,
    SnapshotValidationError,
)
from wayback_snapshots.wayback._fetcher import (
    build_cdx_params,
    build_snapshot_url,
    format_wb_timestamp,
    normalize_target,
    parse_status_code,
)
from wayback_snapshots.wayback.config import (
    WB_DEFAULT_LIMIT,
    WB_HEALTH_CHECK_TARGET,
    WB_HEALTH_CHECK_TIMEOUT_MS,
    WB_HTML_ACCEPT,
)
from wayback_snapshots.wayback.models import Snapshot, SnapshotContent

logger = logging.getLogger(__name__)

_PLATFORM = "wayback"


class ArchiveClient:
    """Async client for the Wayback Machine CDX index and snapshot playback.

    Args:
        settings: Timeout, retry and endpoint configuration.  Defaults to
            :func:`~wayback_snapshots.config.settings.get_settings`.
        timeout_ms: Per-request timeout override in milliseconds.
        http_client: Optional injected :class:`httpx.AsyncClient`.  It is
            used as-is and never closed by this class.
    """

    def __init__(
        self,
        settings: ArchiveSettings | None = None,
        *,
        timeout_ms: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.timeout_ms = timeout_ms if timeout_ms is not None else self.settings.timeout_ms
        self._http_client = http_client

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    # ------------------------------------------------------------------
    # Pure helpers
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_target(target: str) -> str:
        """See :func:`~wayback_snapshots.wayback._fetcher.normalize_target`."""
        return normalize_target(target)

    def build_snapshot_url(self, timestamp: str, original_url: str) -> str:
        """Return the playback URL for a capture under the configured base.

        The original URL is embedded unmodified, scheme included.
        """
        return build_snapshot_url(
            self.settings.web_base_url,
            timestamp,
            original_url,
            raw=self.settings.raw_playback,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get_snapshots(
        self,
        target: str,
        limit: int = WB_DEFAULT_LIMIT,
        retry_count: int = 0,
        max_retries: int | None = None,
        *,
        date_from: datetime | str | None = None,
        date_to: datetime | str | None = None,
    ) -> list[Snapshot]:
        """List archived captures of *target* from the CDX index.

        Only captures whose original HTTP status was 200 are requested.  The
        first row of the JSON response is the header and is dropped; rows
        without a timestamp or original URL are skipped.

        Args:
            target: URL or bare domain (see :meth:`normalize_target`).
            limit: Maximum rows requested from the index.
            retry_count: Retries already spent on this logical request.
            max_retries: Retry cap; defaults to ``settings.max_retries``.
            date_from: Earliest capture timestamp (inclusive).
            date_to: Latest capture timestamp (inclusive).
                Strings are ISO 8601; naive values are taken as UTC.

        Returns:
            Snapshots in index order.  Empty when the index has none.

        Raises:
            SnapshotValidationError: If a date bound is not ISO 8601.  No
                request is made.
            ArchiveTimeoutError: If a request exceeds the timeout.
            RateLimitExceededError: If HTTP 429 persists after all retries.
            HttpStatusError: On any other non-success response.
            FetchFailureError: On network errors or an unparseable body.
        """
        operation = "get_snapshots"
        normalized = normalize_target(target)
        params = build_cdx_params(
            normalized,
            limit,
            wb_from=format_wb_timestamp(date_from),
            wb_to=format_wb_timestamp(date_to),
        )

        async with self._client_scope() as client:
            response = await self._get_with_retry(
                client,
                self.settings.cdx_base_url,
                operation=operation,
                params=params,
                headers={"User-Agent": self.settings.user_agent},
                retry_count=retry_count,
                max_retries=max_retries,
                rate_limit_message="CDX API rate limit exceeded after {retries} retries. "
                "Please try again later.",
                status_message="CDX API returned HTTP {status}",
                failure_prefix="Failed to fetch snapshots",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise FetchFailureError(
                f"Failed to fetch snapshots: {exc}", operation=operation
            ) from exc

        if not isinstance(data, list) or not data:
            logger.debug("wayback: no index rows for target=%s", normalized)
            return []

        snapshots: list[Snapshot] = []
        for row in data[1:]:
            snapshot = self._snapshot_from_row(row)
            if snapshot is not None:
                snapshots.append(snapshot)

        logger.debug(
            "wayback: %d snapshots for target=%s (limit=%d)",
            len(snapshots),
            normalized,
            limit,
        )
        return snapshots

    async def get_snapshot_html(
        self,
        snapshot: Snapshot,
        retry_count: int = 0,
        max_retries: int | None = None,
    ) -> SnapshotContent:
        """Fetch the archived page body for *snapshot*.

        Args:
            snapshot: Capture to fetch; needs a timestamp and an original URL.
            retry_count: Retries already spent on this logical request.
            max_retries: Retry cap; defaults to ``settings.max_retries``.

        Returns:
            The body as text with its length and the playback URL used.

        Raises:
            SnapshotValidationError: If the timestamp or URL is empty.  No
                request is made.
            ArchiveTimeoutError: If a request exceeds the timeout.
            RateLimitExceededError: If HTTP 429 persists after all retries.
            HttpStatusError: On any other non-success response.
            FetchFailureError: On network errors.
        """
        operation = "get_snapshot_html"
        if not snapshot.timestamp or not snapshot.original_url:
            raise SnapshotValidationError(
                "Snapshot must have timestamp and original_url", operation=operation
            )

        snapshot_url = self.build_snapshot_url(snapshot.timestamp, snapshot.original_url)

        async with self._client_scope() as client:
            response = await self._get_with_retry(
                client,
                snapshot_url,
                operation=operation,
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": WB_HTML_ACCEPT,
                },
                retry_count=retry_count,
                max_retries=max_retries,
                rate_limit_message="Rate limit exceeded after {retries} retries. "
                "Please try again later.",
                status_message="Failed to fetch snapshot HTML: HTTP {status}",
                failure_prefix="Failed to fetch snapshot HTML",
            )

        content = SnapshotContent(html=response.text, snapshot_url=snapshot_url)
        logger.debug("wayback: fetched %d chars from %s", content.length, snapshot_url)
        return content

    async def health_check(self) -> dict[str, Any]:
        """Verify CDX API connectivity with a one-row query.

        Never raises for HTTP or network failures; they are reported in the
        returned dict.  No retries are attempted.

        Returns:
            Dict with ``status`` (``"ok"`` | ``"degraded"`` | ``"down"``),
            ``platform``, ``checked_at``, and either ``captures_returned`` or
            ``detail``.
        """
        base: dict[str, Any] = {
            "platform": _PLATFORM,
            "checked_at": datetime.now(tz=timezone.utc).isoformat(),
        }
        params = build_cdx_params(WB_HEALTH_CHECK_TARGET, 1)
        timeout_s = min(self.timeout_ms, WB_HEALTH_CHECK_TIMEOUT_MS) / 1000

        try:
            async with self._client_scope() as client:
                response = await asyncio.wait_for(
                    client.get(
                        self.settings.cdx_base_url,
                        params=params,
                        headers={"User-Agent": self.settings.user_agent},
                        timeout=timeout_s,
                    ),
                    timeout=timeout_s,
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 503:
                return {
                    **base,
                    "status": "down",
                    "detail": "Wayback Machine CDX API returned 503 (service overloaded)",
                }
            return {
                **base,
                "status": "down" if status_code >= 500 else "degraded",
                "detail": f"HTTP {status_code} from Wayback Machine CDX API",
            }
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return {**base, "status": "down", "detail": f"Timeout after {timeout_s:g}s"}
        except httpx.RequestError as exc:
            return {**base, "status": "down", "detail": f"Connection error: {exc}"}
        except ValueError as exc:
            return {**base, "status": "degraded", "detail": f"Invalid JSON: {exc}"}

        captures = max(0, len(data) - 1) if isinstance(data, list) else 0
        return {**base, "status": "ok", "captures_returned": captures}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _client_scope(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a fresh one closed on exit."""
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            yield client

    async def _backoff_wait(self, delay_seconds: float) -> None:
        """Sleep between 429 retries."""
        await asyncio.sleep(delay_seconds)

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        operation: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
        failure_prefix: str,
    ) -> httpx.Response:
        """Issue one GET under the configured timeout.

        Raises:
            ArchiveTimeoutError: If the request does not finish in time.
                ``asyncio.wait_for`` has cancelled it by then.
            FetchFailureError: On any other transport error.
        """
        try:
            return await asyncio.wait_for(
                client.get(
                    url,
                    params=params,
                    headers=headers,
                    follow_redirects=True,
                    timeout=self.timeout_seconds,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning(
                "wayback: %s timed out after %dms for %s", operation, self.timeout_ms, url
            )
            raise ArchiveTimeoutError(self.timeout_ms, operation=operation) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchFailureError(
                f"{failure_prefix}: {exc}", operation=operation
            ) from exc

    async def _get_with_retry(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        operation: str,
        headers: dict[str, str],
        retry_count: int,
        max_retries: int | None,
        rate_limit_message: str,
        status_message: str,
        failure_prefix: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET *url*, retrying on HTTP 429 with exponential backoff.

        Attempt *n* (starting at *retry_count*) that receives a 429 waits
        ``2**n * backoff_base_ms`` before the next attempt.  After
        *max_retries* retries the 429 is raised as
        :class:`RateLimitExceededError`.

        Returns:
            The first successful (2xx) response.
        """
        retry_limit = self.settings.max_retries if max_retries is None else max_retries
        attempt = retry_count

        while True:
            response = await self._send(
                client,
                url,
                operation=operation,
                params=params,
                headers=headers,
                failure_prefix=failure_prefix,
            )

            if response.status_code == 429:
                if attempt >= retry_limit:
                    logger.warning(
                        "wayback: %s rate limited after %d retries for %s",
                        operation,
                        retry_limit,
                        url,
                    )
                    raise RateLimitExceededError(
                        retry_limit,
                        operation=operation,
                        message=rate_limit_message.format(retries=retry_limit),
                    )
                delay_ms = 2**attempt * self.settings.backoff_base_ms
                logger.info(
                    "wayback: rate limited (429) on %s. Waiting %.1fs before retry %d/%d",
                    operation,
                    delay_ms / 1000,
                    attempt + 1,
                    retry_limit,
                )
                await self._backoff_wait(delay_ms / 1000)
                attempt += 1
                continue

            if not response.is_success:
                raise HttpStatusError.from_status(
                    status_message,
                    response.status_code,
                    operation=operation,
                )

            return response

    @staticmethod
    def _snapshot_from_row(row: Any) -> Snapshot | None:
        """Map one CDX row to a :class:`Snapshot`, or ``None`` if unusable.

        Row layout: ``[timestamp, original, mimetype, statuscode, digest, length]``.
        """
        if not isinstance(row, (list, tuple)):
            return None
        timestamp = row[0] if len(row) > 0 and row[0] else ""
        original_url = row[1] if len(row) > 1 and row[1] else ""
        if not timestamp or not original_url:
            return None
        status_code = parse_status_code(row[3]) if len(row) > 3 else None
        return Snapshot(
            timestamp=str(timestamp),
            original_url=str(original_url),
            status_code=status_code,
        )
