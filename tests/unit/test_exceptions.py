"""Unit tests for the exception hierarchy in ``core/exceptions.py``."""

from __future__ import annotations

import pytest

from wayback_snapshots.core.exceptions import (
    ArchiveClientError,
    ArchiveTimeoutError,
    FetchFailureError,
    HttpStatusError,
    RateLimitExceededError,
    SnapshotValidationError,
)


@pytest.mark.parametrize(
    "exc",
    [
        SnapshotValidationError("bad snapshot"),
        ArchiveTimeoutError(1000),
        RateLimitExceededError(3),
        HttpStatusError("HTTP 500", status_code=500),
        FetchFailureError("boom"),
    ],
)
def test_all_subclass_archive_client_error(exc: ArchiveClientError) -> None:
    assert isinstance(exc, ArchiveClientError)


def test_timeout_message_carries_duration() -> None:
    exc = ArchiveTimeoutError(120_000, operation="get_snapshots")

    assert str(exc) == "Request timeout after 120000ms"
    assert exc.timeout_ms == 120_000
    assert exc.operation == "get_snapshots"


def test_rate_limit_default_message_names_retries() -> None:
    exc = RateLimitExceededError(3)

    assert "after 3 retries" in str(exc)
    assert exc.retries == 3


def test_rate_limit_message_override() -> None:
    exc = RateLimitExceededError(2, message="CDX API rate limit exceeded after 2 retries.")

    assert str(exc) == "CDX API rate limit exceeded after 2 retries."
    assert exc.retries == 2


def test_http_status_label() -> None:
    assert HttpStatusError("HTTP 404", status_code=404).status_label == "404"
    assert HttpStatusError("HTTP Unknown").status_label == "Unknown"


def test_http_status_from_status_fills_label() -> None:
    exc = HttpStatusError.from_status("CDX API returned HTTP {status}", 503, operation="get_snapshots")
    missing = HttpStatusError.from_status("CDX API returned HTTP {status}", None)

    assert str(exc) == "CDX API returned HTTP 503"
    assert exc.status_code == 503
    assert exc.operation == "get_snapshots"
    assert str(missing) == "CDX API returned HTTP Unknown"
    assert missing.status_label == "Unknown"


def test_validation_error_is_value_error() -> None:
    assert isinstance(SnapshotValidationError("x"), ValueError)
