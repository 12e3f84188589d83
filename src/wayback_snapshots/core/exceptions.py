"""Exception hierarchy for the Wayback snapshot client.

All custom exceptions subclass ``ArchiveClientError``, so callers can catch
every client failure with a single ``except`` clause when needed.

Hierarchy::

    ArchiveClientError
    ├── SnapshotValidationError   (also ValueError)
    ├── ArchiveTimeoutError       (timeout_ms: int)
    ├── RateLimitExceededError    (retries: int)
    ├── HttpStatusError           (status_code: int | None)
    └── FetchFailureError
"""

from __future__ import annotations


class ArchiveClientError(Exception):
    """Base class for all Wayback snapshot client exceptions.

    Args:
        message: Human-readable description of the failure.
        operation: Client operation that failed (e.g. ``"get_snapshots"``).
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class SnapshotValidationError(ArchiveClientError, ValueError):
    """Raised when caller input cannot be turned into a request.

    Covers a snapshot without a timestamp or original URL and a date bound
    that is not ISO 8601.  Raised before any network call is made.  Never
    retried.
    """


class ArchiveTimeoutError(ArchiveClientError):
    """Raised when a network call does not complete within the configured timeout.

    The in-flight request has already been cancelled when this is raised.

    Args:
        timeout_ms: Configured timeout that elapsed, in milliseconds.
        operation: Client operation that timed out.
    """

    def __init__(self, timeout_ms: int, operation: str | None = None) -> None:
        super().__init__(f"Request timeout after {timeout_ms}ms", operation=operation)
        self.timeout_ms = timeout_ms


class RateLimitExceededError(ArchiveClientError):
    """Raised when HTTP 429 persists after every retry has been used.

    Args:
        retries: Number of retries performed before giving up.
        operation: Client operation that was rate-limited.
        message: Optional override for the default message.
    """

    def __init__(
        self,
        retries: int,
        operation: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message
            or f"Rate limit exceeded after {retries} retries. Please try again later.",
            operation=operation,
        )
        self.retries = retries


def _status_label(status_code: int | None) -> str:
    return str(status_code) if status_code is not None else "Unknown"


class HttpStatusError(ArchiveClientError):
    """Raised on a non-success, non-429 HTTP response.

    Args:
        message: Human-readable description including the status.
        status_code: HTTP status code, or ``None`` when no response was received.
        operation: Client operation that failed.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation)
        self.status_code = status_code

    @classmethod
    def from_status(
        cls,
        template: str,
        status_code: int | None,
        operation: str | None = None,
    ) -> HttpStatusError:
        """Build the error with ``{status}`` in *template* set to :attr:`status_label`."""
        return cls(
            template.format(status=_status_label(status_code)),
            status_code=status_code,
            operation=operation,
        )

    @property
    def status_label(self) -> str:
        """Status code as text, ``"Unknown"`` when no response was received."""
        return _status_label(self.status_code)


class FetchFailureError(ArchiveClientError):
    """Raised for any other network or parsing failure.

    The original exception is chained via ``raise ... from exc``; its message is
    embedded in this exception's message.
    """
