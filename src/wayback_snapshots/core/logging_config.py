"""Structured logging configuration using structlog.

Call ``configure_logging()`` once from whatever embeds the client (a CLI,
a worker, a service).  Library modules log through the stdlib API::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("wayback: %d snapshots for %s", count, target)

Structlog usage (richer context binding) works as well::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("snapshot fetched", snapshot_url=url, length=length)

Both paths end in the same renderer: newline-delimited JSON in production,
coloured console output at ``DEBUG``.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

from wayback_snapshots.config.settings import get_settings

# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------

_MAX_VALUE_CHARS: int = 500
"""Longest string value rendered as-is.  Archived HTML bodies routinely
exceed this and are cut down before reaching a renderer."""


def _truncate_long_values(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Shorten oversized string values, leaving the ``event`` message intact.

    Args:
        logger: The wrapped logger instance (unused).
        method_name: The log method name (unused).
        event_dict: Mutable event dictionary being assembled.

    Returns:
        The event dict with long values replaced by a truncated prefix.
    """
    for key, val in list(event_dict.items()):
        if key == "event" or not isinstance(val, str):
            continue
        if len(val) > _MAX_VALUE_CHARS:
            event_dict[key] = f"{val[:_MAX_VALUE_CHARS]}... [{len(val)} chars]"
    return event_dict


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Standard fields added to every log record:

    - ``timestamp``: ISO 8601 string.
    - ``level``: Log level name (``"info"``, ``"warning"``, etc.).
    - ``logger``: Module name that emitted the record.
    - ``event``: The log message string.

    Calling this more than once is safe; handlers on the root logger are
    replaced, not appended.

    Args:
        log_level: Logging verbosity string.  One of ``"DEBUG"``, ``"INFO"``,
            ``"WARNING"``, ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive.
            Defaults to ``WAYBACK_LOG_LEVEL`` via :func:`get_settings`.
    """
    if log_level is None:
        log_level = get_settings().log_level
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _truncate_long_values,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # httpx logs every request at INFO.
    if not is_development:
        for noisy_logger in ("httpx", "httpcore"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
