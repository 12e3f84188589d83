"""Shared pytest fixtures for the Wayback snapshot client tests.

Fixture summary
---------------
settings        : ``ArchiveSettings`` built from defaults only (no env, no .env).
archive_client  : ``ArchiveClient`` using ``settings``.
cdx_rows        : CDX JSON body with a header row and two captures.

All tests run without network access; HTTP is mocked with respx or an
``httpx.MockTransport``.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from wayback_snapshots.config.settings import ArchiveSettings, get_settings
from wayback_snapshots.wayback.client import ArchiveClient


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Make every test read the environment afresh via ``get_settings()``."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ArchiveSettings:
    return ArchiveSettings(_env_file=None)


@pytest.fixture
def archive_client(settings: ArchiveSettings) -> ArchiveClient:
    return ArchiveClient(settings)


@pytest.fixture
def cdx_rows() -> list[list[str]]:
    return [
        ["timestamp", "original", "mimetype", "statuscode", "digest", "length"],
        ["20200101000000", "http://example.com", "text/html", "200", "abc123", "500"],
        ["20210615123045", "https://example.com/", "text/html", "200", "def456", "812"],
    ]
