"""Unit tests for ``ArchiveSettings`` and ``get_settings()``."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wayback_snapshots.config import ArchiveSettings, get_settings
from wayback_snapshots.wayback.config import WB_CDX_BASE_URL, WB_WEB_BASE_URL


class TestDefaults:
    def test_defaults(self) -> None:
        settings = ArchiveSettings(_env_file=None)

        assert settings.timeout_ms == 120_000
        assert settings.max_retries == 3
        assert settings.backoff_base_ms == 2_000
        assert settings.cdx_base_url == WB_CDX_BASE_URL
        assert settings.web_base_url == WB_WEB_BASE_URL
        assert settings.raw_playback is False
        assert settings.user_agent
        assert settings.log_level == "INFO"


class TestEnvironment:
    def test_prefixed_env_vars_read(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WAYBACK_TIMEOUT_MS", "5000")
        monkeypatch.setenv("WAYBACK_MAX_RETRIES", "5")
        monkeypatch.setenv("WAYBACK_RAW_PLAYBACK", "true")

        settings = ArchiveSettings(_env_file=None)

        assert settings.timeout_ms == 5_000
        assert settings.max_retries == 5
        assert settings.raw_playback is True

    def test_unprefixed_env_vars_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIMEOUT_MS", "1")

        assert ArchiveSettings(_env_file=None).timeout_ms == 120_000

    def test_get_settings_is_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WAYBACK_MAX_RETRIES", "7")
        first = get_settings()
        monkeypatch.setenv("WAYBACK_MAX_RETRIES", "1")

        assert get_settings() is first
        assert get_settings().max_retries == 7

        get_settings.cache_clear()
        assert get_settings().max_retries == 1


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"timeout_ms": 0},
            {"timeout_ms": -1},
            {"max_retries": -1},
            {"backoff_base_ms": -5},
        ],
    )
    def test_invalid_values_rejected(self, overrides: dict[str, int]) -> None:
        with pytest.raises(ValidationError):
            ArchiveSettings(_env_file=None, **overrides)

    def test_zero_retries_allowed(self) -> None:
        assert ArchiveSettings(_env_file=None, max_retries=0).max_retries == 0
