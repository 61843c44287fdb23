"""
Unit Tests for Core Utilities.

Time helpers: naive UTC conversion and the local server zone.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from xnote.backend.core.utils import local_now, local_zone, to_utc_naive


@pytest.fixture(autouse=True)
def _clear_zone_cache():
    local_zone.cache_clear()
    yield
    local_zone.cache_clear()


class TestToUtcNaive:
    """Tests for aware-to-naive UTC conversion."""

    def test_converts_aware_value(self):
        value = datetime(2026, 3, 15, 1, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_utc_naive(value) == datetime(2026, 3, 14, 23, 30)

    def test_naive_value_is_unchanged(self):
        value = datetime(2026, 3, 15, 1, 30)
        assert to_utc_naive(value) is value


class TestLocalZone:
    """Tests for resolving the server's local time zone."""

    def test_tz_environment_variable_names_the_zone(self, monkeypatch):
        monkeypatch.setenv("TZ", "Europe/Berlin")
        assert local_zone() == ZoneInfo("Europe/Berlin")

    def test_leading_colon_in_tz_is_accepted(self, monkeypatch):
        monkeypatch.setenv("TZ", ":Europe/Berlin")
        assert local_zone() == ZoneInfo("Europe/Berlin")

    def test_unknown_tz_falls_back_to_system_zone(self, monkeypatch):
        monkeypatch.setenv("TZ", "Not/AZone")
        assert local_zone().utcoffset(datetime.now()) is not None

    def test_local_now_is_aware(self, monkeypatch):
        monkeypatch.setenv("TZ", "Europe/Berlin")
        now = local_now()
        assert now.tzinfo == ZoneInfo("Europe/Berlin")
