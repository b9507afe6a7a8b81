"""Tests for utils/timezone.py."""

from datetime import datetime, timezone

import pytest

from utils.timezone import from_ms, now_ms, now_utc, to_local


class TestNowUtc:
    """Current time helper."""

    def test_is_aware_utc(self):
        """now_utc() is aware and in UTC."""
        assert now_utc().tzinfo == timezone.utc


class TestEpochMilliseconds:
    """Epoch millisecond conversions."""

    def test_now_ms_tracks_now_utc(self):
        """now_ms() agrees with now_utc()."""
        before = int(now_utc().timestamp() * 1000)
        result = now_ms()
        after = int(now_utc().timestamp() * 1000)
        assert before <= result <= after

    def test_from_ms_is_utc(self):
        """from_ms() returns aware UTC."""
        result = from_ms(1_700_000_000_000)
        assert result == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_from_ms_keeps_milliseconds(self):
        """Sub-second parts survive."""
        assert from_ms(1_500).microsecond == 500_000


class TestToLocal:
    """Display-timezone conversion."""

    @pytest.mark.parametrize("tz_name,hour", [
        ("Asia/Tokyo", 7),          # greeting flips to morning
        ("America/Chicago", 16),
        ("UTC", 22),
    ])
    def test_converts_session_clock(self, tz_name, hour):
        """The same instant lands on the right local hour."""
        assert to_local(from_ms(1_700_000_000_000), tz_name).hour == hour

    def test_raises_on_naive(self):
        """Naive datetimes are refused."""
        with pytest.raises(ValueError, match="naive"):
            to_local(datetime(2024, 1, 1, 12, 0, 0), "America/Chicago")

    def test_raises_on_invalid_timezone(self):
        """Unknown zone names are refused."""
        with pytest.raises(ValueError, match="Unknown timezone"):
            to_local(now_utc(), "Not/A/Timezone")
