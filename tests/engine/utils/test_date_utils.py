"""Tests for as-of date parsing utilities."""

import pytest
from datetime import date, datetime, timedelta, timezone

from credrank.engine.utils.date_utils import (
    end_of_day,
    ensure_utc,
    parse_as_of_date,
    parse_timestamp,
    start_of_day
)


class TestParseAsOfDate:
    """Tests for parse_as_of_date function."""

    def test_date_passthrough(self):
        assert parse_as_of_date(date(2025, 11, 25)) == date(2025, 11, 25)

    def test_simple_date_string(self):
        assert parse_as_of_date('2025-11-25') == date(2025, 11, 25)

    def test_offset_timestamp_converted_to_utc_day(self):
        """23:30 at UTC-5 is already the next day in UTC."""
        assert parse_as_of_date('2025-11-25T23:30:00-05:00') == date(2025, 11, 26)

    def test_aware_datetime(self):
        value = datetime(2025, 11, 25, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        assert parse_as_of_date(value) == date(2025, 11, 24)

    def test_naive_datetime_taken_as_utc(self):
        assert parse_as_of_date(datetime(2025, 11, 25, 23, 59)) == date(2025, 11, 25)

    @pytest.mark.parametrize("value", ['not-a-date', '', '   ', None, 20251125])
    def test_malformed_raises(self, value):
        with pytest.raises(ValueError):
            parse_as_of_date(value)


class TestParseTimestamp:
    """Tests for parse_timestamp function."""

    def test_simple_date_start_of_day(self):
        """Simple date format defaults to start of day (00:00:00)."""
        result = parse_timestamp('2025-11-25')

        expected = datetime(2025, 11, 25, 0, 0, 0, tzinfo=timezone.utc)
        assert result == expected

    def test_iso_timestamp_with_z(self):
        """ISO timestamp with Z suffix is parsed correctly."""
        result = parse_timestamp('2025-11-25T14:30:00Z')

        expected = datetime(2025, 11, 25, 14, 30, 0, tzinfo=timezone.utc)
        assert result == expected

    def test_iso_timestamp_with_timezone(self):
        """ISO timestamp with timezone is converted to UTC."""
        result = parse_timestamp('2025-11-25T14:30:00+05:00')

        # 14:30 - 5:00 = 09:30 UTC
        expected = datetime(2025, 11, 25, 9, 30, 0, tzinfo=timezone.utc)
        assert result == expected

    def test_naive_timestamp_taken_as_utc(self):
        result = parse_timestamp('2025-11-25 08:00:00')
        assert result == datetime(2025, 11, 25, 8, 0, tzinfo=timezone.utc)

    def test_none_returns_none(self):
        assert parse_timestamp(None) is None

    def test_empty_string_returns_none(self):
        assert parse_timestamp('') is None

    def test_invalid_date_returns_none(self):
        assert parse_timestamp('not-a-date') is None


class TestDayBounds:

    def test_start_of_day(self):
        assert start_of_day(date(2025, 11, 25)) == datetime(2025, 11, 25, tzinfo=timezone.utc)

    def test_end_of_day_is_last_instant(self):
        end = end_of_day(date(2025, 11, 25))
        assert end.date() == date(2025, 11, 25)
        assert end + timedelta(microseconds=1) == datetime(2025, 11, 26, tzinfo=timezone.utc)

    def test_ensure_utc(self):
        naive = datetime(2025, 11, 25, 12, 0)
        shifted = datetime(2025, 11, 25, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(naive) == datetime(2025, 11, 25, 12, 0, tzinfo=timezone.utc)
        assert ensure_utc(shifted).hour == 12
        assert ensure_utc(shifted).tzinfo == timezone.utc
