"""Tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from stillgrateful.utils.timestamps import (
    ensure_utc,
    format_db_timestamp,
    parse_db_timestamp,
    utc_now,
)


class TestUtcNow:
    def test_is_timezone_aware_utc(self):
        assert utc_now().tzinfo == timezone.utc


class TestEnsureUtc:
    def test_none(self):
        assert ensure_utc(None) is None

    def test_naive_is_treated_as_utc(self):
        result = ensure_utc(datetime(2025, 11, 4, 12, 0))
        assert result == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        result = ensure_utc(datetime(2025, 11, 4, 14, 0, tzinfo=plus_two))
        assert result == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestDbTimestamps:
    def test_format(self):
        dt = datetime(2025, 11, 4, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_db_timestamp(dt) == "2025-11-04T12:00:00.123456Z"

    def test_parse_round_trip(self):
        dt = datetime(2025, 11, 4, 12, 0, 0, 5, tzinfo=timezone.utc)
        assert parse_db_timestamp(format_db_timestamp(dt)) == dt

    def test_parse_without_microseconds(self):
        assert parse_db_timestamp("2025-11-04T12:00:00Z") == datetime(
            2025, 11, 4, 12, 0, tzinfo=timezone.utc
        )

    def test_parse_empty(self):
        assert parse_db_timestamp("") is None
        assert parse_db_timestamp(None) is None

    def test_string_order_matches_time_order(self):
        earlier = datetime(2025, 11, 4, 9, 59, 59, 999999, tzinfo=timezone.utc)
        later = datetime(2025, 11, 4, 10, 0, 0, tzinfo=timezone.utc)
        assert format_db_timestamp(earlier) < format_db_timestamp(later)
