"""Tests for display formatters and relative "last updated" text."""

import json
from datetime import date, datetime

import pytest

from wxlookup.ingest.normalizer import (
    to_current_conditions,
    to_daily_entries,
    to_hourly_entries,
    to_location_info,
)
from wxlookup.models.weather import WeatherSnapshot
from wxlookup.reporting.formatters import (
    format_date,
    format_day_name,
    format_hour_time,
    format_humidity,
    format_last_updated,
    format_precipitation,
    format_snapshot_json,
    format_snapshot_text,
    format_temperature,
    format_wind_speed,
    is_today,
)

NOW = 1_770_000_000_000


class TestFormatLastUpdated:
    @pytest.mark.parametrize(
        "age_ms, expected",
        [
            (0, "Just now"),
            (29_999, "Just now"),
            (30_000, "30 seconds ago"),
            (59_000, "59 seconds ago"),
            (60_000, "1 minute ago"),
            (75_000, "1 minute ago"),
            (120_000, "2 minutes ago"),
            (59 * 60_000, "59 minutes ago"),
            (3600_000, "1 hour ago"),
            (23 * 3600_000, "23 hours ago"),
            (24 * 3600_000, "1 day ago"),
            (72 * 3600_000, "3 days ago"),
        ],
    )
    def test_relative(self, age_ms: int, expected: str):
        assert format_last_updated(NOW - age_ms, NOW) == expected

    def test_never(self):
        assert format_last_updated(None, NOW) == "Never"

    def test_future_timestamp(self):
        assert format_last_updated(NOW + 5_000, NOW) == "Just now"


class TestValueFormatters:
    def test_temperature(self):
        assert format_temperature(72.4) == "72°"
        assert format_temperature(72.5) == "73°"
        assert format_temperature(-3.2) == "-3°"
        assert format_temperature(None) == "--°"

    @pytest.mark.parametrize(
        "value, expected",
        [(45, "45%"), (45.6, "46%"), (150, "100%"), (-5, "0%"), (None, "--"), ("", "--"), ("abc", "--"), (float("nan"), "--")],
    )
    def test_precipitation(self, value, expected):
        assert format_precipitation(value) == expected

    def test_humidity(self):
        assert format_humidity(72) == "72%"
        assert format_humidity(None) == "--"

    def test_wind_speed(self):
        assert format_wind_speed(9.4) == "9 mph"
        assert format_wind_speed(-10) == "10 mph"
        assert format_wind_speed(None) == "--"
        assert format_wind_speed(float("inf")) == "--"

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-02-10 00:00", "12 AM"),
            ("2026-02-10 09:00", "9 AM"),
            ("2026-02-10 12:00", "12 PM"),
            ("2026-02-10 14:30", "2 PM"),
            (datetime(2026, 2, 10, 23, 0), "11 PM"),
            ("", "--"),
            (None, "--"),
            ("not a time", "--"),
        ],
    )
    def test_hour_time(self, value, expected):
        assert format_hour_time(value) == expected

    def test_day_and_date(self):
        assert format_day_name(date(2026, 2, 10)) == "Tuesday"
        assert format_date(date(2026, 2, 10)) == "Feb 10"

    def test_is_today(self):
        assert is_today(date(2026, 2, 10), today=date(2026, 2, 10)) is True
        assert is_today(date(2026, 2, 11), today=date(2026, 2, 10)) is False


@pytest.fixture
def snapshot(payload: dict) -> WeatherSnapshot:
    return WeatherSnapshot(
        current=to_current_conditions(payload),
        hourly=to_hourly_entries(payload, now=datetime(2026, 2, 10, 9, 0)),
        daily=to_daily_entries(payload),
        location=to_location_info(payload),
        last_updated_at=NOW,
    )


class TestSnapshotRendering:
    def test_text(self, snapshot):
        text = format_snapshot_text(snapshot, "Just now")
        assert "San Francisco, California" in text
        assert "Now: 58° Overcast" in text
        assert "Wind 9 mph WSW" in text
        assert "Last updated: Just now" in text
        assert "Wednesday" in text

    def test_text_with_error_and_no_data(self):
        text = format_snapshot_text(WeatherSnapshot(error="Boom"), "Never")
        assert "Error: Boom" in text
        assert "Last updated: Never" in text

    def test_json(self, snapshot):
        data = json.loads(format_snapshot_json(snapshot, "Just now"))
        assert data["location"]["city"] == "San Francisco"
        assert data["daily"][0]["date"] == "2026-02-10"
        assert len(data["hourly"]) == 24
        assert data["formatted_last_updated"] == "Just now"
        assert data["is_loading"] is False
