"""Shared test fixtures."""

from datetime import date, timedelta
from pathlib import Path

import pytest
import yaml

from wxlookup.models.result import Ok


def _make_hour(day: date, hour: int, **overrides) -> dict:
    h = {
        "time": f"{day.isoformat()} {hour:02d}:00",
        "temp_f": 50.0 + hour,
        "condition": {"text": "Partly cloudy", "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png"},
        "chance_of_rain": 0,
        "chance_of_snow": 0,
        "wind_mph": 5.6,
        "humidity": 70,
    }
    h.update(overrides)
    return h


def _make_payload(
    start: date = date(2026, 2, 10),
    days: int = 2,
    hours_per_day: int = 24,
    city: str = "San Francisco",
    tz_id: str = "America/Los_Angeles",
) -> dict:
    """Build a WeatherAPI.com forecast.json body."""
    forecastday = []
    for i in range(days):
        d = start + timedelta(days=i)
        forecastday.append({
            "date": d.isoformat(),
            "day": {
                "maxtemp_f": 64.0 + i,
                "mintemp_f": 50.0 + i,
                "condition": {"text": "Sunny", "icon": "//cdn.weatherapi.com/weather/64x64/day/113.png"},
                "daily_chance_of_rain": 10 * i,
                "daily_chance_of_snow": 0,
            },
            "hour": [_make_hour(d, h) for h in range(hours_per_day)],
        })
    return {
        "location": {
            "name": city,
            "region": "California",
            "country": "United States of America",
            "tz_id": tz_id,
            "localtime": f"{start.isoformat()} 9:15",
        },
        "current": {
            "last_updated": f"{start.isoformat()} 09:00",
            "temp_f": 58.1,
            "feelslike_f": 56.3,
            "condition": {"text": "Overcast", "icon": "//cdn.weatherapi.com/weather/64x64/day/122.png"},
            "humidity": 81,
            "wind_mph": 9.4,
            "wind_dir": "WSW",
        },
        "forecast": {"forecastday": forecastday},
    }


@pytest.fixture
def payload() -> dict:
    return _make_payload()


@pytest.fixture
def build_payload():
    """Factory for forecast.json bodies with custom start, length or city."""
    return _make_payload


@pytest.fixture
def build_hour():
    return _make_hour


class MemoryKeyValueStore:
    """Dict-backed KeyValueStore double."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value
        return Ok(None)


@pytest.fixture
def memory_storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "test-key-123", "timeout": 5.0},
        "store": {"default_location": "Seattle", "db_path": str(tmp_path / "test.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
