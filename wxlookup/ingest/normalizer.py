"""Normalize WeatherAPI.com forecast payloads into internal records."""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from wxlookup.config.schema import WindowClock
from wxlookup.models.weather import (
    CurrentConditions,
    DailyEntry,
    HourlyEntry,
    LocationInfo,
)

logger = logging.getLogger(__name__)

HOURLY_WINDOW = 24


def icon_url(raw_icon: str | None) -> str:
    """Force an https scheme on protocol-relative icon URLs."""
    if not raw_icon:
        return ""
    if raw_icon.startswith("//"):
        return f"https:{raw_icon}"
    return raw_icon


def collapse_precipitation(rain: int | None, snow: int | None) -> int:
    """Rain chance unless falsy, then snow chance unless falsy, else 0."""
    return rain or snow or 0


def to_current_conditions(raw: dict) -> CurrentConditions:
    current = raw["current"]
    condition = current.get("condition") or {}
    return CurrentConditions(
        temperature=current.get("temp_f"),
        feels_like=current.get("feelslike_f"),
        condition=condition.get("text", ""),
        condition_icon_url=icon_url(condition.get("icon")),
        humidity=current.get("humidity"),
        wind_speed=current.get("wind_mph"),
        wind_direction=current.get("wind_dir") or None,
        observed_at=current.get("last_updated", ""),
    )


def to_location_info(raw: dict) -> LocationInfo:
    location = raw["location"]
    return LocationInfo(
        city=location.get("name", ""),
        region=location.get("region") or None,
        country=location.get("country") or None,
        timezone=location.get("tz_id", ""),
        local_time=location.get("localtime", ""),
    )


def _forecast_days(raw: dict) -> list[dict]:
    days = (raw.get("forecast") or {}).get("forecastday")
    if not isinstance(days, list):
        return []
    return days


def to_daily_entries(raw: dict) -> tuple[DailyEntry, ...]:
    entries = []
    for d in _forecast_days(raw):
        day = d.get("day") or {}
        condition = day.get("condition") or {}
        entries.append(DailyEntry(
            date=date.fromisoformat(d["date"]),
            high_temp=day.get("maxtemp_f"),
            low_temp=day.get("mintemp_f"),
            condition=condition.get("text", ""),
            condition_icon_url=icon_url(condition.get("icon")),
            precipitation_chance=collapse_precipitation(
                day.get("daily_chance_of_rain"), day.get("daily_chance_of_snow")
            ),
        ))
    return tuple(entries)


def to_hourly_entries(
    raw: dict,
    now: datetime | None = None,
    window_clock: WindowClock = WindowClock.CALLER,
) -> tuple[HourlyEntry, ...]:
    """Flatten every forecast day's hours and keep the next 24 of them.

    When the payload holds 24 hours or fewer they are returned as-is.
    Otherwise hours earlier than the current hour of today are dropped and
    the first 24 remaining are kept. ``now`` defaults to the caller's local
    clock, or to the location's clock with ``WindowClock.LOCATION``.
    """
    hourly: list[HourlyEntry] = []
    for d in _forecast_days(raw):
        hours = d.get("hour")
        if not isinstance(hours, list):
            continue
        for h in hours:
            condition = h.get("condition") or {}
            hourly.append(HourlyEntry(
                time=h["time"],
                temperature=h.get("temp_f"),
                condition=condition.get("text", ""),
                condition_icon_url=icon_url(condition.get("icon")),
                precipitation_chance=collapse_precipitation(
                    h.get("chance_of_rain"), h.get("chance_of_snow")
                ),
                wind_speed=h.get("wind_mph"),
                humidity=h.get("humidity"),
            ))

    if len(hourly) <= HOURLY_WINDOW:
        return tuple(hourly)

    if now is None:
        now = _window_now(raw, window_clock)
    today = now.date().isoformat()
    current_hour = now.hour

    upcoming = [
        h for h in hourly
        if h.date_part > today or (h.date_part == today and h.hour >= current_hour)
    ]
    return tuple(upcoming[:HOURLY_WINDOW])


def _window_now(raw: dict, window_clock: WindowClock) -> datetime:
    if window_clock == WindowClock.LOCATION:
        tz_id = (raw.get("location") or {}).get("tz_id")
        if tz_id:
            try:
                return datetime.now(ZoneInfo(tz_id))
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(
                    "Unknown timezone %r, windowing hours on the local clock", tz_id
                )
    return datetime.now()
