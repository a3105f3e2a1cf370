"""Display formatters for weather records and the store snapshot."""

import json
import math
from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from wxlookup.models.common import EpochMillis
from wxlookup.models.weather import WeatherSnapshot

MISSING = "--"


def format_last_updated(last_updated_at: EpochMillis | None, now_ms: EpochMillis) -> str:
    """Relative "last updated" text, e.g. "Just now" or "2 minutes ago"."""
    if not last_updated_at:
        return "Never"

    diff_sec = (now_ms - last_updated_at) // 1000
    diff_min = diff_sec // 60
    diff_hour = diff_min // 60

    if diff_sec < 30:
        return "Just now"
    if diff_sec < 60:
        return f"{diff_sec} seconds ago"
    if diff_min == 1:
        return "1 minute ago"
    if diff_min < 60:
        return f"{diff_min} minutes ago"
    if diff_hour == 1:
        return "1 hour ago"
    if diff_hour < 24:
        return f"{diff_hour} hours ago"
    diff_days = diff_hour // 24
    return "1 day ago" if diff_days == 1 else f"{diff_days} days ago"


def _as_number(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num):
        return None
    return num


def _round_half_up(num: float) -> int:
    return math.floor(num + 0.5)


def format_temperature(temp: float | None) -> str:
    num = _as_number(temp)
    if num is None:
        return f"{MISSING}°"
    return f"{_round_half_up(num)}°"


def _format_percent(value: Any) -> str:
    num = _as_number(value)
    if num is None:
        return MISSING
    return f"{min(100, max(0, _round_half_up(num)))}%"


def format_precipitation(chance: Any) -> str:
    return _format_percent(chance)


def format_humidity(humidity: Any) -> str:
    return _format_percent(humidity)


def format_wind_speed(speed: Any) -> str:
    num = _as_number(speed)
    if num is None:
        return MISSING
    return f"{_round_half_up(abs(num))} mph"


def format_hour_time(value: str | datetime | None) -> str:
    """Hour label such as "2 PM" from a "YYYY-MM-DD HH:MM" string."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace(" ", "T"))
        except ValueError:
            return MISSING
    else:
        return MISSING

    period = "PM" if dt.hour >= 12 else "AM"
    return f"{dt.hour % 12 or 12} {period}"


def format_day_name(day: date) -> str:
    return day.strftime("%A")


def format_date(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def is_today(day: date, today: date | None = None) -> bool:
    return day == (today or date.today())


def format_snapshot_text(s: WeatherSnapshot, last_updated: str) -> str:
    """Plain text rendering of a snapshot for the terminal."""
    lines = []
    if s.location is not None:
        place = ", ".join(p for p in (s.location.city, s.location.region, s.location.country) if p)
        lines.append(f"=== {place} | local time {s.location.local_time} ===")
    if s.current is not None:
        c = s.current
        wind = format_wind_speed(c.wind_speed)
        if c.wind_direction:
            wind = f"{wind} {c.wind_direction}"
        lines.append(
            f"Now: {format_temperature(c.temperature)} {c.condition} "
            f"(feels like {format_temperature(c.feels_like)}) | "
            f"Humidity {format_humidity(c.humidity)} | Wind {wind}"
        )
    if s.hourly:
        lines.append("Next hours:")
        for h in s.hourly:
            lines.append(
                f"  {format_hour_time(h.time):>5}  {format_temperature(h.temperature):>5}  "
                f"{format_precipitation(h.precipitation_chance):>4}  {h.condition}"
            )
    if s.daily:
        lines.append("Daily:")
        for i, d in enumerate(s.daily):
            label = "Today" if i == 0 and is_today(d.date) else format_day_name(d.date)
            lines.append(
                f"  {label:<9} {format_date(d.date):<6} "
                f"{format_temperature(d.high_temp)}/{format_temperature(d.low_temp)}  "
                f"{format_precipitation(d.precipitation_chance):>4}  {d.condition}"
            )
    if s.error:
        lines.append(f"Error: {s.error}")
    lines.append(f"Last updated: {last_updated}")
    return "\n".join(lines)


def format_snapshot_json(s: WeatherSnapshot, last_updated: str) -> str:
    """JSON rendering of a snapshot for programmatic consumption."""
    data = asdict(s)
    data["formatted_last_updated"] = last_updated
    return json.dumps(data, indent=2, default=str)
