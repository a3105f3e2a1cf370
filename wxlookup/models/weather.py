"""Normalized weather records and the store snapshot."""

from dataclasses import dataclass, field
from datetime import date

from wxlookup.models.common import EpochMillis


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float  # °F
    feels_like: float  # °F
    condition: str
    condition_icon_url: str
    humidity: int
    wind_speed: float  # mph
    wind_direction: str | None
    observed_at: str


@dataclass(frozen=True)
class HourlyEntry:
    time: str  # "YYYY-MM-DD HH:MM", location-local
    temperature: float
    condition: str
    condition_icon_url: str
    precipitation_chance: int
    wind_speed: float
    humidity: int

    @property
    def date_part(self) -> str:
        return self.time.split(" ")[0]

    @property
    def hour(self) -> int:
        return int(self.time.split(" ")[1].split(":")[0])


@dataclass(frozen=True)
class DailyEntry:
    date: date
    high_temp: float
    low_temp: float
    condition: str
    condition_icon_url: str
    precipitation_chance: int


@dataclass(frozen=True)
class LocationInfo:
    city: str
    region: str | None
    country: str | None
    timezone: str
    local_time: str


@dataclass(frozen=True)
class WeatherBundle:
    """Everything committed to the snapshot by one successful fetch."""

    current: CurrentConditions
    hourly: tuple[HourlyEntry, ...]
    daily: tuple[DailyEntry, ...]
    location: LocationInfo


@dataclass
class WeatherSnapshot:
    current: CurrentConditions | None = None
    hourly: tuple[HourlyEntry, ...] = field(default_factory=tuple)
    daily: tuple[DailyEntry, ...] = field(default_factory=tuple)
    location: LocationInfo | None = None
    is_loading: bool = False
    error: str | None = None
    last_updated_at: EpochMillis | None = None
