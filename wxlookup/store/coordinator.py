"""Weather store: owns the snapshot and sequences provider fetches.

One ``WeatherStore`` is built by the application root and handed to
whatever displays it. Readers use the properties; only the four actions
(fetch, refresh, clear error, initialize) change state.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from wxlookup.ingest.weatherapi_client import MSG_GENERIC, ErrorKind, WeatherApiError
from wxlookup.models.common import EpochMillis, now_millis
from wxlookup.models.result import Err, Ok, Result
from wxlookup.models.weather import (
    CurrentConditions,
    DailyEntry,
    HourlyEntry,
    LocationInfo,
    WeatherBundle,
    WeatherSnapshot,
)
from wxlookup.reporting.formatters import format_last_updated
from wxlookup.storage.state_store import LAST_LOCATION_KEY, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "San Francisco"


class WeatherSource(Protocol):
    async def get_current_weather(
        self, location: str
    ) -> tuple[CurrentConditions, LocationInfo]: ...

    async def get_hourly_forecast(
        self, location: str
    ) -> tuple[tuple[HourlyEntry, ...], LocationInfo]: ...

    async def get_daily_forecast(
        self, location: str
    ) -> tuple[tuple[DailyEntry, ...], LocationInfo]: ...


class WeatherStore:
    def __init__(
        self,
        client: WeatherSource,
        storage: KeyValueStore,
        default_location: str = DEFAULT_LOCATION,
        clock: Callable[[], EpochMillis] = now_millis,
    ):
        self.client = client
        self.storage = storage
        self.default_location = default_location
        self.clock = clock
        self.snapshot = WeatherSnapshot()

    # --- Read-only views ---

    @property
    def current(self) -> CurrentConditions | None:
        return self.snapshot.current

    @property
    def hourly(self) -> tuple[HourlyEntry, ...]:
        return self.snapshot.hourly

    @property
    def daily(self) -> tuple[DailyEntry, ...]:
        return self.snapshot.daily

    @property
    def location(self) -> LocationInfo | None:
        return self.snapshot.location

    @property
    def is_loading(self) -> bool:
        return self.snapshot.is_loading

    @property
    def error(self) -> str | None:
        return self.snapshot.error

    @property
    def last_updated_at(self) -> EpochMillis | None:
        return self.snapshot.last_updated_at

    @property
    def formatted_last_updated(self) -> str:
        return format_last_updated(self.snapshot.last_updated_at, self.clock())

    # --- Actions ---

    async def fetch_weather_data(self, location_query: str) -> None:
        """Fetch current, hourly and daily weather and commit them together.

        On failure the previous weather stays in place and only ``error`` is
        set. Never raises.
        """
        self.snapshot.is_loading = True
        self.snapshot.error = None
        try:
            outcome = await self._fetch_bundle(location_query)
            match outcome:
                case Ok(value=bundle):
                    self._commit(bundle)
                    self._save_last_location(location_query)
                case Err(error=err):
                    self.snapshot.error = err.message
        finally:
            self.snapshot.is_loading = False

    async def refresh_weather(self) -> None:
        location = self.snapshot.location
        query = location.city if location is not None and location.city else self.default_location
        await self.fetch_weather_data(query)

    def clear_error(self) -> None:
        self.snapshot.error = None

    async def initialize_store(self) -> None:
        last = self._load_last_location()
        await self.fetch_weather_data(last or self.default_location)

    # --- Internals ---

    async def _fetch_bundle(
        self, location_query: str
    ) -> Result[WeatherBundle, WeatherApiError]:
        """Run the three round trips concurrently; any failure fails all."""
        try:
            async with asyncio.TaskGroup() as tg:
                current_task = tg.create_task(self.client.get_current_weather(location_query))
                hourly_task = tg.create_task(self.client.get_hourly_forecast(location_query))
                daily_task = tg.create_task(self.client.get_daily_forecast(location_query))
        except ExceptionGroup as eg:
            # First leg to fail decides the message
            return Err(self._classify_failure(location_query, eg.exceptions[0]))

        current, location = current_task.result()
        hourly, _ = hourly_task.result()
        daily, _ = daily_task.result()
        return Ok(WeatherBundle(current=current, hourly=hourly, daily=daily, location=location))

    @staticmethod
    def _classify_failure(location_query: str, exc: BaseException) -> WeatherApiError:
        if isinstance(exc, WeatherApiError):
            logger.warning(
                "Weather fetch for %r failed (%s): %s",
                location_query, exc.kind, exc.message, exc_info=exc,
            )
            return exc
        logger.error("Weather fetch for %r crashed", location_query, exc_info=exc)
        return WeatherApiError(MSG_GENERIC, ErrorKind.API_ERROR, exc)

    def _commit(self, bundle: WeatherBundle) -> None:
        # No awaits in here: overlapping fetches each commit a whole bundle
        self.snapshot.current = bundle.current
        self.snapshot.hourly = bundle.hourly
        self.snapshot.daily = bundle.daily
        self.snapshot.location = bundle.location
        self.snapshot.last_updated_at = self.clock()
        logger.info(
            "Weather updated for %s (%d hourly, %d daily)",
            bundle.location.city, len(bundle.hourly), len(bundle.daily),
        )

    def _save_last_location(self, location_query: str) -> None:
        result = self.storage.set(LAST_LOCATION_KEY, location_query)
        if isinstance(result, Err):
            logger.warning("Last location not persisted: %s", result.error)

    def _load_last_location(self) -> str | None:
        return self.storage.get(LAST_LOCATION_KEY)
