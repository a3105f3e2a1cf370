"""WeatherAPI.com forecast client with typed error mapping."""

import logging
from enum import StrEnum

import httpx

from wxlookup.config.schema import WEATHERAPI_BASE_URL, WindowClock
from wxlookup.ingest.normalizer import (
    to_current_conditions,
    to_daily_entries,
    to_hourly_entries,
    to_location_info,
)
from wxlookup.models.weather import (
    CurrentConditions,
    DailyEntry,
    HourlyEntry,
    LocationInfo,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEYS = frozenset({"your_api_key_here"})
REQUIRED_SECTIONS = ("location", "current", "forecast")

MSG_CONFIG = "Unable to connect to weather service. Please check configuration."
MSG_INVALID_LOCATION = "Location is required and must be a valid string."
MSG_NOT_FOUND = (
    "We couldn't find that location. "
    "Please try a different city, zip code, or region."
)
MSG_UNAVAILABLE = "Weather service is temporarily unavailable. Please try again later."
MSG_GENERIC = "Something went wrong. Please try again."
MSG_NETWORK = (
    "Unable to fetch weather data. "
    "Please check your internet connection and try again."
)
MSG_INVALID_RESPONSE = "Invalid response from weather service."


class ErrorKind(StrEnum):
    NETWORK = "network"
    NOT_FOUND = "not_found"
    API_ERROR = "api_error"
    VALIDATION = "validation"
    CONFIG = "config"


class WeatherApiError(Exception):
    """Raised for every weather lookup failure.

    ``message`` is safe to show to a user; ``original_error`` is kept for
    diagnostics only.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        original_error: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.original_error = original_error


def _error_for_status(status_code: int) -> WeatherApiError:
    if status_code in (400, 404):
        return WeatherApiError(MSG_NOT_FOUND, ErrorKind.NOT_FOUND)
    if status_code in (401, 403):
        return WeatherApiError(MSG_CONFIG, ErrorKind.CONFIG)
    if status_code >= 500:
        return WeatherApiError(MSG_UNAVAILABLE, ErrorKind.API_ERROR)
    return WeatherApiError(MSG_GENERIC, ErrorKind.API_ERROR)


class WeatherApiClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = WEATHERAPI_BASE_URL,
        timeout: float = 30.0,
        days: int = 7,
        window_clock: WindowClock = WindowClock.CALLER,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.days = days
        self.window_clock = window_clock

    def _check_config(self) -> None:
        key = self.api_key
        if not key or not key.strip() or key in PLACEHOLDER_API_KEYS:
            logger.error("WeatherAPI key is missing or a placeholder")
            raise WeatherApiError(MSG_CONFIG, ErrorKind.CONFIG)

    async def fetch_raw(self, location: str) -> dict:
        """Fetch the forecast payload for a free-text location.

        Returns the parsed body untouched. Raises WeatherApiError on any
        configuration, input, transport, HTTP or payload problem.
        """
        self._check_config()
        if not isinstance(location, str) or not location.strip():
            raise WeatherApiError(MSG_INVALID_LOCATION, ErrorKind.VALIDATION)

        url = f"{self.base_url}/forecast.json"
        params = {"key": self.api_key, "q": location, "days": self.days, "aqi": "no"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.error("WeatherAPI request failed for q=%r: %r", location, e)
            raise WeatherApiError(MSG_NETWORK, ErrorKind.NETWORK, e) from e

        if not resp.is_success:
            logger.warning(
                "WeatherAPI returned %d for q=%r: %s",
                resp.status_code, location, resp.text[:200],
            )
            raise _error_for_status(resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("WeatherAPI returned unparseable body for q=%r: %s", location, e)
            raise WeatherApiError(MSG_INVALID_RESPONSE, ErrorKind.VALIDATION, e) from e

        if not isinstance(data, dict) or not all(
            isinstance(data.get(s), dict) for s in REQUIRED_SECTIONS
        ):
            logger.error(
                "WeatherAPI response for q=%r is missing required sections", location
            )
            raise WeatherApiError(MSG_INVALID_RESPONSE, ErrorKind.VALIDATION)

        return data

    # --- Round trips used by the store ---

    async def get_current_weather(
        self, location: str
    ) -> tuple[CurrentConditions, LocationInfo]:
        data = await self.fetch_raw(location)
        return to_current_conditions(data), to_location_info(data)

    async def get_hourly_forecast(
        self, location: str
    ) -> tuple[tuple[HourlyEntry, ...], LocationInfo]:
        data = await self.fetch_raw(location)
        hourly = to_hourly_entries(data, window_clock=self.window_clock)
        return hourly, to_location_info(data)

    async def get_daily_forecast(
        self, location: str
    ) -> tuple[tuple[DailyEntry, ...], LocationInfo]:
        data = await self.fetch_raw(location)
        return to_daily_entries(data), to_location_info(data)
