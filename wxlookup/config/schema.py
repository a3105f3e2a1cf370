"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

WEATHERAPI_BASE_URL = "https://api.weatherapi.com/v1"


class WindowClock(StrEnum):
    CALLER = "caller"      # local clock of the machine running the lookup
    LOCATION = "location"  # clock of the resolved location's timezone


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = WEATHERAPI_BASE_URL
    timeout: float = Field(default=30.0, gt=0.0)
    days: int = Field(default=7, ge=1, le=14)
    window_clock: WindowClock = WindowClock.CALLER


class StoreConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_location: str = Field(default="San Francisco", min_length=1)
    db_path: str = "data/wxlookup.db"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    store: StoreConfig = StoreConfig()
