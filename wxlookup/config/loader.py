"""YAML config loader with environment fallback for the provider key."""

import os
from pathlib import Path

import yaml

from wxlookup.config.schema import AppConfig

API_KEY_ENV = "WEATHER_API_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file or empty document yields the defaults. If the YAML does
    not set ``provider.api_key``, it is taken from WEATHER_API_KEY. A
    document of the wrong shape raises pydantic's ``ValidationError``.
    """
    raw: object = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    # Shape errors (a list document, a scalar section) are left to pydantic
    if isinstance(raw, dict):
        provider = raw.get("provider") or {}
        raw["provider"] = provider
        if isinstance(provider, dict) and not provider.get("api_key"):
            env_key = os.environ.get(API_KEY_ENV, "")
            if env_key:
                provider["api_key"] = env_key

    return AppConfig.model_validate(raw)
