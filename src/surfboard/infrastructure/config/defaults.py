"""Bottom layer for load_config, dumped from the section models."""

from __future__ import annotations

from typing import Any

from .schema import (
    AddonsConfig,
    CacheConfig,
    HttpConfig,
    LoggingConfig,
    PreferencesConfig,
    StreamsConfig,
)

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "surfboard",
    "environment": "dev",
    "http": HttpConfig().model_dump(),
    # format is None here so AppConfig can derive it from the final environment.
    "logging": LoggingConfig().model_dump(),
    "cache": CacheConfig().model_dump(mode="json"),
    "addons": AddonsConfig().model_dump(),
    "preferences": PreferencesConfig().model_dump(),
    "streams": StreamsConfig().model_dump(),
}
