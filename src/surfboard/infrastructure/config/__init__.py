from __future__ import annotations

from .load import load_config
from .schema import (
    AddonsConfig,
    AppConfig,
    CacheConfig,
    EnvOverrides,
    HttpConfig,
    LoggingConfig,
    PreferencesConfig,
    StreamsConfig,
)

__all__ = [
    "AddonsConfig",
    "AppConfig",
    "CacheConfig",
    "EnvOverrides",
    "HttpConfig",
    "LoggingConfig",
    "PreferencesConfig",
    "StreamsConfig",
    "load_config",
]
