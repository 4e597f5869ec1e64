"""Configuration layering: defaults < YAML < environment (.env) < CLI."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS = frozenset({"http", "logging", "cache", "addons", "preferences", "streams"})
_SCALARS = ("app_name", "environment")

# Environment variables and CLI flags are flat; YAML is sectioned.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "http_max_retries": ("http", "max_retries"),
    "http_backoff_base": ("http", "backoff_base"),
    "http_max_backoff": ("http", "max_backoff"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_dir": ("cache", "dir"),
    "cache_max_concurrent": ("cache", "max_concurrent"),
    "addons_cinemeta": ("addons", "cinemeta"),
    "addons_torrentio": ("addons", "torrentio"),
    "addons_mediafusion": ("addons", "mediafusion"),
    "addons_timeout_seconds": ("addons", "timeout_seconds"),
    "preferred_audio_language": ("preferences", "preferred_audio_language"),
    "preferred_subtitle_language": ("preferences", "preferred_subtitle_language"),
}


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Fold one layer into the sectioned shape; flat keys beat a section block."""
    out: dict[str, Any] = {
        name: deepcopy(dict(block))
        for name, block in layer.items()
        if name in _SECTIONS and isinstance(block, Mapping)
    }
    out.update((name, layer[name]) for name in _SCALARS if name in layer)
    for flat, (section, key) in _FLAT_KEYS.items():
        if flat in layer:
            out.setdefault(section, {})[key] = layer[flat]
    return out


def _merge(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            target[key] = value


def _yaml_layer(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _env_layer(dotenv_path: Path | None) -> Mapping[str, Any]:
    # .env entries never replace variables already exported by the shell.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)
    return EnvOverrides().provided()


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Build the final ``AppConfig``; later layers win key by key.

    Nothing is written to disk here: a missing YAML or .env file is an
    error, and the cache directory is only created when the cache opens.
    """
    layers: list[Mapping[str, Any]] = [DEFAULT_CONFIG]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(_env_layer(dotenv_path))
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
