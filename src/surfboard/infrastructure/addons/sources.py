"""Where addon manifest URLs come from: config built-ins plus user additions."""

from __future__ import annotations

from collections.abc import Iterable

import httpx

from surfboard.infrastructure.config.schema import AddonsConfig

_STREMIO_SCHEME = "stremio://"

# Fixed load order of the built-in addons.
BUILTIN_ADDON_KEYS: tuple[str, ...] = ("cinemeta", "torrentio", "mediafusion")


def rewrite_scheme(url: str) -> str:
    """``stremio://host/manifest.json`` -> ``https://host/manifest.json``."""
    url = url.strip()
    if url.lower().startswith(_STREMIO_SCHEME):
        return "https://" + url[len(_STREMIO_SCHEME):]
    return url


def normalize_addon_url(url: str) -> str:
    """Comparison key for addon URLs: lowercase, https scheme alias, no trailing slash."""
    return rewrite_scheme(url).lower().rstrip("/")


def is_valid_addon_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = httpx.URL(rewrite_scheme(url))
    except httpx.InvalidURL:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


def builtin_addon_urls(config: AddonsConfig) -> list[str]:
    """Configured built-in manifest URLs in fixed order, blanks skipped."""
    urls: list[str] = []
    for key in BUILTIN_ADDON_KEYS:
        value = getattr(config, key).strip()
        if value:
            urls.append(rewrite_scheme(value))
    return urls


def merge_addon_urls(builtin: Iterable[str], custom: Iterable[str]) -> list[str]:
    """Built-ins first, then custom URLs; duplicates (normalized) dropped, first kept."""
    seen: set[str] = set()
    merged: list[str] = []
    for url in [*builtin, *custom]:
        url = rewrite_scheme(url)
        key = normalize_addon_url(url)
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(url)
    return merged
