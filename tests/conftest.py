"""Shared test fixtures for the surfboard test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any
from unittest.mock import AsyncMock

import pytest

from surfboard.domain.addons.exceptions import AddonRequestError, ManifestNotLoadedError
from surfboard.domain.entities.manifest import (
    AddonManifest,
    CatalogExtra,
    DetailedResource,
    ManifestCatalog,
    SimpleResource,
)
from surfboard.domain.entities.media import MediaItem
from surfboard.domain.entities.stream import Stream

# ---------------------------------------------------------------------------
# Wire payloads (as addons send them)
# ---------------------------------------------------------------------------


@pytest.fixture()
def cinemeta_manifest_json() -> dict[str, Any]:
    return {
        "id": "com.linvo.cinemeta",
        "version": "3.0.13",
        "name": "Cinemeta",
        "description": "The official addon for movie and series catalogs",
        "resources": ["catalog", "meta", "addon_catalog"],
        "types": ["movie", "series"],
        "idPrefixes": ["tt"],
        "catalogs": [
            {
                "type": "movie",
                "id": "top",
                "name": "Popular",
                "genres": ["Action", "Comedy"],
                "extra": [
                    {"name": "genre", "options": ["Action", "Comedy"]},
                    {"name": "search"},
                    {"name": "skip"},
                ],
                "extraSupported": ["search", "genre", "skip"],
            },
            {"type": "series", "id": "top", "name": "Popular", "extraSupported": ["search"]},
            {"type": "movie", "id": "year", "extra": [{"name": "genre", "isRequired": True}]},
        ],
        "behaviorHints": {"newEpisodeNotifications": True},
    }


@pytest.fixture()
def torrentio_manifest_json() -> dict[str, Any]:
    return {
        "id": "com.stremio.torrentio.addon",
        "version": "0.0.14",
        "name": "Torrentio",
        "resources": [
            {"name": "stream", "types": ["movie", "series"], "idPrefixes": ["tt", "kitsu"]}
        ],
        "types": ["movie", "series", "anime", "other"],
        "catalogs": [],
        "behaviorHints": {"configurable": True, "configurationRequired": False},
    }


class FakeAddonClient:
    """In-memory AddonClientProtocol implementation.

    Responses are keyed by catalog id / media id; an ``Exception`` value is
    raised instead of returned.  ``delay`` slows every call down.
    """

    def __init__(
        self,
        manifest_url: str,
        manifest: AddonManifest | Exception | None = None,
        *,
        catalogs: Mapping[str, list[MediaItem] | Exception] | None = None,
        metas: Mapping[str, MediaItem | Exception] | None = None,
        streams: Mapping[str, list[Stream] | Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.manifest_url = manifest_url
        self._pending_manifest = manifest
        self._manifest: AddonManifest | None = None
        self._catalogs = dict(catalogs or {})
        self._metas = dict(metas or {})
        self._streams = dict(streams or {})
        self._delay = delay
        self.catalog_calls: list[tuple[str, str, dict[str, str] | None]] = []
        self.meta_calls: list[tuple[str, str]] = []
        self.stream_calls: list[tuple[str, str]] = []
        self.manifest_loads = 0

    @property
    def base_url(self) -> str:
        return self.manifest_url.rsplit("/", 1)[0]

    @property
    def manifest(self) -> AddonManifest | None:
        return self._manifest

    @property
    def addon_id(self) -> str:
        return self._manifest.id if self._manifest else self.manifest_url

    @property
    def name(self) -> str:
        return self._manifest.name if self._manifest else "Unknown Addon"

    def supports(self, resource: str, content_type: str) -> bool:
        if self._manifest is None:
            return False
        return self._manifest.supports(resource, content_type)

    async def _pause(self) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)

    async def load_manifest(self) -> AddonManifest:
        self.manifest_loads += 1
        await self._pause()
        if isinstance(self._pending_manifest, Exception):
            raise self._pending_manifest
        if self._pending_manifest is None:
            raise ManifestNotLoadedError(self.manifest_url)
        self._manifest = self._pending_manifest
        return self._manifest

    async def fetch_catalog(
        self,
        content_type: str,
        catalog_id: str,
        extra: Mapping[str, str] | None = None,
    ) -> list[MediaItem]:
        self.catalog_calls.append((content_type, catalog_id, dict(extra) if extra else None))
        await self._pause()
        result = self._catalogs.get(catalog_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def fetch_meta(self, content_type: str, media_id: str) -> MediaItem:
        self.meta_calls.append((content_type, media_id))
        await self._pause()
        result = self._metas.get(media_id)
        if result is None:
            raise AddonRequestError("not found", status_code=404)
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_streams(self, content_type: str, media_id: str) -> list[Stream]:
        self.stream_calls.append((content_type, media_id))
        await self._pause()
        result = self._streams.get(media_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class AddonKit:
    """Builders for manifests, catalog items and in-memory addon clients."""

    @staticmethod
    def manifest(
        addon_id: str = "org.test.addon",
        *,
        name: str | None = None,
        resources: list[str] | None = None,
        types: list[str] | None = None,
        catalogs: list[ManifestCatalog] | None = None,
    ) -> AddonManifest:
        return AddonManifest(
            id=addon_id,
            version="1.0.0",
            name=name or addon_id,
            resources=[SimpleResource(r) for r in (resources or ["catalog", "meta", "stream"])],
            types=types or ["movie", "series"],
            catalogs=catalogs or [],
        )

    @staticmethod
    def catalog(
        catalog_id: str = "top",
        content_type: str = "movie",
        *,
        searchable: bool = False,
    ) -> ManifestCatalog:
        return ManifestCatalog(
            type=content_type,
            id=catalog_id,
            name=catalog_id.title(),
            extra=[CatalogExtra(name="search")] if searchable else None,
        )

    @staticmethod
    def item(item_id: str, content_type: str = "movie", name: str | None = None) -> MediaItem:
        return MediaItem(id=item_id, type=content_type, name=name or item_id)

    @staticmethod
    def client(
        manifest_url: str, manifest: AddonManifest | Exception | None = None, **kwargs: Any
    ) -> FakeAddonClient:
        return FakeAddonClient(manifest_url, manifest, **kwargs)

    @staticmethod
    def factory(*clients: FakeAddonClient):
        """client_factory that hands out pre-built fakes by manifest URL."""
        by_url = {c.manifest_url: c for c in clients}

        def _factory(url: str) -> FakeAddonClient:
            return by_url[url]

        return _factory


# ---------------------------------------------------------------------------
# Addon fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def addon_kit() -> AddonKit:
    return AddonKit()


@pytest.fixture()
def detailed_stream_resource() -> DetailedResource:
    return DetailedResource(name="stream", types=["movie"], id_prefixes=["tt"])


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.exists = AsyncMock(return_value=False)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


class InMemoryCache:
    """Dict-backed CachePort for repository round-trips."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self.data

    async def clear(self) -> None:
        self.data.clear()

    async def aclose(self) -> None:
        return None


@pytest.fixture()
def memory_cache() -> InMemoryCache:
    return InMemoryCache()
