"""Integration tests: library repositories on a real diskcache directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from surfboard.domain.entities.library import FavoriteItem, SavedAddon, WatchProgress
from surfboard.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from surfboard.infrastructure.persistence.favorites_cache import CacheFavoritesRepository
from surfboard.infrastructure.persistence.saved_addon_cache import CacheSavedAddonRepository
from surfboard.infrastructure.persistence.watch_progress_cache import (
    CacheWatchProgressRepository,
)

pytestmark = pytest.mark.integration


class TestDiskcacheAdapter:
    async def test_set_get_delete(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "cache") as cache:
            await cache.set("k", "v")
            assert await cache.get("k") == "v"
            assert await cache.exists("k")
            assert await cache.delete("k") is True
            assert await cache.get("k") is None
            assert await cache.delete("k") is False

    async def test_clear(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "cache") as cache:
            await cache.set("a", 1)
            await cache.set("b", 2)
            await cache.clear()
            assert not await cache.exists("a")

    async def test_closed_cache(self, tmp_path: Path) -> None:
        cache = DiskcacheAdapter(directory=tmp_path / "cache")
        with pytest.raises(RuntimeError):
            await cache.get("k")
        assert await cache.delete("k") is False
        assert await cache.exists("k") is False

    async def test_open_and_close_are_idempotent(self, tmp_path: Path) -> None:
        cache = DiskcacheAdapter(directory=tmp_path / "cache")
        assert await cache.open() is cache
        await cache.open()
        assert cache.is_open
        assert (tmp_path / "cache").is_dir()

        await cache.aclose()
        await cache.aclose()
        assert not cache.is_open

    async def test_explicit_ttl_still_readable(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "cache") as cache:
            await cache.set("k", "v", ttl=3600)
            assert await cache.get("k") == "v"


class TestLibrarySurvivesRestart:
    async def test_records_persist_across_reopen(self, tmp_path: Path) -> None:
        directory = tmp_path / "library"

        async with DiskcacheAdapter(directory=directory) as cache:
            await CacheWatchProgressRepository(cache).save(
                WatchProgress(
                    id="tt0903747",
                    media_id="tt0903747",
                    media_type="series",
                    title="Breaking Bad",
                    season=1,
                    episode=2,
                    current_time=120.0,
                    total_duration=2800.0,
                )
            )
            await CacheFavoritesRepository(cache).save(
                FavoriteItem(id="tt0111161", type="movie", name="Shawshank")
            )
            await CacheSavedAddonRepository(cache).add(
                SavedAddon(url="https://custom.example/manifest.json")
            )

        async with DiskcacheAdapter(directory=directory) as cache:
            progress = await CacheWatchProgressRepository(cache).list()
            favorites = await CacheFavoritesRepository(cache).list()
            addons = await CacheSavedAddonRepository(cache).list()

        assert [(p.id, p.season, p.episode) for p in progress] == [("tt0903747", 1, 2)]
        assert [f.id for f in favorites] == ["tt0111161"]
        assert [a.url for a in addons] == ["https://custom.example/manifest.json"]
