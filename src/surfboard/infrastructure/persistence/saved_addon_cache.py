"""Custom addon URL list backed by CachePort (diskcache)."""

from __future__ import annotations

import json
from datetime import datetime

import structlog

from surfboard.domain.entities.library import SavedAddon
from surfboard.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_KEY: str = "addons:custom"


class CacheSavedAddonRepository:
    """Keeps user-added addon URLs as one ordered JSON list under ``addons:custom``."""

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache

    async def add(self, addon: SavedAddon) -> None:
        addons = await self.list()
        if any(a.url == addon.url for a in addons):
            return
        addons.append(addon)
        await self._store(addons)
        log.info("saved_addon_added", url=addon.url)

    async def list(self) -> list[SavedAddon]:
        data = await self.cache.get(_KEY)
        if data is None:
            return []
        try:
            return [
                SavedAddon(
                    url=entry["url"],
                    created_at=datetime.fromisoformat(entry["created_at"]),
                )
                for entry in json.loads(data)
            ]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            log.error("saved_addons_deserialize_error", key=_KEY, error=str(e))
            return []

    async def delete(self, url: str) -> bool:
        addons = await self.list()
        kept = [a for a in addons if a.url != url]
        if len(kept) == len(addons):
            return False
        await self._store(kept)
        log.info("saved_addon_removed", url=url)
        return True

    async def _store(self, addons: list[SavedAddon]) -> None:
        payload = [
            {"url": a.url, "created_at": a.created_at.isoformat()} for a in addons
        ]
        await self.cache.set(_KEY, json.dumps(payload), ttl=0)
