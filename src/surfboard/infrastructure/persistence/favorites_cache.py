"""Favorites repository backed by CachePort (diskcache)."""

from __future__ import annotations

import json
from datetime import datetime

import structlog

from surfboard.domain.entities.library import FavoriteItem
from surfboard.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_INDEX_KEY: str = "favorite:_index"


def _favorite_key(item_id: str) -> str:
    return f"favorite:{item_id}"


def _serialize_favorite(item: FavoriteItem) -> str:
    return json.dumps(
        {
            "id": item.id,
            "type": item.type,
            "name": item.name,
            "poster": item.poster,
            "added_at": item.added_at.isoformat(),
        }
    )


def _deserialize_favorite(data: str) -> FavoriteItem:
    d = json.loads(data)
    return FavoriteItem(
        id=d["id"],
        type=d["type"],
        name=d.get("name", ""),
        poster=d.get("poster"),
        added_at=datetime.fromisoformat(d["added_at"]),
    )


class CacheFavoritesRepository:
    """Stores favorites via CachePort.

    Key schema:
    - ``favorite:{id}`` → JSON FavoriteItem
    - ``favorite:_index`` → JSON list of ids
    """

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache

    async def save(self, item: FavoriteItem) -> None:
        await self.cache.set(_favorite_key(item.id), _serialize_favorite(item), ttl=0)
        index = await self._load_index()
        if item.id not in index:
            index.append(item.id)
            await self._save_index(index)
        log.debug("favorite_saved", item_id=item.id, type=item.type)

    async def get(self, item_id: str) -> FavoriteItem | None:
        key = _favorite_key(item_id)
        data = await self.cache.get(key)
        if data is None:
            return None
        try:
            return _deserialize_favorite(data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            log.error("favorite_deserialize_error", key=key, error=str(e))
            return None

    async def list(self) -> list[FavoriteItem]:
        results: list[FavoriteItem] = []
        for item_id in await self._load_index():
            item = await self.get(item_id)
            if item is not None:
                results.append(item)
        return results

    async def delete(self, item_id: str) -> bool:
        deleted = await self.cache.delete(_favorite_key(item_id))
        index = await self._load_index()
        if item_id in index:
            index.remove(item_id)
            await self._save_index(index)
        log.debug("favorite_deleted", item_id=item_id, deleted=deleted)
        return deleted

    async def _load_index(self) -> list[str]:
        data = await self.cache.get(_INDEX_KEY)
        if data is None:
            return []
        try:
            return list(json.loads(data))
        except (json.JSONDecodeError, TypeError):
            return []

    async def _save_index(self, index: list[str]) -> None:
        await self.cache.set(_INDEX_KEY, json.dumps(index), ttl=0)
