"""Watch-progress repository backed by CachePort (diskcache)."""

from __future__ import annotations

import json
from datetime import datetime

import structlog

from surfboard.domain.entities.library import WatchProgress
from surfboard.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

# Cache key for the list of stored progress ids.
_INDEX_KEY: str = "progress:_index"


def _progress_key(progress_id: str) -> str:
    return f"progress:{progress_id}"


def _serialize_progress(p: WatchProgress) -> str:
    return json.dumps(
        {
            "id": p.id,
            "media_id": p.media_id,
            "media_type": p.media_type,
            "title": p.title,
            "image_url": p.image_url,
            "stream_url": p.stream_url,
            "season": p.season,
            "episode": p.episode,
            "current_time": p.current_time,
            "total_duration": p.total_duration,
            "updated_at": p.updated_at.isoformat(),
        }
    )


def _deserialize_progress(data: str) -> WatchProgress:
    d = json.loads(data)
    return WatchProgress(
        id=d["id"],
        media_id=d["media_id"],
        media_type=d["media_type"],
        title=d.get("title", ""),
        image_url=d.get("image_url"),
        stream_url=d.get("stream_url"),
        season=d.get("season"),
        episode=d.get("episode"),
        current_time=float(d.get("current_time", 0.0)),
        total_duration=float(d.get("total_duration", 0.0)),
        updated_at=datetime.fromisoformat(d["updated_at"]),
    )


class CacheWatchProgressRepository:
    """Stores resume points via CachePort.

    Key schema:
    - ``progress:{id}`` → JSON WatchProgress
    - ``progress:_index`` → JSON list of ids
    """

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache

    async def save(self, progress: WatchProgress) -> None:
        await self.cache.set(
            _progress_key(progress.id), _serialize_progress(progress), ttl=0
        )
        index = await self._load_index()
        if progress.id not in index:
            index.append(progress.id)
            await self._save_index(index)
        log.debug(
            "watch_progress_saved",
            progress_id=progress.id,
            progress=round(progress.progress, 3),
        )

    async def get(self, progress_id: str) -> WatchProgress | None:
        key = _progress_key(progress_id)
        data = await self.cache.get(key)
        if data is None:
            return None
        try:
            return _deserialize_progress(data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            log.error("watch_progress_deserialize_error", key=key, error=str(e))
            return None

    async def list(self) -> list[WatchProgress]:
        results: list[WatchProgress] = []
        for progress_id in await self._load_index():
            progress = await self.get(progress_id)
            if progress is not None:
                results.append(progress)
        return results

    async def delete(self, progress_id: str) -> bool:
        deleted = await self.cache.delete(_progress_key(progress_id))
        index = await self._load_index()
        if progress_id in index:
            index.remove(progress_id)
            await self._save_index(index)
        log.debug("watch_progress_deleted", progress_id=progress_id, deleted=deleted)
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
