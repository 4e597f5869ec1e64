"""CachePort backed by a diskcache directory (SQLite files, no server)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import structlog
from diskcache import Cache

log = structlog.get_logger(__name__)

_T = TypeVar("_T")


class DiskcacheAdapter:
    """Async facade over ``diskcache.Cache``.

    diskcache is blocking, so each call runs in a worker thread; a
    semaphore bounds how many of them hit SQLite at the same time.
    Library records have to outlive restarts, which is why
    ``ttl_seconds`` defaults to 0 (never expire).

    ``get`` and ``set`` on a closed adapter raise ``RuntimeError``.
    ``delete``, ``exists`` and ``clear`` treat a closed adapter as empty.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/surfboard",
        ttl_seconds: int = 0,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self._slots = asyncio.Semaphore(max_concurrent)
        self._cache: Cache | None = None

    @property
    def is_open(self) -> bool:
        return self._cache is not None

    async def open(self) -> DiskcacheAdapter:
        """Open (and create, if needed) the cache directory.  Idempotent."""
        if self._cache is None:
            self._cache = await asyncio.to_thread(Cache, str(self.directory))
            log.info("diskcache_opened", directory=str(self.directory))
        return self

    async def aclose(self) -> None:
        cache, self._cache = self._cache, None
        if cache is not None:
            await asyncio.to_thread(cache.close)
            log.info("diskcache_closed", directory=str(self.directory))

    async def __aenter__(self) -> DiskcacheAdapter:
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _opened(self) -> Cache:
        if self._cache is None:
            raise RuntimeError(
                f"diskcache at {self.directory} is closed; open it with 'async with' first"
            )
        return self._cache

    async def _run(self, fn: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        async with self._slots:
            return await asyncio.to_thread(fn, *args, **kwargs)

    async def get(self, key: str) -> Any:
        return await self._run(self._opened().get, key)

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        seconds = self.default_ttl if ttl is None else ttl
        expire = seconds if seconds > 0 else None
        await self._run(self._opened().set, key, value, expire=expire)
        log.debug("cache_set", key=key, expire=expire)

    async def delete(self, key: str) -> bool:
        if self._cache is None:
            return False
        return bool(await self._run(self._cache.delete, key))

    async def exists(self, key: str) -> bool:
        if self._cache is None:
            return False
        # __contains__ also honours expiry.
        return await self._run(self._cache.__contains__, key)

    async def clear(self) -> None:
        if self._cache is None:
            return
        removed = await self._run(self._cache.clear)
        log.warning("cache_cleared", directory=str(self.directory), removed=removed)
