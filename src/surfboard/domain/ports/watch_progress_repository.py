"""Port for watch-progress persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from surfboard.domain.entities.library import WatchProgress


@runtime_checkable
class WatchProgressRepository(Protocol):
    """Async store of resume points keyed by ``WatchProgress.id``."""

    async def save(self, progress: WatchProgress) -> None: ...

    async def get(self, progress_id: str) -> WatchProgress | None: ...

    async def list(self) -> list[WatchProgress]: ...

    async def delete(self, progress_id: str) -> bool: ...
