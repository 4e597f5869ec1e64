"""Port for favorites persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from surfboard.domain.entities.library import FavoriteItem


@runtime_checkable
class FavoritesRepository(Protocol):
    async def save(self, item: FavoriteItem) -> None: ...

    async def get(self, item_id: str) -> FavoriteItem | None: ...

    async def list(self) -> list[FavoriteItem]: ...

    async def delete(self, item_id: str) -> bool: ...
