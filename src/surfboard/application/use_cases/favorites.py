"""Favorites use case."""

from __future__ import annotations

import structlog

from surfboard.domain.entities.library import FavoriteItem
from surfboard.domain.entities.media import MediaItem
from surfboard.domain.ports.favorites_repository import FavoritesRepository

log = structlog.get_logger(__name__)


class FavoritesUseCase:
    def __init__(self, repository: FavoritesRepository) -> None:
        self._repo = repository

    async def toggle(self, item: MediaItem) -> bool:
        """Add *item* if absent, remove it otherwise.  Returns the new state."""
        if await self._repo.get(item.id) is not None:
            await self._repo.delete(item.id)
            log.info("favorite_removed", item_id=item.id)
            return False
        await self._repo.save(FavoriteItem.from_media_item(item))
        log.info("favorite_added", item_id=item.id, type=item.type)
        return True

    async def is_favorite(self, item_id: str) -> bool:
        return await self._repo.get(item_id) is not None

    async def list(self) -> list[FavoriteItem]:
        """Newest first."""
        items = await self._repo.list()
        items.sort(key=lambda f: f.added_at, reverse=True)
        return items

    async def remove(self, item_id: str) -> bool:
        return await self._repo.delete(item_id)
