"""Port for user-added addon URLs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from surfboard.domain.entities.library import SavedAddon


@runtime_checkable
class SavedAddonRepository(Protocol):
    """Ordered store of custom addon URLs (oldest first)."""

    async def add(self, addon: SavedAddon) -> None: ...

    async def list(self) -> list[SavedAddon]: ...

    async def delete(self, url: str) -> bool: ...
