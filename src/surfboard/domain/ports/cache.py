"""Key-value store the library repositories persist into."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Async key-value store, used as ``async with store: ...``.

    The repositories in ``infrastructure.persistence`` keep JSON strings
    here under fixed keys; ``DiskcacheAdapter`` is the production store.
    A ``ttl`` of 0 keeps the value until it is deleted.
    """

    async def get(self, key: str) -> Any:
        """Stored value, or ``None`` when the key is missing or expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None: ...

    async def delete(self, key: str) -> bool:
        """``False`` when there was nothing to delete."""
        ...

    async def exists(self, key: str) -> bool: ...

    async def clear(self) -> None: ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
