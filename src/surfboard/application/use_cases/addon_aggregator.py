"""Addon aggregator: loads addons and fans requests out across them.

The aggregator owns the ordered list of loaded addon clients (the
registry) and merges their answers:

- catalogs and streams: all supporting addons in parallel, failures
  dropped, results in registry order
- meta: supporting addons one after another, first success wins
- search: every searchable catalog in parallel, duplicates removed by id
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from enum import Enum
from typing import TypeVar

import structlog

from surfboard.domain.addons.base import AddonClientProtocol
from surfboard.domain.addons.exceptions import NoAddonFoundError
from surfboard.domain.entities.manifest import ManifestCatalog
from surfboard.domain.entities.media import AddonCatalog, MediaItem
from surfboard.domain.entities.stream import AddonStreams, Stream

log = structlog.get_logger(__name__)

_T = TypeVar("_T")

ClientFactory = Callable[[str], AddonClientProtocol]


class AggregatorState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"


class AddonAggregator:
    """Registry of loaded addons plus the fan-out operations over them.

    Args:
        client_factory: Builds an (unloaded) client for a manifest URL.
        addon_timeout: Upper bound in seconds for a single addon call
            inside a fan-out.  ``None`` disables the bound.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        addon_timeout: float | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._addon_timeout = addon_timeout
        self._addons: tuple[AddonClientProtocol, ...] = ()
        self._state = AggregatorState.IDLE

    # ------------------------------------------------------------------
    # Registry state
    # ------------------------------------------------------------------

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is AggregatorState.LOADING

    @property
    def is_loaded(self) -> bool:
        return self._state is AggregatorState.LOADED

    @property
    def addons(self) -> tuple[AddonClientProtocol, ...]:
        """Loaded addons in load order (immutable snapshot)."""
        return self._addons

    def addons_for(self, resource: str, content_type: str) -> list[AddonClientProtocol]:
        return [a for a in self._addons if a.supports(resource, content_type)]

    def addon(self, addon_id: str) -> AddonClientProtocol | None:
        for client in self._addons:
            if client.addon_id == addon_id:
                return client
        return None

    async def load_addons(self, urls: Sequence[str]) -> tuple[AddonClientProtocol, ...]:
        """Build and load one client per URL concurrently.

        Addons whose manifest fails to load are logged and left out; the
        rest keep the order of *urls*.  The registry is replaced in a single
        assignment once every load has finished.
        """
        previous = self._state
        self._state = AggregatorState.LOADING
        log.info("addons_loading", count=len(urls))

        try:
            loaded = await asyncio.gather(*(self._load_one(url) for url in urls))
        except BaseException:
            self._state = previous
            raise

        self._addons = tuple(client for client in loaded if client is not None)
        self._state = AggregatorState.LOADED
        log.info(
            "addons_loaded",
            loaded=len(self._addons),
            failed=len(urls) - len(self._addons),
            addons=[a.addon_id for a in self._addons],
        )
        return self._addons

    async def _load_one(self, url: str) -> AddonClientProtocol | None:
        try:
            client = self._client_factory(url)
            await self._bounded(client.load_manifest())
        except Exception:
            log.warning("addon_load_failed", url=url, exc_info=True)
            return None
        return client

    async def _bounded(self, call: Awaitable[_T]) -> _T:
        if self._addon_timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=self._addon_timeout)

    # ------------------------------------------------------------------
    # Catalogs
    # ------------------------------------------------------------------

    async def fetch_catalogs(self, content_type: str) -> list[AddonCatalog]:
        """First declared catalog of *content_type* from every supporting addon."""
        jobs: list[tuple[AddonClientProtocol, ManifestCatalog]] = []
        for client in self.addons_for("catalog", content_type):
            catalogs = client.manifest.catalogs_for(content_type) if client.manifest else []
            if catalogs:
                jobs.append((client, catalogs[0]))

        results = await asyncio.gather(
            *(self._catalog_one(client, catalog) for client, catalog in jobs)
        )
        return [r for r in results if r is not None]

    async def _catalog_one(
        self, client: AddonClientProtocol, catalog: ManifestCatalog
    ) -> AddonCatalog | None:
        try:
            items = await self._bounded(client.fetch_catalog(catalog.type, catalog.id))
        except Exception:
            log.warning(
                "addon_catalog_failed",
                addon=client.addon_id,
                catalog=catalog.id,
                content_type=catalog.type,
                exc_info=True,
            )
            return None
        return AddonCatalog(
            addon_id=client.addon_id,
            addon_name=client.name,
            catalog_id=catalog.id,
            items=items,
        )

    async def fetch_catalog(
        self,
        addon_id: str,
        content_type: str,
        catalog_id: str,
        extra: Mapping[str, str] | None = None,
    ) -> list[MediaItem]:
        """One catalog page from one addon (pagination via ``skip``).

        Errors from the addon propagate; there is nothing to fall back to.
        """
        client = self.addon(addon_id)
        if client is None:
            raise NoAddonFoundError(f"no loaded addon with id {addon_id!r}")
        return await self._bounded(client.fetch_catalog(content_type, catalog_id, extra))

    async def search_catalogs(self, content_type: str, query: str) -> list[MediaItem]:
        """Search every searchable catalog; results deduplicated by id (first wins)."""
        if not query.strip():
            return []

        jobs: list[tuple[AddonClientProtocol, ManifestCatalog]] = []
        for client in self.addons_for("catalog", content_type):
            if client.manifest is None:
                continue
            jobs.extend(
                (client, c) for c in client.manifest.search_catalogs_for(content_type)
            )

        results = await asyncio.gather(
            *(self._search_one(client, catalog, query) for client, catalog in jobs)
        )

        seen: set[str] = set()
        merged: list[MediaItem] = []
        for items in results:
            for item in items:
                if item.id in seen:
                    continue
                seen.add(item.id)
                merged.append(item)

        log.debug(
            "addon_search_merged",
            content_type=content_type,
            catalogs=len(jobs),
            results=len(merged),
        )
        return merged

    async def _search_one(
        self, client: AddonClientProtocol, catalog: ManifestCatalog, query: str
    ) -> list[MediaItem]:
        try:
            return await self._bounded(
                client.fetch_catalog(catalog.type, catalog.id, {"search": query})
            )
        except Exception:
            log.warning(
                "addon_search_failed",
                addon=client.addon_id,
                catalog=catalog.id,
                exc_info=True,
            )
            return []

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------

    async def fetch_meta(self, content_type: str, media_id: str) -> MediaItem:
        """Ask supporting addons in registry order; the first answer wins."""
        for client in self.addons_for("meta", content_type):
            try:
                return await self._bounded(client.fetch_meta(content_type, media_id))
            except Exception:
                log.warning(
                    "addon_meta_failed",
                    addon=client.addon_id,
                    media_id=media_id,
                    exc_info=True,
                )
        raise NoAddonFoundError(
            f"no addon returned meta for {content_type}/{media_id}"
        )

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    async def fetch_streams_by_addon(
        self, content_type: str, media_id: str
    ) -> list[AddonStreams]:
        """Streams grouped per successful addon, in registry order."""
        clients = self.addons_for("stream", content_type)
        results = await asyncio.gather(
            *(self._streams_one(c, content_type, media_id) for c in clients)
        )
        return [r for r in results if r is not None]

    async def fetch_streams(self, content_type: str, media_id: str) -> list[Stream]:
        """All streams from all supporting addons; empty if every addon failed."""
        streams: list[Stream] = []
        for group in await self.fetch_streams_by_addon(content_type, media_id):
            streams.extend(group.streams)
        return streams

    async def _streams_one(
        self, client: AddonClientProtocol, content_type: str, media_id: str
    ) -> AddonStreams | None:
        try:
            streams = await self._bounded(client.fetch_streams(content_type, media_id))
        except Exception:
            log.warning(
                "addon_streams_failed",
                addon=client.addon_id,
                media_id=media_id,
                exc_info=True,
            )
            return None
        return AddonStreams(
            addon_id=client.addon_id,
            addon_name=client.name,
            streams=streams,
        )
