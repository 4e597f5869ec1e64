"""Protocol every addon client satisfies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from surfboard.domain.entities.manifest import AddonManifest
from surfboard.domain.entities.media import MediaItem
from surfboard.domain.entities.stream import Stream


@runtime_checkable
class AddonClientProtocol(Protocol):
    """Network access to one addon, identified by its manifest URL.

    Lifecycle: created unloaded (``manifest is None``); ``load_manifest()``
    fetches the manifest once and caches it for the client's lifetime.
    """

    manifest_url: str

    @property
    def base_url(self) -> str: ...

    @property
    def manifest(self) -> AddonManifest | None: ...

    @property
    def addon_id(self) -> str: ...

    @property
    def name(self) -> str: ...

    def supports(self, resource: str, content_type: str) -> bool: ...

    async def load_manifest(self) -> AddonManifest: ...

    async def fetch_catalog(
        self,
        content_type: str,
        catalog_id: str,
        extra: Mapping[str, str] | None = None,
    ) -> list[MediaItem]: ...

    async def fetch_meta(self, content_type: str, media_id: str) -> MediaItem: ...

    async def fetch_streams(self, content_type: str, media_id: str) -> list[Stream]: ...
