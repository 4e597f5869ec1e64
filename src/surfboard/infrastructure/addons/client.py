"""Async httpx implementation of AddonClientProtocol."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TypeVar
from urllib.parse import quote, urlsplit, urlunsplit

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from surfboard.domain.addons.exceptions import (
    AddonDecodeError,
    AddonNetworkError,
    AddonRequestError,
    InvalidAddonUrlError,
    ManifestDecodeError,
    ManifestNotLoadedError,
)
from surfboard.domain.entities.manifest import AddonManifest
from surfboard.domain.entities.media import MediaItem
from surfboard.domain.entities.stream import Stream
from surfboard.infrastructure.addons.schemas import (
    CatalogResponse,
    ManifestSchema,
    MetaResponse,
    StreamResponse,
)

log = structlog.get_logger(__name__)

_SchemaT = TypeVar("_SchemaT", bound=BaseModel)

_JSON_HEADERS = {"Accept": "application/json"}


def derive_base_url(manifest_url: str) -> str:
    """Strip the manifest file name (last path segment) from *manifest_url*.

    ``https://host/cfg/manifest.json`` -> ``https://host/cfg``.
    Query string and fragment are dropped; a single trailing slash is removed.
    """
    parts = urlsplit(manifest_url)
    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    path = path.rsplit("/", 1)[0] if "/" in path else ""
    base = urlunsplit((parts.scheme, parts.netloc, path, "", ""))
    if base.endswith("/"):
        base = base[:-1]
    return base


def _path_segment(value: str) -> str:
    return quote(value, safe=":")


def _extra_segment(extra: Mapping[str, str]) -> str:
    return "&".join(f"{key}={quote(str(value), safe='')}" for key, value in extra.items())


def catalog_extra(extra: Mapping[str, str] | None) -> dict[str, str]:
    """Copy *extra*, adding ``skip=0`` unless ``search`` or ``skip`` is set."""
    params = dict(extra or {})
    if "search" not in params and "skip" not in params:
        params["skip"] = "0"
    return params


class HttpxAddonClient:
    """Talks to one addon over HTTP, given its manifest URL.

    Implements ``AddonClientProtocol`` from domain.addons.base.  The
    manifest is fetched once and cached; all other calls build URLs
    relative to ``base_url``.
    """

    def __init__(self, manifest_url: str, *, http_client: httpx.AsyncClient) -> None:
        self.manifest_url = manifest_url
        self._http = http_client
        self._manifest: AddonManifest | None = None
        self._load_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"HttpxAddonClient({self.manifest_url!r})"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return derive_base_url(self.manifest_url)

    @property
    def manifest(self) -> AddonManifest | None:
        return self._manifest

    @property
    def addon_id(self) -> str:
        return self._manifest.id if self._manifest else self.manifest_url

    @property
    def name(self) -> str:
        return self._manifest.name if self._manifest else "Unknown Addon"

    def require_manifest(self) -> AddonManifest:
        if self._manifest is None:
            raise ManifestNotLoadedError(f"manifest not loaded: {self.manifest_url}")
        return self._manifest

    def supports(self, resource: str, content_type: str) -> bool:
        if self._manifest is None:
            return False
        return self._manifest.supports(resource, content_type)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _url(self, *segments: str, extra: Mapping[str, str] | None = None) -> str:
        path = "/".join(_path_segment(s) for s in segments)
        if extra:
            path = f"{path}/{_extra_segment(extra)}"
        url = f"{self.base_url}/{path}.json"
        _check_url(url)
        return url

    async def _get(
        self,
        url: str,
        schema: type[_SchemaT],
        *,
        decode_error: type[AddonDecodeError] = AddonDecodeError,
        require_200: bool = False,
    ) -> _SchemaT:
        """GET *url* and validate the body against *schema*."""
        log.debug("addon_request", addon=self.addon_id, url=url)
        try:
            resp = await self._http.get(url, headers=_JSON_HEADERS)
        except httpx.InvalidURL as exc:
            raise InvalidAddonUrlError(f"invalid request URL: {url}") from exc
        except httpx.HTTPError as exc:
            raise AddonNetworkError(f"request to {url} failed: {exc!r}") from exc

        ok = resp.status_code == 200 if require_200 else resp.is_success
        if not ok:
            raise AddonRequestError(
                f"{url} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            return schema.model_validate_json(resp.content)
        except ValidationError as exc:
            raise decode_error(
                f"unexpected response shape from {url}: "
                f"{exc.error_count()} validation error(s)"
            ) from exc

    # ------------------------------------------------------------------
    # Public API (AddonClientProtocol)
    # ------------------------------------------------------------------

    async def load_manifest(self) -> AddonManifest:
        """Fetch and cache the manifest.  Later calls return the cached value."""
        if self._manifest is not None:
            return self._manifest
        async with self._load_lock:
            if self._manifest is None:
                _check_url(self.manifest_url)
                schema = await self._get(
                    self.manifest_url, ManifestSchema, decode_error=ManifestDecodeError
                )
                self._manifest = schema.to_domain()
                log.info(
                    "addon_manifest_loaded",
                    addon=self._manifest.id,
                    name=self._manifest.name,
                    resources=self._manifest.resource_names,
                    types=self._manifest.types,
                )
        return self._manifest

    async def fetch_catalog(
        self,
        content_type: str,
        catalog_id: str,
        extra: Mapping[str, str] | None = None,
    ) -> list[MediaItem]:
        """Fetch one catalog page.

        Args:
            content_type: ``"movie"``, ``"series"``, ...
            catalog_id: Catalog id from the manifest.
            extra: Extra parameters (``search``, ``skip``, ``genre``).
                Values are sent raw; percent-encoding happens here.
        """
        url = self._url("catalog", content_type, catalog_id, extra=catalog_extra(extra))
        response = await self._get(url, CatalogResponse)
        items = response.to_domain()
        log.debug(
            "addon_catalog_fetched",
            addon=self.addon_id,
            catalog=catalog_id,
            count=len(items),
        )
        return items

    async def fetch_meta(self, content_type: str, media_id: str) -> MediaItem:
        url = self._url("meta", content_type, media_id)
        response = await self._get(url, MetaResponse)
        return response.to_domain()

    async def fetch_streams(self, content_type: str, media_id: str) -> list[Stream]:
        """Fetch stream candidates.  Any status other than 200 is an error."""
        url = self._url("stream", content_type, media_id)
        response = await self._get(url, StreamResponse, require_200=True)
        streams = response.to_domain()
        log.debug(
            "addon_streams_fetched",
            addon=self.addon_id,
            media_id=media_id,
            count=len(streams),
        )
        return streams


def _check_url(url: str) -> None:
    """Raise InvalidAddonUrlError unless *url* is an absolute http(s) URL."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidAddonUrlError(f"invalid URL: {url!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidAddonUrlError(f"invalid URL: {url!r}")
