"""Addon setup use case: which addons to load, and user-added ones."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from surfboard.application.use_cases.addon_aggregator import AddonAggregator
from surfboard.domain.addons.base import AddonClientProtocol
from surfboard.domain.entities.library import SavedAddon
from surfboard.domain.ports.saved_addon_repository import SavedAddonRepository
from surfboard.infrastructure.addons.sources import (
    is_valid_addon_url,
    merge_addon_urls,
    normalize_addon_url,
    rewrite_scheme,
)

log = structlog.get_logger(__name__)


class AddonSetupUseCase:
    """Combines built-in addon URLs with user-added ones and (re)loads the aggregator.

    Built-ins always load first, custom addons follow in the order they
    were added.
    """

    def __init__(
        self,
        aggregator: AddonAggregator,
        saved_addons: SavedAddonRepository,
        builtin_urls: Sequence[str],
    ) -> None:
        self._aggregator = aggregator
        self._saved = saved_addons
        self._builtin = list(builtin_urls)

    async def configured_urls(self) -> list[str]:
        custom = [a.url for a in await self._saved.list()]
        return merge_addon_urls(self._builtin, custom)

    async def load(self) -> tuple[AddonClientProtocol, ...]:
        return await self._aggregator.load_addons(await self.configured_urls())

    async def add_custom(self, url: str) -> tuple[AddonClientProtocol, ...]:
        """Save a custom manifest URL and reload.

        Raises:
            ValueError: blank, not http(s), or already configured.
        """
        url = rewrite_scheme(url)
        if not url:
            raise ValueError("addon URL is empty")
        if not is_valid_addon_url(url):
            raise ValueError(f"not an http(s) URL: {url!r}")

        key = normalize_addon_url(url)
        if any(normalize_addon_url(u) == key for u in await self.configured_urls()):
            raise ValueError(f"addon already configured: {url!r}")

        await self._saved.add(SavedAddon(url=url))
        log.info("custom_addon_added", url=url)
        return await self.load()

    async def remove_custom(self, url: str) -> tuple[AddonClientProtocol, ...]:
        """Remove a custom addon (matched by normalized URL) and reload.

        Raises:
            KeyError: no custom addon with that URL.
        """
        key = normalize_addon_url(url)
        matches = [a for a in await self._saved.list() if normalize_addon_url(a.url) == key]
        if not matches:
            raise KeyError(url)
        for addon in matches:
            await self._saved.delete(addon.url)
        log.info("custom_addon_removed", url=url)
        return await self.load()
