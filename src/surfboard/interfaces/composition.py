"""Composition root: builds and tears down every service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import structlog

from surfboard.application.use_cases.addon_aggregator import AddonAggregator
from surfboard.application.use_cases.addon_setup import AddonSetupUseCase
from surfboard.application.use_cases.continue_watching import ContinueWatchingUseCase
from surfboard.application.use_cases.favorites import FavoritesUseCase
from surfboard.infrastructure.addons.client import HttpxAddonClient
from surfboard.infrastructure.addons.sources import builtin_addon_urls
from surfboard.infrastructure.addons.stream_sorter import StreamSorter
from surfboard.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from surfboard.infrastructure.common.retry_transport import RetryTransport
from surfboard.infrastructure.config.schema import AppConfig
from surfboard.infrastructure.persistence.favorites_cache import (
    CacheFavoritesRepository,
)
from surfboard.infrastructure.persistence.saved_addon_cache import (
    CacheSavedAddonRepository,
)
from surfboard.infrastructure.persistence.watch_progress_cache import (
    CacheWatchProgressRepository,
)
from surfboard.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared client for all addon traffic (retries throttling and dropped connections)."""
    transport = RetryTransport(
        wrapped=httpx.AsyncHTTPTransport(),
        max_retries=config.http.max_retries,
        backoff_base=config.http.backoff_base,
        max_backoff=config.http.max_backoff,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http.timeout_seconds),
        headers={"User-Agent": config.http.user_agent},
        follow_redirects=config.http.follow_redirects,
    )


@asynccontextmanager
async def build_services(config: AppConfig) -> AsyncIterator[AppState]:
    """Initialize and clean up all resources (DI composition root).

    Order matters:
        1. Cache (required by the repositories)
        2. HTTP client (required by addon clients)
        3. Aggregator (creates one addon client per manifest URL)
        4. Repositories (use cache)
        5. Use cases

    Addons are not loaded here; call ``state.addon_setup.load()``.
    """
    # 1) Cache
    cache = DiskcacheAdapter(
        directory=config.cache.dir,
        ttl_seconds=0,
        max_concurrent=config.cache.max_concurrent,
    )
    await cache.open()
    log.info("cache_initialized", directory=str(config.cache.dir))

    try:
        # 2) HTTP client
        http_client = build_http_client(config)
        log.info(
            "http_client_initialized",
            timeout_seconds=config.http.timeout_seconds,
            max_retries=config.http.max_retries,
        )
        if config.addons.timeout_seconds < config.http.retry_budget_seconds:
            # The fan-out deadline would cancel calls before their last retry.
            log.warning(
                "addon_timeout_below_retry_budget",
                addon_timeout=config.addons.timeout_seconds,
                retry_budget=round(config.http.retry_budget_seconds, 2),
            )

        try:
            # 3) Aggregator
            def client_factory(manifest_url: str) -> HttpxAddonClient:
                return HttpxAddonClient(manifest_url, http_client=http_client)

            aggregator = AddonAggregator(
                client_factory,
                addon_timeout=config.addons.timeout_seconds,
            )

            # 4) Repositories + 5) use cases
            state = AppState(
                config=config,
                cache=cache,
                http_client=http_client,
                aggregator=aggregator,
                addon_setup=AddonSetupUseCase(
                    aggregator=aggregator,
                    saved_addons=CacheSavedAddonRepository(cache),
                    builtin_urls=builtin_addon_urls(config.addons),
                ),
                continue_watching=ContinueWatchingUseCase(
                    CacheWatchProgressRepository(cache)
                ),
                favorites=FavoritesUseCase(CacheFavoritesRepository(cache)),
                stream_sorter=StreamSorter(
                    config.streams,
                    preferred_language=config.preferences.preferred_audio_language,
                ),
            )
            log.info("services_initialized")

            yield state
        finally:
            await http_client.aclose()
            log.info("http_client_closed")
    finally:
        await cache.aclose()
