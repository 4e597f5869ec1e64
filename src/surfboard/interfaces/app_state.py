"""Service container handed out by the composition root."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from surfboard.application.use_cases.addon_aggregator import AddonAggregator
from surfboard.application.use_cases.addon_setup import AddonSetupUseCase
from surfboard.application.use_cases.continue_watching import ContinueWatchingUseCase
from surfboard.application.use_cases.favorites import FavoritesUseCase
from surfboard.domain.ports import CachePort
from surfboard.infrastructure.addons.stream_sorter import StreamSorter
from surfboard.infrastructure.config import AppConfig


@dataclass
class AppState:
    """All wired resources.  Lifecycle managed by composition.py::build_services()."""

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Application services
    aggregator: AddonAggregator
    addon_setup: AddonSetupUseCase
    continue_watching: ContinueWatchingUseCase
    favorites: FavoritesUseCase
    stream_sorter: StreamSorter
