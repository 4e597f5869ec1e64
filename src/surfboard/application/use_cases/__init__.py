from .addon_aggregator import AddonAggregator, AggregatorState
from .addon_setup import AddonSetupUseCase
from .continue_watching import ContinueWatchingUseCase
from .favorites import FavoritesUseCase

__all__ = [
    "AddonAggregator",
    "AddonSetupUseCase",
    "AggregatorState",
    "ContinueWatchingUseCase",
    "FavoritesUseCase",
]
