from .cache import CachePort
from .favorites_repository import FavoritesRepository
from .saved_addon_repository import SavedAddonRepository
from .watch_progress_repository import WatchProgressRepository

__all__ = [
    "CachePort",
    "FavoritesRepository",
    "SavedAddonRepository",
    "WatchProgressRepository",
]
