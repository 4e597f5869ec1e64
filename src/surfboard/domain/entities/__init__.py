from .library import FavoriteItem, SavedAddon, WatchProgress
from .manifest import (
    AddonManifest,
    CatalogExtra,
    DetailedResource,
    ManifestBehaviorHints,
    ManifestCatalog,
    ManifestResource,
    SimpleResource,
)
from .media import AddonCatalog, Episode, MediaItem
from .stream import AddonStreams, HdrType, Stream, StreamResolution

__all__ = [
    "AddonCatalog",
    "AddonManifest",
    "AddonStreams",
    "CatalogExtra",
    "DetailedResource",
    "Episode",
    "FavoriteItem",
    "HdrType",
    "ManifestBehaviorHints",
    "ManifestCatalog",
    "ManifestResource",
    "MediaItem",
    "SavedAddon",
    "SimpleResource",
    "Stream",
    "StreamResolution",
    "WatchProgress",
]
