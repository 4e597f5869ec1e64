from .base import AddonClientProtocol
from .exceptions import (
    AddonDecodeError,
    AddonError,
    AddonNetworkError,
    AddonRequestError,
    InvalidAddonUrlError,
    ManifestDecodeError,
    ManifestNotLoadedError,
    NoAddonFoundError,
)

__all__ = [
    "AddonClientProtocol",
    "AddonDecodeError",
    "AddonError",
    "AddonNetworkError",
    "AddonRequestError",
    "InvalidAddonUrlError",
    "ManifestDecodeError",
    "ManifestNotLoadedError",
    "NoAddonFoundError",
]
