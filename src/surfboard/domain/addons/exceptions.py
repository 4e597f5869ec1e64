"""Addon client and aggregation exceptions."""

from __future__ import annotations


class AddonError(Exception):
    """Base class for all addon-related errors."""


class InvalidAddonUrlError(AddonError):
    """Raised when a request URL cannot be built from the addon's base URL."""


class AddonRequestError(AddonError):
    """Raised on a non-2xx response or a failed request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AddonNetworkError(AddonRequestError):
    """Raised when the request never produced a response (DNS, TLS, timeout)."""


class AddonDecodeError(AddonError):
    """Raised when a response body is not the JSON shape the endpoint defines."""


class ManifestDecodeError(AddonDecodeError):
    """Raised when a manifest cannot be decoded."""


class ManifestNotLoadedError(AddonError):
    """Raised when an addon is used before its manifest was loaded."""


class NoAddonFoundError(AddonError):
    """Raised when no addon could answer a single-source request."""
