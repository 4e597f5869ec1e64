"""Addon manifest value objects.

A manifest is the capability descriptor an addon publishes at its
manifest URL.  It is the sole authority on whether an addon is queried
for a given (resource, type) pair.  Pure value objects, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class SimpleResource:
    """Resource declared as a bare name, e.g. ``"catalog"``.

    Carries no type restriction of its own.
    """

    name: str


@dataclass(frozen=True)
class DetailedResource:
    """Resource declared as an object with optional type/id restrictions."""

    name: str
    types: list[str] | None = None
    id_prefixes: list[str] | None = None


ManifestResource = Union[SimpleResource, DetailedResource]


def _resource_allows(resource: ManifestResource, name: str, content_type: str) -> bool:
    if resource.name != name:
        return False
    if isinstance(resource, DetailedResource) and resource.types is not None:
        return content_type in resource.types
    return True


@dataclass(frozen=True)
class CatalogExtra:
    """Extra query parameter descriptor of a catalog (search, skip, genre)."""

    name: str
    is_required: bool = False
    options: list[str] | None = None


@dataclass(frozen=True)
class ManifestCatalog:
    """A named, typed listing exposed by an addon."""

    type: str
    id: str
    name: str | None = None
    genres: list[str] | None = None
    extra: list[CatalogExtra] | None = None
    extra_supported: list[str] | None = None
    extra_required: list[str] | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id.title()

    @property
    def supports_search(self) -> bool:
        """True if the catalog accepts a ``search`` extra parameter.

        ``extraSupported`` is checked first; the ``extra`` descriptors are
        the fallback for addons that only publish the newer format.
        """
        if self.extra_supported and "search" in self.extra_supported:
            return True
        return any(e.name == "search" for e in self.extra or [])

    @property
    def requires_search(self) -> bool:
        if self.extra_required and "search" in self.extra_required:
            return True
        return any(e.name == "search" and e.is_required for e in self.extra or [])


@dataclass(frozen=True)
class ManifestBehaviorHints:
    adult: bool = False
    p2p: bool = False
    configurable: bool = False
    configuration_required: bool = False


@dataclass(frozen=True)
class AddonManifest:
    """Parsed ``manifest.json`` of one addon."""

    id: str
    version: str
    name: str
    resources: list[ManifestResource]
    types: list[str]
    description: str | None = None
    logo: str | None = None
    catalogs: list[ManifestCatalog] = field(default_factory=list)
    id_prefixes: list[str] | None = None
    behavior_hints: ManifestBehaviorHints | None = None

    @property
    def resource_names(self) -> list[str]:
        return [r.name for r in self.resources]

    def supports(self, resource: str, content_type: str) -> bool:
        """Return True if this addon serves *resource* for *content_type*.

        The resource entry must match by name and (when it declares types)
        list the type, and the manifest's top-level ``types`` must list it
        as well.
        """
        if content_type not in self.types:
            return False
        return any(
            _resource_allows(r, resource, content_type) for r in self.resources
        )

    def catalogs_for(self, content_type: str) -> list[ManifestCatalog]:
        """Catalogs of *content_type*, in manifest declaration order."""
        return [c for c in self.catalogs if c.type == content_type]

    def search_catalogs_for(self, content_type: str) -> list[ManifestCatalog]:
        return [c for c in self.catalogs_for(content_type) if c.supports_search]
