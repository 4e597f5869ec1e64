"""Tests for addon URL sources (built-ins, normalization, merge)."""

from __future__ import annotations

from surfboard.infrastructure.addons.sources import (
    builtin_addon_urls,
    is_valid_addon_url,
    merge_addon_urls,
    normalize_addon_url,
    rewrite_scheme,
)
from surfboard.infrastructure.config.schema import (
    CINEMETA_MANIFEST_URL,
    TORRENTIO_MANIFEST_URL,
    AddonsConfig,
)


class TestRewriteScheme:
    def test_stremio_scheme(self) -> None:
        assert rewrite_scheme("stremio://host/manifest.json") == "https://host/manifest.json"
        assert rewrite_scheme("STREMIO://host/manifest.json") == "https://host/manifest.json"

    def test_other_schemes_untouched(self) -> None:
        assert rewrite_scheme(" http://host/manifest.json ") == "http://host/manifest.json"


class TestNormalize:
    def test_normalize(self) -> None:
        assert normalize_addon_url("https://Host/Manifest.json/") == "https://host/manifest.json"
        assert normalize_addon_url("stremio://host/manifest.json") == normalize_addon_url(
            "https://host/manifest.json"
        )

    def test_is_valid(self) -> None:
        assert is_valid_addon_url("https://host/manifest.json")
        assert is_valid_addon_url("stremio://host/manifest.json")
        assert not is_valid_addon_url("ftp://host/manifest.json")
        assert not is_valid_addon_url("manifest.json")


class TestBuiltins:
    def test_default_order(self) -> None:
        assert builtin_addon_urls(AddonsConfig()) == [CINEMETA_MANIFEST_URL, TORRENTIO_MANIFEST_URL]

    def test_blank_entries_skipped(self) -> None:
        config = AddonsConfig(
            cinemeta="",
            torrentio=TORRENTIO_MANIFEST_URL,
            mediafusion="stremio://mediafusion.example/abc/manifest.json",
        )
        assert builtin_addon_urls(config) == [
            TORRENTIO_MANIFEST_URL,
            "https://mediafusion.example/abc/manifest.json",
        ]


class TestMerge:
    def test_builtins_first_and_deduped(self) -> None:
        merged = merge_addon_urls(
            ["https://a/manifest.json", "https://b/manifest.json"],
            ["https://c/manifest.json", "https://A/manifest.json/", "https://c/manifest.json"],
        )
        assert merged == [
            "https://a/manifest.json",
            "https://b/manifest.json",
            "https://c/manifest.json",
        ]

    def test_empty_entries_dropped(self) -> None:
        assert merge_addon_urls(["", "https://a/manifest.json"], ["  "]) == [
            "https://a/manifest.json"
        ]
