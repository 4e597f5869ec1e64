"""Tests for release parsing (title tokens + guessit fallback)."""

from __future__ import annotations

import pytest

from surfboard.domain.entities.stream import (
    HdrType,
    Stream,
    StreamBehaviorHints,
    StreamResolution,
)
from surfboard.infrastructure.addons.release_parser import describe_stream, size_to_bytes


class TestSizeToBytes:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1234", 1234),
            ("500 MB", 500 * 1024**2),
            ("1.5 GB", int(1.5 * 1024**3)),
            ("2TB", 2 * 1024**4),
            ("6.91 gb", int(6.91 * 1024**3)),
            ("", 0),
            (None, 0),
            ("lots", 0),
        ],
    )
    def test_parse(self, text: str | None, expected: int) -> None:
        assert size_to_bytes(text) == expected


class TestDescribeStream:
    def test_title_tokens_only(self) -> None:
        stream = Stream(
            name="Torrentio\n4k HDR",
            title="Movie.2019.2160p.HDR.x265\n👤 46 💾 6.91 GB ⚙️ YTS\n🇬🇧",
            info_hash="abc",
        )
        info = describe_stream(stream)
        assert info.resolution is StreamResolution.UHD_4K
        assert info.hdr is HdrType.HDR10
        assert info.video_codec == "HEVC"
        assert info.seeders == 46
        assert info.size_bytes == int(6.91 * 1024**3)
        assert info.source == "YTS"
        assert info.languages == ["English"]
        assert info.release_group is None

    def test_filename_fills_gaps(self) -> None:
        stream = Stream(
            name="Some Debrid Addon",
            title="Movie (2019)",
            behavior_hints=StreamBehaviorHints(
                filename="Movie.2019.2160p.WEB-DL.DV.x265-GROUP.mkv",
                video_size=7_000_000_000,
            ),
        )
        info = describe_stream(stream)
        assert info.resolution is StreamResolution.UHD_4K
        assert info.hdr is HdrType.DOLBY_VISION
        assert info.video_codec == "HEVC"
        assert info.release_group == "GROUP"
        assert info.size_bytes == 7_000_000_000

    def test_filename_language(self) -> None:
        stream = Stream(
            name="Addon",
            behavior_hints=StreamBehaviorHints(filename="Movie.2019.FRENCH.1080p.BluRay.x264.mkv"),
        )
        info = describe_stream(stream)
        assert info.resolution is StreamResolution.FULL_HD
        assert info.languages == ["French"]

    def test_nothing_known(self) -> None:
        info = describe_stream(Stream(name="Direct"))
        assert info.resolution is StreamResolution.UNKNOWN
        assert info.hdr is HdrType.SDR
        assert info.size_bytes is None
        assert info.languages == []
