"""Tests for StreamSorter."""

from __future__ import annotations

from surfboard.domain.entities.stream import Stream
from surfboard.infrastructure.addons.stream_sorter import StreamSorter, language_name
from surfboard.infrastructure.config.schema import StreamsConfig


def _stream(name: str, title: str = "") -> Stream:
    return Stream(name=name, title=title, info_hash=name)


class TestLanguageName:
    def test_codes_and_names(self) -> None:
        assert language_name("en") == "English"
        assert language_name("DE") == "German"
        assert language_name("french") == "French"


class TestStreamSorter:
    def test_resolution_dominates(self) -> None:
        sorter = StreamSorter(StreamsConfig(), preferred_language="en")
        hd = _stream("a 720p", "🇬🇧 👤 400")
        uhd = _stream("b 2160p", "🇮🇹")
        assert [s.id for s in sorter.sort([hd, uhd])] == ["b 2160p", "a 720p"]

    def test_language_then_seeders(self) -> None:
        sorter = StreamSorter(StreamsConfig(), preferred_language="it")
        english = _stream("en 1080p", "🇬🇧 👤 300")
        italian = _stream("it 1080p", "🇮🇹 👤 5")
        multi = _stream("multi 1080p", "Multi 👤 10")
        ranked = sorter.sort([english, italian, multi])
        assert [s.id for s in ranked] == ["multi 1080p", "it 1080p", "en 1080p"]

    def test_seeders_capped(self) -> None:
        sorter = StreamSorter(StreamsConfig(seeders_cap=100))
        assert sorter.rank(_stream("x", "👤 5000")) == 100

    def test_stable_for_equal_scores(self) -> None:
        sorter = StreamSorter(StreamsConfig())
        streams = [_stream(f"s{i} 1080p") for i in range(5)]
        assert sorter.sort(streams) == streams

    def test_rank_formula(self) -> None:
        sorter = StreamSorter(
            StreamsConfig(resolution_multiplier=10, language_bonus=3, seeders_cap=50),
            preferred_language="en",
        )
        assert sorter.rank(_stream("1080p", "🇬🇧 👤 7")) == 3 * 10 + 3 + 7
