"""Tests for the lenient addon wire schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from surfboard.domain.entities.manifest import DetailedResource, SimpleResource
from surfboard.infrastructure.addons.schemas import (
    CatalogResponse,
    EpisodeSchema,
    ManifestSchema,
    MediaItemSchema,
    StreamSchema,
)


class TestManifestSchema:
    def test_mixed_resource_forms(self) -> None:
        manifest = ManifestSchema.model_validate(
            {
                "id": "x",
                "version": 2,
                "name": "X",
                "resources": ["catalog", {"name": "stream", "types": ["movie"], "idPrefixes": "tt"}],
                "types": ["movie"],
                "catalogs": None,
            }
        ).to_domain()

        assert manifest.version == "2"
        assert manifest.catalogs == []
        assert manifest.resources[0] == SimpleResource("catalog")
        assert manifest.resources[1] == DetailedResource(
            name="stream", types=["movie"], id_prefixes=["tt"]
        )

    def test_unknown_keys_ignored(self) -> None:
        manifest = ManifestSchema.model_validate(
            {
                "id": "x",
                "version": "1",
                "name": "X",
                "resources": [],
                "types": [],
                "contactEmail": "a@b.c",
                "stremioAddonsConfig": {"issuer": "x"},
            }
        )
        assert manifest.id == "x"


class TestMediaItemSchema:
    def test_coerces_numbers_and_nulls(self) -> None:
        item = MediaItemSchema.model_validate(
            {
                "id": 603,
                "type": "movie",
                "name": "The Matrix",
                "year": 1999,
                "imdbRating": 8.7,
                "cast": None,
                "videos": None,
                "trailers": [{"source": "vKQi3bBA1y8", "type": "Trailer"}],
            }
        ).to_domain()

        assert item.id == "603"
        assert item.year == "1999"
        assert item.imdb_rating == "8.7"
        assert item.cast is None
        assert item.videos == []
        assert item.trailers[0].youtube_url.endswith("vKQi3bBA1y8")

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            MediaItemSchema.model_validate({"id": "tt1", "type": "movie"})

    def test_catalog_envelope(self) -> None:
        items = CatalogResponse.model_validate(
            {"metas": [{"id": "tt1", "type": "movie", "name": "A"}]}
        ).to_domain()
        assert [i.id for i in items] == ["tt1"]


class TestEpisodeSchema:
    def test_number_falls_back_to_episode(self) -> None:
        ep = EpisodeSchema.model_validate({"id": "e", "season": 1, "episode": 4})
        assert ep.to_domain(parent_id="tt1").number == 4

    def test_requires_some_number(self) -> None:
        with pytest.raises(ValidationError):
            EpisodeSchema.model_validate({"id": "e", "season": 1})

    def test_blank_numeric_fields(self) -> None:
        ep = EpisodeSchema.model_validate(
            {"id": "e", "season": 1, "number": 1, "tvdb_id": "", "rating": ""}
        ).to_domain(parent_id="tt1")
        assert ep.tvdb_id is None
        assert ep.rating is None


class TestStreamSchema:
    def test_full_stream(self) -> None:
        stream = StreamSchema.model_validate(
            {
                "name": "Torrentio\n4k",
                "infoHash": "abc",
                "fileIdx": 2,
                "sources": ["tracker:udp://t:80"],
                "subtitles": [{"id": "1", "url": "https://s/1.srt", "lang": "eng"}],
                "behaviorHints": {
                    "notWebReady": True,
                    "videoSize": 123,
                    "proxyHeaders": {"request": {"User-Agent": "x"}},
                },
            }
        ).to_domain()

        assert stream.file_idx == 2
        assert stream.subtitles is not None and stream.subtitles[0].lang == "eng"
        assert stream.behavior_hints is not None
        assert stream.behavior_hints.not_web_ready
        assert stream.behavior_hints.video_size == 123
        assert stream.behavior_hints.proxy_headers is not None
        assert stream.behavior_hints.proxy_headers.request == {"User-Agent": "x"}

    def test_empty_stream_is_valid(self) -> None:
        stream = StreamSchema.model_validate({}).to_domain()
        assert stream.url is None
        assert stream.behavior_hints is None
