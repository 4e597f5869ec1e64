"""Pydantic wire schemas for the addon protocol.

One response schema per endpoint (manifest, catalog, meta, stream), each
validated on its own and converted into domain records via ``to_domain()``.
Field aliases follow the protocol's camelCase keys; values addons send
with inconsistent JSON types (numbers for years, ``null`` for lists) are
coerced before validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from surfboard.domain.entities.manifest import (
    AddonManifest,
    CatalogExtra,
    DetailedResource,
    ManifestBehaviorHints,
    ManifestCatalog,
    ManifestResource,
    SimpleResource,
)
from surfboard.domain.entities.media import (
    Episode,
    MediaBehaviorHints,
    MediaItem,
    MediaLink,
    Trailer,
    TrailerStream,
)
from surfboard.domain.entities.stream import (
    ProxyHeaders,
    Stream,
    StreamBehaviorHints,
    Subtitle,
)

# ---------------------------------------------------------------------------
# Lenient field types
# ---------------------------------------------------------------------------


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _none_to_empty(value: Any) -> Any:
    return [] if value is None else value


def _as_str_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


_Str = Annotated[str, BeforeValidator(_as_text)]
_Text = Annotated[Optional[str], BeforeValidator(_as_text)]
_StrList = Annotated[Optional[list[_Str]], BeforeValidator(_as_str_list)]
_Int = Annotated[Optional[int], BeforeValidator(_blank_to_none)]
_Float = Annotated[Optional[float], BeforeValidator(_blank_to_none)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class ResourceDetailSchema(_Schema):
    name: str
    types: _StrList = None
    id_prefixes: _StrList = Field(default=None, alias="idPrefixes")


# Bare string first, structured object as the fallback.
_Resource = Annotated[
    Union[str, ResourceDetailSchema], Field(union_mode="left_to_right")
]


def _resource_to_domain(resource: str | ResourceDetailSchema) -> ManifestResource:
    if isinstance(resource, str):
        return SimpleResource(name=resource)
    return DetailedResource(
        name=resource.name,
        types=resource.types,
        id_prefixes=resource.id_prefixes,
    )


class CatalogExtraSchema(_Schema):
    name: str
    is_required: Optional[bool] = Field(default=None, alias="isRequired")
    options: _StrList = None

    def to_domain(self) -> CatalogExtra:
        return CatalogExtra(
            name=self.name,
            is_required=bool(self.is_required),
            options=self.options,
        )


class CatalogSchema(_Schema):
    type: str
    id: str
    name: _Text = None
    genres: _StrList = None
    extra: Optional[list[CatalogExtraSchema]] = None
    extra_supported: _StrList = Field(default=None, alias="extraSupported")
    extra_required: _StrList = Field(default=None, alias="extraRequired")

    def to_domain(self) -> ManifestCatalog:
        return ManifestCatalog(
            type=self.type,
            id=self.id,
            name=self.name,
            genres=self.genres,
            extra=[e.to_domain() for e in self.extra] if self.extra is not None else None,
            extra_supported=self.extra_supported,
            extra_required=self.extra_required,
        )


class ManifestBehaviorHintsSchema(_Schema):
    adult: Optional[bool] = None
    p2p: Optional[bool] = None
    configurable: Optional[bool] = None
    configuration_required: Optional[bool] = Field(
        default=None, alias="configurationRequired"
    )

    def to_domain(self) -> ManifestBehaviorHints:
        return ManifestBehaviorHints(
            adult=bool(self.adult),
            p2p=bool(self.p2p),
            configurable=bool(self.configurable),
            configuration_required=bool(self.configuration_required),
        )


class ManifestSchema(_Schema):
    id: str
    version: _Str
    name: str
    description: _Text = None
    logo: _Text = None
    resources: list[_Resource]
    types: list[str]
    catalogs: Annotated[list[CatalogSchema], BeforeValidator(_none_to_empty)] = []
    id_prefixes: _StrList = Field(default=None, alias="idPrefixes")
    behavior_hints: Optional[ManifestBehaviorHintsSchema] = Field(
        default=None, alias="behaviorHints"
    )

    def to_domain(self) -> AddonManifest:
        return AddonManifest(
            id=self.id,
            version=self.version,
            name=self.name,
            description=self.description,
            logo=self.logo,
            resources=[_resource_to_domain(r) for r in self.resources],
            types=list(self.types),
            catalogs=[c.to_domain() for c in self.catalogs],
            id_prefixes=self.id_prefixes,
            behavior_hints=(
                self.behavior_hints.to_domain() if self.behavior_hints else None
            ),
        )


# ---------------------------------------------------------------------------
# Meta / catalog items
# ---------------------------------------------------------------------------


class EpisodeSchema(_Schema):
    id: _Str
    season: int
    number: _Int = None
    episode: _Int = None
    name: _Text = None
    title: _Text = None
    overview: _Text = None
    description: _Text = None
    thumbnail: _Text = None
    first_aired: _Text = Field(default=None, alias="firstAired")
    released: _Text = None
    tvdb_id: _Int = None
    rating: _Float = None

    @model_validator(mode="after")
    def _require_number(self) -> "EpisodeSchema":
        if self.number is None:
            if self.episode is None:
                raise ValueError("episode has neither 'number' nor 'episode'")
            self.number = self.episode
        return self

    def to_domain(self, parent_id: str) -> Episode:
        assert self.number is not None
        return Episode(
            id=self.id,
            season=self.season,
            number=self.number,
            episode=self.episode,
            name=self.name or self.title,
            overview=self.overview,
            description=self.description,
            thumbnail=self.thumbnail,
            first_aired=self.first_aired,
            released=self.released,
            tvdb_id=self.tvdb_id,
            rating=self.rating,
            parent_id=parent_id,
        )


class TrailerSchema(_Schema):
    source: _Str
    type: _Text = None


class TrailerStreamSchema(_Schema):
    title: _Text = None
    yt_id: _Text = Field(default=None, alias="ytId")


class MediaLinkSchema(_Schema):
    name: _Text = None
    category: _Text = None
    url: _Text = None


class MediaBehaviorHintsSchema(_Schema):
    default_video_id: _Text = Field(default=None, alias="defaultVideoId")
    has_scheduled_videos: Optional[bool] = Field(
        default=None, alias="hasScheduledVideos"
    )


_List = BeforeValidator(_none_to_empty)


class MediaItemSchema(_Schema):
    id: _Str
    type: str
    name: _Str
    imdb_id: _Text = None
    moviedb_id: _Int = None
    poster: _Text = None
    background: _Text = None
    logo: _Text = None
    description: _Text = None
    year: _Text = None
    release_info: _Text = Field(default=None, alias="releaseInfo")
    released: _Text = None
    runtime: _Text = None
    country: _Text = None
    awards: _Text = None
    slug: _Text = None
    imdb_rating: _Text = Field(default=None, alias="imdbRating")
    popularity: _Float = None
    cast: _StrList = None
    director: _StrList = None
    writer: _StrList = None
    genre: _StrList = None
    genres: _StrList = None
    videos: Annotated[list[EpisodeSchema], _List] = []
    trailers: Annotated[list[TrailerSchema], _List] = []
    trailer_streams: Annotated[list[TrailerStreamSchema], _List] = Field(
        default=[], alias="trailerStreams"
    )
    links: Annotated[list[MediaLinkSchema], _List] = []
    behavior_hints: Optional[MediaBehaviorHintsSchema] = Field(
        default=None, alias="behaviorHints"
    )
    dvd_release: _Text = Field(default=None, alias="dvdRelease")

    def to_domain(self) -> MediaItem:
        hints = self.behavior_hints
        return MediaItem(
            id=self.id,
            type=self.type,
            name=self.name,
            imdb_id=self.imdb_id,
            moviedb_id=self.moviedb_id,
            poster=self.poster,
            background=self.background,
            logo=self.logo,
            description=self.description,
            year=self.year,
            release_info=self.release_info,
            released=self.released,
            runtime=self.runtime,
            country=self.country,
            awards=self.awards,
            slug=self.slug,
            imdb_rating=self.imdb_rating,
            popularity=self.popularity,
            cast=self.cast,
            director=self.director,
            writer=self.writer,
            genre=self.genre,
            genres=self.genres,
            videos=[v.to_domain(parent_id=self.id) for v in self.videos],
            trailers=[Trailer(source=t.source, type=t.type) for t in self.trailers],
            trailer_streams=[
                TrailerStream(title=t.title, yt_id=t.yt_id)
                for t in self.trailer_streams
            ],
            links=[
                MediaLink(name=link.name, category=link.category, url=link.url)
                for link in self.links
            ],
            behavior_hints=(
                MediaBehaviorHints(
                    default_video_id=hints.default_video_id,
                    has_scheduled_videos=bool(hints.has_scheduled_videos),
                )
                if hints
                else None
            ),
            dvd_release=self.dvd_release,
        )


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


class ProxyHeadersSchema(_Schema):
    request: Optional[dict[str, str]] = None
    response: Optional[dict[str, str]] = None


class StreamBehaviorHintsSchema(_Schema):
    binge_group: _Text = Field(default=None, alias="bingeGroup")
    filename: _Text = None
    video_hash: _Text = Field(default=None, alias="videoHash")
    video_size: _Int = Field(default=None, alias="videoSize")
    not_web_ready: Optional[bool] = Field(default=None, alias="notWebReady")
    country_whitelist: _StrList = Field(default=None, alias="countryWhitelist")
    proxy_headers: Optional[ProxyHeadersSchema] = Field(
        default=None, alias="proxyHeaders"
    )

    def to_domain(self) -> StreamBehaviorHints:
        proxy = self.proxy_headers
        return StreamBehaviorHints(
            binge_group=self.binge_group,
            filename=self.filename,
            video_hash=self.video_hash,
            video_size=self.video_size,
            not_web_ready=bool(self.not_web_ready),
            country_whitelist=self.country_whitelist,
            proxy_headers=(
                ProxyHeaders(request=proxy.request, response=proxy.response)
                if proxy
                else None
            ),
        )


class SubtitleSchema(_Schema):
    id: _Text = None
    url: _Text = None
    lang: _Text = None


class StreamSchema(_Schema):
    name: _Text = None
    title: _Text = None
    url: _Text = None
    info_hash: _Text = Field(default=None, alias="infoHash")
    file_idx: _Int = Field(default=None, alias="fileIdx")
    sources: _StrList = None
    behavior_hints: Optional[StreamBehaviorHintsSchema] = Field(
        default=None, alias="behaviorHints"
    )
    description: _Text = None
    subtitles: Optional[list[SubtitleSchema]] = None
    external_url: _Text = Field(default=None, alias="externalUrl")

    def to_domain(self) -> Stream:
        return Stream(
            name=self.name,
            title=self.title,
            url=self.url,
            info_hash=self.info_hash,
            file_idx=self.file_idx,
            sources=self.sources,
            behavior_hints=(
                self.behavior_hints.to_domain() if self.behavior_hints else None
            ),
            description=self.description,
            subtitles=(
                [Subtitle(id=s.id, url=s.url, lang=s.lang) for s in self.subtitles]
                if self.subtitles is not None
                else None
            ),
            external_url=self.external_url,
        )


# ---------------------------------------------------------------------------
# Response envelopes (one per endpoint)
# ---------------------------------------------------------------------------


class CatalogResponse(_Schema):
    """``GET /catalog/<type>/<id>[/<extra>].json``"""

    metas: list[MediaItemSchema]

    def to_domain(self) -> list[MediaItem]:
        return [m.to_domain() for m in self.metas]


class MetaResponse(_Schema):
    """``GET /meta/<type>/<id>.json``"""

    meta: MediaItemSchema

    def to_domain(self) -> MediaItem:
        return self.meta.to_domain()


class StreamResponse(_Schema):
    """``GET /stream/<type>/<id>.json``"""

    streams: list[StreamSchema]

    def to_domain(self) -> list[Stream]:
        return [s.to_domain() for s in self.streams]
