"""Media records shared between the addon client and its callers.

Pure value objects without framework dependencies or I/O.  Content types
are open strings: ``"movie"`` and ``"series"`` are the common ones, but
anything an addon declares passes through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

MOVIE = "movie"
SERIES = "series"


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as sent by addons (``Z`` suffix allowed)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _joined(values: list[str] | None) -> str | None:
    if not values:
        return None
    return ", ".join(values)


@dataclass(frozen=True)
class Episode:
    """One video of a series.

    Addons send two episode-number fields: ``number`` and an alternate
    ``episode``.  The alternate one wins when present.
    """

    id: str
    season: int
    number: int
    episode: int | None = None
    name: str | None = None
    overview: str | None = None
    description: str | None = None
    thumbnail: str | None = None
    first_aired: str | None = None
    released: str | None = None
    tvdb_id: int | None = None
    rating: float | None = None
    parent_id: str = ""

    @property
    def episode_number(self) -> int:
        return self.episode if self.episode is not None else self.number

    @property
    def key(self) -> tuple[str, int, int]:
        """Composite identity: ``(parent_id, season, number)``."""
        return (self.parent_id, self.season, self.number)

    @property
    def display_description(self) -> str | None:
        return self.description or self.overview

    @property
    def released_date(self) -> datetime | None:
        return _parse_timestamp(self.released or self.first_aired)

    @property
    def label(self) -> str:
        return f"S{self.season}E{self.episode_number}"


@dataclass(frozen=True)
class Trailer:
    source: str
    type: str | None = None

    @property
    def youtube_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.source}"


@dataclass(frozen=True)
class TrailerStream:
    title: str | None = None
    yt_id: str | None = None

    @property
    def youtube_url(self) -> str | None:
        if not self.yt_id:
            return None
        return f"https://www.youtube.com/watch?v={self.yt_id}"


@dataclass(frozen=True)
class MediaLink:
    """Navigation link attached to a meta (share, IMDb, genre, cast)."""

    name: str | None = None
    category: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class MediaBehaviorHints:
    default_video_id: str | None = None
    has_scheduled_videos: bool = False


@dataclass(frozen=True)
class MediaItem:
    """A catalog entry or full meta record.

    ``id`` is unique only within one addon's namespace; the same title may
    come back from several addons under the same id.
    """

    id: str
    type: str
    name: str

    # Alternative identifiers
    imdb_id: str | None = None
    moviedb_id: int | None = None

    # Images
    poster: str | None = None
    background: str | None = None
    logo: str | None = None

    # Descriptive fields
    description: str | None = None
    year: str | None = None
    release_info: str | None = None
    released: str | None = None
    runtime: str | None = None
    country: str | None = None
    awards: str | None = None
    slug: str | None = None
    imdb_rating: str | None = None
    popularity: float | None = None

    # People / genres
    cast: list[str] | None = None
    director: list[str] | None = None
    writer: list[str] | None = None
    genre: list[str] | None = None
    genres: list[str] | None = None

    # Series episodes
    videos: list[Episode] = field(default_factory=list)

    trailers: list[Trailer] = field(default_factory=list)
    trailer_streams: list[TrailerStream] = field(default_factory=list)
    links: list[MediaLink] = field(default_factory=list)
    behavior_hints: MediaBehaviorHints | None = None
    dvd_release: str | None = None

    def __hash__(self) -> int:
        # Equal items always share (type, id).
        return hash((self.type, self.id))

    @property
    def is_movie(self) -> bool:
        return self.type == MOVIE

    @property
    def is_series(self) -> bool:
        return self.type == SERIES

    @property
    def all_genres(self) -> list[str]:
        # Cinemeta sends both "genre" and "genres"; the plural one is canonical.
        return list(self.genres or self.genre or [])

    @property
    def cast_string(self) -> str | None:
        return _joined(self.cast)

    @property
    def director_string(self) -> str | None:
        return _joined(self.director)

    @property
    def writer_string(self) -> str | None:
        return _joined(self.writer)

    @property
    def released_date(self) -> datetime | None:
        return _parse_timestamp(self.released)

    @property
    def episodes_by_season(self) -> dict[int, list[Episode]]:
        """Episodes grouped by season, each group sorted by episode number."""
        grouped: dict[int, list[Episode]] = {}
        for video in self.videos:
            grouped.setdefault(video.season, []).append(video)
        for episodes in grouped.values():
            episodes.sort(key=lambda e: e.episode_number)
        return grouped

    @property
    def seasons(self) -> list[int]:
        return sorted({v.season for v in self.videos})

    def episode(self, season: int, number: int) -> Episode | None:
        """Look up an episode by season and effective episode number."""
        for video in self.videos:
            if video.season == season and video.episode_number == number:
                return video
        return None

    def artwork_url(self, episode: Episode | None = None) -> str | None:
        """Best image for a tile: episode thumbnail, then background, then poster."""
        if episode is not None and episode.thumbnail:
            return episode.thumbnail
        return self.background or self.poster

    def display_title(self, episode: Episode | None = None) -> str:
        if episode is None:
            return self.name
        return f"{self.name} - {episode.label}"

    def stream_id(self, episode: Episode | None = None) -> str:
        """Id to request streams with.

        Series streams are keyed by the episode id (``tt1234567:1:1``).
        """
        if episode is not None:
            return episode.id
        return self.id


@dataclass(frozen=True)
class AddonCatalog:
    """Items one addon contributed to a catalog fan-out."""

    addon_id: str
    addon_name: str
    catalog_id: str
    items: list[MediaItem] = field(default_factory=list)
