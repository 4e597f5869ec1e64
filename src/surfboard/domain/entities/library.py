"""Library records: watch progress, favorites and user-added addons."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from surfboard.domain.entities.media import MOVIE, SERIES, MediaItem

# Progress at or beyond this share of the runtime counts as watched.
FINISHED_THRESHOLD = 0.95


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class WatchProgress:
    """Resume point for one title.

    ``id`` is the parent media id, so a series keeps a single entry that
    tracks the most recently watched episode.
    """

    id: str
    media_id: str
    media_type: str
    title: str
    image_url: str | None = None
    stream_url: str | None = None
    season: int | None = None
    episode: int | None = None
    current_time: float = 0.0
    total_duration: float = 0.0
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def time_remaining(self) -> float:
        return max(0.0, self.total_duration - self.current_time)

    @property
    def progress(self) -> float:
        """Fraction watched, clamped to 0.0..1.0."""
        if self.total_duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self.current_time / self.total_duration))

    @property
    def is_finished(self) -> bool:
        return self.progress >= FINISHED_THRESHOLD

    @property
    def time_remaining_text(self) -> str:
        minutes = int(self.time_remaining // 60)
        if minutes >= 60:
            hours, rest = divmod(minutes, 60)
            if rest:
                return f"{hours}h {rest}m left"
            return f"{hours}h left"
        return f"{minutes} min left"

    @property
    def season_episode_text(self) -> str | None:
        if self.season is None or self.episode is None:
            return None
        return f"S{self.season} E{self.episode}"

    @property
    def is_movie(self) -> bool:
        return self.media_type == MOVIE

    @property
    def is_series(self) -> bool:
        return self.media_type == SERIES


@dataclass(frozen=True)
class FavoriteItem:
    id: str
    type: str
    name: str
    poster: str | None = None
    added_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_media_item(cls, item: MediaItem) -> FavoriteItem:
        return cls(id=item.id, type=item.type, name=item.name, poster=item.poster)


@dataclass(frozen=True)
class SavedAddon:
    """A custom addon manifest URL the user added."""

    url: str
    created_at: datetime = field(default_factory=_utcnow)
