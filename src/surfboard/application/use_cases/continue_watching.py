"""Continue-watching use case: resume points for movies and series."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from surfboard.domain.entities.library import FINISHED_THRESHOLD, WatchProgress
from surfboard.domain.entities.media import Episode, MediaItem
from surfboard.domain.ports.watch_progress_repository import WatchProgressRepository

log = structlog.get_logger(__name__)

# Positions earlier than this are not worth resuming.
MIN_RESUME_SECONDS = 10.0


class ContinueWatchingUseCase:
    """Records playback positions and lists unfinished titles.

    One entry per title: for a series the entry tracks the most recently
    watched episode, keyed by the series id.
    """

    def __init__(self, repository: WatchProgressRepository) -> None:
        self._repo = repository

    async def record(
        self,
        *,
        media_id: str,
        media_type: str,
        title: str,
        current_time: float,
        total_duration: float,
        image_url: str | None = None,
        stream_url: str | None = None,
        season: int | None = None,
        episode: int | None = None,
    ) -> WatchProgress | None:
        """Store a playback position.

        Returns the saved record, or ``None`` when nothing was stored:
        unknown duration, position under MIN_RESUME_SECONDS, or a finished
        title (whose entry is removed instead).
        """
        if total_duration <= 0:
            return None

        if current_time / total_duration >= FINISHED_THRESHOLD:
            await self._repo.delete(media_id)
            log.info("watch_progress_finished", media_id=media_id)
            return None

        if current_time < MIN_RESUME_SECONDS:
            return None

        progress = WatchProgress(
            id=media_id,
            media_id=media_id,
            media_type=media_type,
            title=title,
            image_url=image_url,
            stream_url=stream_url,
            season=season,
            episode=episode,
            current_time=current_time,
            total_duration=total_duration,
            updated_at=datetime.now(timezone.utc),
        )
        await self._repo.save(progress)
        return progress

    async def record_playback(
        self,
        item: MediaItem,
        *,
        current_time: float,
        total_duration: float,
        episode: Episode | None = None,
        stream_url: str | None = None,
    ) -> WatchProgress | None:
        """``record`` for a media item (and episode) the player was opened with."""
        return await self.record(
            media_id=item.id,
            media_type=item.type,
            title=item.name,
            current_time=current_time,
            total_duration=total_duration,
            image_url=item.artwork_url(episode),
            stream_url=stream_url,
            season=episode.season if episode else None,
            episode=episode.episode_number if episode else None,
        )

    async def get(self, media_id: str) -> WatchProgress | None:
        return await self._repo.get(media_id)

    async def list(self) -> list[WatchProgress]:
        """Unfinished entries, most recently updated first."""
        entries = [p for p in await self._repo.list() if not p.is_finished]
        entries.sort(key=lambda p: p.updated_at, reverse=True)
        return entries

    async def remove(self, media_id: str) -> bool:
        return await self._repo.delete(media_id)
