"""Tests for library records (progress, favorites)."""

from __future__ import annotations

import pytest

from surfboard.domain.entities.library import FavoriteItem, WatchProgress
from surfboard.domain.entities.media import MediaItem


def _progress(current: float, total: float, **kwargs) -> WatchProgress:
    return WatchProgress(
        id="tt1",
        media_id="tt1",
        media_type=kwargs.pop("media_type", "movie"),
        title="Movie",
        current_time=current,
        total_duration=total,
        **kwargs,
    )


class TestWatchProgress:
    def test_progress_fraction(self) -> None:
        assert _progress(30, 120).progress == pytest.approx(0.25)

    def test_progress_zero_duration(self) -> None:
        assert _progress(30, 0).progress == 0.0

    @pytest.mark.parametrize(("current", "expected"), [(200, 1.0), (-30, 0.0)])
    def test_progress_clamped(self, current: float, expected: float) -> None:
        assert _progress(current, 100).progress == expected

    def test_time_remaining(self) -> None:
        assert _progress(30, 120).time_remaining == 90
        assert _progress(200, 100).time_remaining == 0

    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [
            (7200, "2h left"),
            (5400, "1h 30m left"),
            (600, "10 min left"),
            (30, "0 min left"),
        ],
    )
    def test_time_remaining_text(self, remaining: float, expected: str) -> None:
        assert _progress(0, remaining).time_remaining_text == expected

    def test_is_finished_threshold(self) -> None:
        assert _progress(95, 100).is_finished
        assert not _progress(94, 100).is_finished

    def test_season_episode_text(self) -> None:
        assert _progress(1, 2, media_type="series", season=1, episode=5).season_episode_text == "S1 E5"
        assert _progress(1, 2).season_episode_text is None

    def test_type_predicates(self) -> None:
        assert _progress(1, 2).is_movie
        assert _progress(1, 2, media_type="series").is_series


class TestFavoriteItem:
    def test_from_media_item(self) -> None:
        item = MediaItem(id="tt1", type="movie", name="Movie", poster="https://img/p.jpg")
        fav = FavoriteItem.from_media_item(item)
        assert (fav.id, fav.type, fav.name, fav.poster) == (
            "tt1",
            "movie",
            "Movie",
            "https://img/p.jpg",
        )
        assert fav.added_at.tzinfo is not None
