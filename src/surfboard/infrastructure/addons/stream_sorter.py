"""Stream ranking for source listings.

Scores streams by resolution, preferred audio language and seeders.
All weights are configurable via StreamsConfig.
"""

from __future__ import annotations

from surfboard.domain.entities.stream import Stream
from surfboard.infrastructure.addons.release_parser import describe_stream
from surfboard.infrastructure.config.schema import StreamsConfig

# ISO 639-1 code -> name used by flag-emoji language tokens.
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "it": "Italian",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "pt": "Portuguese",
}


def language_name(code_or_name: str) -> str:
    """``"en"`` -> ``"English"``; names pass through (title-cased)."""
    value = code_or_name.strip()
    return LANGUAGE_NAMES.get(value.lower(), value.title())


class StreamSorter:
    """Ranking: resolution first, then language match, then seeders.

    Score formula:
    resolution * resolution_multiplier + language_bonus + min(seeders, seeders_cap)

    A stream tagged "Multi" counts as carrying the preferred language.
    Sorting is stable, so equal scores keep addon order.
    """

    def __init__(self, config: StreamsConfig, preferred_language: str = "en") -> None:
        self._resolution_multiplier = config.resolution_multiplier
        self._language_bonus = config.language_bonus
        self._seeders_cap = config.seeders_cap
        self._preferred = language_name(preferred_language) if preferred_language else ""

    def rank(self, stream: Stream) -> int:
        """Calculate ranking score for a single stream."""
        info = describe_stream(stream)
        score = int(info.resolution) * self._resolution_multiplier
        if self._preferred and (
            self._preferred in info.languages or "Multi" in info.languages
        ):
            score += self._language_bonus
        score += min(info.seeders or 0, self._seeders_cap)
        return score

    def sort(self, streams: list[Stream]) -> list[Stream]:
        """Return a new list sorted by descending score."""
        return sorted(streams, key=self.rank, reverse=True)
