"""Release name parsing for stream candidates using guessit.

Addon titles carry most metadata as tokens (see domain.entities.stream).
When a token is missing, the behavior-hint filename (a scene release
name) usually still has it; guessit fills those gaps.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from guessit import guessit

from surfboard.domain.entities.stream import (
    HdrType,
    Stream,
    StreamResolution,
    parse_hdr,
)

_SCREEN_SIZE_TO_RESOLUTION: dict[str, StreamResolution] = {
    "2160p": StreamResolution.UHD_4K,
    "4320p": StreamResolution.UHD_4K,
    "1080p": StreamResolution.FULL_HD,
    "1080i": StreamResolution.FULL_HD,
    "720p": StreamResolution.HD,
    "576p": StreamResolution.SD,
    "480p": StreamResolution.SD,
    "360p": StreamResolution.SD,
}

_GUESSIT_VIDEO_CODECS: dict[str, str] = {
    "H.265": "HEVC",
    "H.264": "H.264",
    "AV1": "AV1",
}

_GUESSIT_AUDIO_CODECS: dict[str, str] = {
    "Dolby TrueHD": "TrueHD",
    "DTS-HD": "DTS-HD MA",
    "DTS": "DTS",
    "Dolby Digital": "AC3",
    "Dolby Digital Plus": "EAC3",
    "AAC": "AAC",
}

_SIZE_RE = re.compile(r"([\d.]+)\s*([KMGT]?B)")

_SIZE_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


@dataclass(frozen=True)
class StreamInfo:
    """Best-effort technical description of one stream."""

    resolution: StreamResolution = StreamResolution.UNKNOWN
    hdr: HdrType = HdrType.SDR
    video_codec: str | None = None
    audio_codec: str | None = None
    release_group: str | None = None
    languages: list[str] = field(default_factory=list)
    size_bytes: int | None = None
    seeders: int | None = None
    source: str | None = None
    is_remux: bool = False


def size_to_bytes(size_str: str | None) -> int:
    """Parse a size string to bytes.

    Supports formats:
        - "1234" (raw bytes)
        - "6.91 GB"
        - "500 MB"
        - "1.2 TB"

    Returns 0 when the string is empty or unparseable.
    """
    if not size_str:
        return 0

    text = size_str.strip()
    if text.isdigit():
        return int(text)

    match = _SIZE_RE.match(text.upper())
    if not match:
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        return 0
    return int(value * _SIZE_MULTIPLIERS.get(match.group(2), 1))


def _first(value: object) -> object:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _language_names(value: object) -> list[str]:
    """Convert guessit Language object(s) to English names."""
    items = value if isinstance(value, list) else [value]
    names: list[str] = []
    for lang in items:
        name = getattr(lang, "name", None)
        if name and name not in names:
            names.append(str(name))
    return names


def guess_release(filename: str) -> dict[str, object]:
    """Run guessit on *filename*; returns a plain dict."""
    return dict(guessit(filename))


def describe_stream(stream: Stream) -> StreamInfo:
    """Combine title tokens with guessit output for the release filename.

    Title tokens win; guessit is only consulted for fields the tokens
    leave empty and only when a filename is present.
    """
    resolution = stream.resolution
    hdr = stream.hdr_type
    video_codec = stream.video_codec
    audio_codec = stream.audio_codec
    languages = stream.languages
    release_group: str | None = None

    filename = stream.filename
    if filename:
        guess = guess_release(filename)

        if resolution is StreamResolution.UNKNOWN:
            screen_size = _first(guess.get("screen_size"))
            if isinstance(screen_size, str):
                resolution = _SCREEN_SIZE_TO_RESOLUTION.get(
                    screen_size, StreamResolution.UNKNOWN
                )

        if hdr is HdrType.SDR:
            hdr = parse_hdr(filename)

        if video_codec is None:
            codec = _first(guess.get("video_codec"))
            if isinstance(codec, str):
                video_codec = _GUESSIT_VIDEO_CODECS.get(codec, codec)

        if audio_codec is None:
            codec = _first(guess.get("audio_codec"))
            if isinstance(codec, str):
                audio_codec = _GUESSIT_AUDIO_CODECS.get(codec, codec)

        if not languages and guess.get("language"):
            languages = _language_names(guess["language"])

        group = guess.get("release_group")
        if isinstance(group, str):
            release_group = group

    size_bytes: int | None = None
    if stream.file_size:
        size_bytes = size_to_bytes(stream.file_size) or None
    if size_bytes is None and stream.behavior_hints is not None:
        size_bytes = stream.behavior_hints.video_size

    return StreamInfo(
        resolution=resolution,
        hdr=hdr,
        video_codec=video_codec,
        audio_codec=audio_codec,
        release_group=release_group,
        languages=languages,
        size_bytes=size_bytes,
        seeders=stream.seeders,
        source=stream.source,
        is_remux=stream.is_remux,
    )
