"""Stream records and free-text metadata parsing.

Addons do not send quality, codec or seeder counts as structured fields;
they encode them as emoji/keyword tokens in the stream title, e.g.::

    Movie.2019.2160p.WEB-DL.DV.HDR.x265
    👤 46 💾 6.91 GB ⚙️ YTS 🇬🇧 / 🇮🇹

The parsers below match the conventions observed in the wild.  They are
pure functions with no I/O; ``Stream`` exposes them as properties.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from urllib.parse import quote
from uuid import uuid4


class StreamResolution(IntEnum):
    """Ranked resolutions (higher value = better)."""

    UNKNOWN = 0
    SD = 1
    HD = 2
    FULL_HD = 3
    UHD_4K = 4

    @property
    def label(self) -> str:
        return _RESOLUTION_LABELS[self]


_RESOLUTION_LABELS = {
    StreamResolution.UNKNOWN: "Unknown",
    StreamResolution.SD: "480p",
    StreamResolution.HD: "720p",
    StreamResolution.FULL_HD: "1080p",
    StreamResolution.UHD_4K: "4K",
}


class HdrType(str, Enum):
    SDR = "SDR"
    HDR10 = "HDR10"
    HDR10_PLUS = "HDR10+"
    DOLBY_VISION = "DV"
    DV_HDR = "DV HDR"


# --- Token patterns ---

_SEEDERS_RE = re.compile(r"👤\s?(\d+)")
_SIZE_RE = re.compile(r"💾\s?([\d.]+\s?[KMGT]B)")
_SOURCE_RE = re.compile(r"⚙️?\s?(\w+)")
_DOLBY_VISION_RE = re.compile(r"dolby\s?vision|\bdv\b")

_FLAG_LANGUAGES: list[tuple[tuple[str, ...], str]] = [
    (("🇬🇧",), "English"),
    (("🇮🇹",), "Italian"),
    (("🇫🇷",), "French"),
    (("🇩🇪",), "German"),
    (("🇪🇸",), "Spanish"),
    (("🇷🇺",), "Russian"),
    (("🇯🇵",), "Japanese"),
    (("🇰🇷",), "Korean"),
    (("🇨🇳",), "Chinese"),
    (("🇧🇷", "🇵🇹"), "Portuguese"),
]


def parse_resolution(text: str | None) -> StreamResolution:
    lowered = (text or "").lower()
    if "2160p" in lowered or "4k" in lowered:
        return StreamResolution.UHD_4K
    if "1080p" in lowered:
        return StreamResolution.FULL_HD
    if "720p" in lowered:
        return StreamResolution.HD
    if "480p" in lowered:
        return StreamResolution.SD
    return StreamResolution.UNKNOWN


def quality_badge(text: str | None) -> str:
    """Short badge for a tile ("4K", "1080p"); empty when unknown."""
    resolution = parse_resolution(text)
    if resolution is StreamResolution.UNKNOWN:
        return ""
    return resolution.label


def parse_hdr(text: str | None) -> HdrType:
    lowered = (text or "").lower()
    if _DOLBY_VISION_RE.search(lowered):
        return HdrType.DV_HDR if "hdr" in lowered else HdrType.DOLBY_VISION
    if "hdr10+" in lowered:
        return HdrType.HDR10_PLUS
    if "hdr" in lowered:
        return HdrType.HDR10
    return HdrType.SDR


def parse_seeders(text: str | None) -> int | None:
    """Seeder count from a ``👤 46`` token."""
    m = _SEEDERS_RE.search(text or "")
    return int(m.group(1)) if m else None


def parse_file_size(text: str | None) -> str | None:
    """Human-readable size from a ``💾 6.91 GB`` token."""
    m = _SIZE_RE.search(text or "")
    return m.group(1).strip() if m else None


def parse_source(text: str | None) -> str | None:
    """Indexer/source name from a ``⚙️ YTS`` token."""
    m = _SOURCE_RE.search(text or "")
    return m.group(1) if m else None


def parse_languages(text: str | None) -> list[str]:
    if not text:
        return []
    langs = [
        language
        for flags, language in _FLAG_LANGUAGES
        if any(flag in text for flag in flags)
    ]
    if "multi" in text.lower():
        langs.append("Multi")
    return langs


def parse_video_codec(text: str | None) -> str | None:
    lowered = (text or "").lower()
    if any(t in lowered for t in ("hevc", "x265", "h.265", "h265")):
        return "HEVC"
    if any(t in lowered for t in ("x264", "h.264", "h264")):
        return "H.264"
    if "av1" in lowered:
        return "AV1"
    return None


def parse_audio_codec(text: str | None) -> str | None:
    lowered = (text or "").lower()
    if "truehd" in lowered:
        return "TrueHD Atmos" if "atmos" in lowered else "TrueHD"
    if "dts-hd ma" in lowered or "dts-hd.ma" in lowered:
        return "DTS-HD MA"
    if "dts" in lowered:
        return "DTS"
    if any(t in lowered for t in ("dolby digital", "dd5.1", "ac3")):
        return "AC3"
    if "aac" in lowered:
        return "AAC"
    return None


def is_remux(text: str | None) -> bool:
    return "remux" in (text or "").lower()


def is_web_dl(text: str | None) -> bool:
    lowered = (text or "").lower()
    return "web-dl" in lowered or "webdl" in lowered


def is_bluray(text: str | None) -> bool:
    lowered = (text or "").lower()
    return any(t in lowered for t in ("bluray", "blu-ray", "bdrip"))


# --- Records ---


@dataclass(frozen=True)
class ProxyHeaders:
    request: dict[str, str] | None = None
    response: dict[str, str] | None = None


@dataclass(frozen=True)
class StreamBehaviorHints:
    binge_group: str | None = None
    filename: str | None = None
    video_hash: str | None = None
    video_size: int | None = None
    not_web_ready: bool = False
    country_whitelist: list[str] | None = None
    proxy_headers: ProxyHeaders | None = None


@dataclass(frozen=True)
class Subtitle:
    id: str | None = None
    url: str | None = None
    lang: str | None = None


@dataclass(frozen=True, eq=False)
class Stream:
    """A candidate playable source for one (type, id) pair.

    Either a direct ``url`` or a torrent descriptor (``info_hash`` plus
    optional ``file_idx``).  Streams are not globally unique across addons.
    Equality and hashing go through ``id``, so two streams without a hash
    or url never compare equal.
    """

    name: str | None = None
    title: str | None = None
    url: str | None = None
    info_hash: str | None = None
    file_idx: int | None = None
    sources: list[str] | None = None
    behavior_hints: StreamBehaviorHints | None = None
    description: str | None = None
    subtitles: list[Subtitle] | None = None
    external_url: str | None = None
    fallback_id: str = field(
        default_factory=lambda: uuid4().hex, compare=False, repr=False
    )

    @property
    def id(self) -> str:
        """``info_hash``, else ``url``, else an opaque per-instance id."""
        return self.info_hash or self.url or self.fallback_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stream):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def display_title(self) -> str:
        return self.title or self.name or "Unknown Source"

    @property
    def display_name(self) -> str:
        return self.name or "Unknown"

    @property
    def filename(self) -> str | None:
        return self.behavior_hints.filename if self.behavior_hints else None

    @property
    def binge_group(self) -> str | None:
        return self.behavior_hints.binge_group if self.behavior_hints else None

    @property
    def is_playable(self) -> bool:
        return bool(self.url)

    @property
    def magnet_url(self) -> str | None:
        if not self.info_hash:
            return None
        magnet = f"magnet:?xt=urn:btih:{self.info_hash}"
        if self.filename:
            magnet += f"&dn={quote(self.filename)}"
        for source in self.sources or []:
            if source.startswith("tracker:"):
                magnet += f"&tr={quote(source[len('tracker:'):], safe=':/')}"
        return magnet

    # Derived from free text.  Torrentio-style addons put the resolution
    # in ``name`` and the rest in ``title`` (or ``description``).

    @property
    def _text(self) -> str:
        return "\n".join(
            part for part in (self.name, self.title, self.description) if part
        )

    @property
    def _release_text(self) -> str:
        return "\n".join(part for part in (self._text, self.filename) if part)

    @property
    def resolution(self) -> StreamResolution:
        return parse_resolution(self._text)

    @property
    def quality_badge(self) -> str:
        return quality_badge(self._text)

    @property
    def hdr_type(self) -> HdrType:
        return parse_hdr(self._text)

    @property
    def seeders(self) -> int | None:
        return parse_seeders(self._text)

    @property
    def file_size(self) -> str | None:
        return parse_file_size(self._text)

    @property
    def source(self) -> str | None:
        return parse_source(self._text)

    @property
    def languages(self) -> list[str]:
        return parse_languages(self._text)

    @property
    def video_codec(self) -> str | None:
        return parse_video_codec(self._release_text)

    @property
    def audio_codec(self) -> str | None:
        return parse_audio_codec(self._release_text)

    @property
    def is_remux(self) -> bool:
        return is_remux(self._release_text)

    @property
    def is_web_dl(self) -> bool:
        return is_web_dl(self._release_text)

    @property
    def is_bluray(self) -> bool:
        return is_bluray(self._release_text)


@dataclass(frozen=True)
class AddonStreams:
    """Streams one addon contributed to a stream fan-out."""

    addon_id: str
    addon_name: str
    streams: list[Stream] = field(default_factory=list)
