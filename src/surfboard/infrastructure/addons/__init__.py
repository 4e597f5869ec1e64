"""Addon HTTP client, wire schemas and stream helpers."""

from __future__ import annotations

from .client import HttpxAddonClient
from .release_parser import StreamInfo, describe_stream, size_to_bytes
from .stream_sorter import StreamSorter

__all__ = [
    "HttpxAddonClient",
    "StreamInfo",
    "StreamSorter",
    "describe_stream",
    "size_to_bytes",
]
