from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from surfboard.domain.addons.exceptions import AddonError
from surfboard.infrastructure.addons.release_parser import describe_stream
from surfboard.infrastructure.config import AppConfig, load_config
from surfboard.infrastructure.logging.setup import configure_logging
from surfboard.interfaces.app_state import AppState
from surfboard.interfaces.composition import build_services

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="surfboard")

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    addons = sub.add_parser("addons", help="List, add or remove addons.")
    addons.add_argument("action", nargs="?", default="list", choices=["list", "add", "remove"])
    addons.add_argument("url", nargs="?", default=None, help="Manifest URL (add/remove).")

    catalogs = sub.add_parser("catalogs", help="First catalog of every addon.")
    catalogs.add_argument("type", help="Content type, e.g. movie or series.")

    catalog = sub.add_parser("catalog", help="One catalog page from one addon.")
    catalog.add_argument("addon_id")
    catalog.add_argument("type")
    catalog.add_argument("catalog_id")
    catalog.add_argument("--skip", type=int, default=None)
    catalog.add_argument("--genre", default=None)

    search = sub.add_parser("search", help="Search all searchable catalogs.")
    search.add_argument("type")
    search.add_argument("query")

    meta = sub.add_parser("meta", help="Full metadata for one title.")
    meta.add_argument("type")
    meta.add_argument("id")

    streams = sub.add_parser("streams", help="Stream candidates for a title or episode.")
    streams.add_argument("type")
    streams.add_argument("id", help="Media id, or episode id (tt0944947:1:1).")
    streams.add_argument("--by-addon", action="store_true", help="Group per addon.")
    streams.add_argument("--sorted", action="store_true", help="Rank best first.")

    progress = sub.add_parser("progress", help="Continue-watching entries.")
    progress.add_argument("action", nargs="?", default="list", choices=["list", "remove"])
    progress.add_argument("id", nargs="?", default=None)

    favorites = sub.add_parser("favorites", help="Favorites.")
    favorites.add_argument(
        "action", nargs="?", default="list", choices=["list", "toggle", "remove"]
    )
    favorites.add_argument("type", nargs="?", default=None, help="Content type (toggle).")
    favorites.add_argument("id", nargs="?", default=None)

    return parser.parse_args(argv)


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.repr
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    return value


def _emit(payload: Any) -> None:
    json.dump(_to_jsonable(payload), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _addon_summary(state: AppState) -> list[dict[str, Any]]:
    return [
        {
            "id": client.addon_id,
            "name": client.name,
            "version": client.manifest.version if client.manifest else None,
            "manifest_url": client.manifest_url,
            "resources": client.manifest.resource_names if client.manifest else [],
            "types": client.manifest.types if client.manifest else [],
        }
        for client in state.aggregator.addons
    ]


def _stream_row(stream: Any) -> dict[str, Any]:
    info = describe_stream(stream)
    return {
        "id": stream.id,
        "name": stream.display_name,
        "title": stream.display_title,
        "url": stream.url,
        "magnet": stream.magnet_url,
        "quality": info.resolution.label,
        "hdr": info.hdr.value,
        "video_codec": info.video_codec,
        "audio_codec": info.audio_codec,
        "languages": info.languages,
        "seeders": info.seeders,
        "size_bytes": info.size_bytes,
        "source": info.source,
    }


async def _run(args: argparse.Namespace, config: AppConfig) -> int:
    async with build_services(config) as state:
        command = args.command

        if command == "addons" and args.action in ("add", "remove"):
            if not args.url:
                raise SystemExit(f"addons {args.action}: URL required")
            if args.action == "add":
                await state.addon_setup.add_custom(args.url)
            else:
                await state.addon_setup.remove_custom(args.url)
            _emit(_addon_summary(state))
            return 0

        if command == "progress":
            if args.action == "remove":
                if not args.id:
                    raise SystemExit("progress remove: id required")
                _emit({"removed": await state.continue_watching.remove(args.id)})
            else:
                _emit(await state.continue_watching.list())
            return 0

        if command == "favorites" and args.action in ("list", "remove"):
            if args.action == "remove":
                if not args.id:
                    raise SystemExit("favorites remove: id required")
                _emit({"removed": await state.favorites.remove(args.id)})
            else:
                _emit(await state.favorites.list())
            return 0

        # Everything below talks to addons.
        await state.addon_setup.load()

        if command == "addons":
            _emit(_addon_summary(state))
        elif command == "catalogs":
            _emit(await state.aggregator.fetch_catalogs(args.type))
        elif command == "catalog":
            extra: dict[str, str] = {}
            if args.genre:
                extra["genre"] = args.genre
            if args.skip is not None:
                extra["skip"] = str(args.skip)
            _emit(
                await state.aggregator.fetch_catalog(
                    args.addon_id, args.type, args.catalog_id, extra
                )
            )
        elif command == "search":
            _emit(await state.aggregator.search_catalogs(args.type, args.query))
        elif command == "meta":
            _emit(await state.aggregator.fetch_meta(args.type, args.id))
        elif command == "streams":
            if args.by_addon:
                groups = await state.aggregator.fetch_streams_by_addon(args.type, args.id)
                _emit(
                    [
                        {
                            "addon_id": g.addon_id,
                            "addon_name": g.addon_name,
                            "streams": [_stream_row(s) for s in g.streams],
                        }
                        for g in groups
                    ]
                )
            else:
                found = await state.aggregator.fetch_streams(args.type, args.id)
                if args.sorted:
                    found = state.stream_sorter.sort(found)
                _emit([_stream_row(s) for s in found])
        elif command == "favorites":
            if not (args.type and args.id):
                raise SystemExit("favorites toggle: type and id required")
            item = await state.aggregator.fetch_meta(args.type, args.id)
            _emit({"id": item.id, "favorite": await state.favorites.toggle(item)})
        return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then runs one command.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )

    # stdout carries the JSON result; keep log lines off it.
    configure_logging(config, stdout=sys.stderr)

    try:
        return asyncio.run(_run(args, config))
    except (AddonError, ValueError, KeyError) as exc:
        log.error("command_failed", command=args.command, error=str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(start())
