"""structlog on top of stdlib logging, emitted from a background thread.

Callers log through structlog; library records (httpx, guessit's rebulk)
arrive as plain stdlib records.  Both are rendered by one
``ProcessorFormatter``.  The root logger only enqueues; a
``QueueListener`` thread writes, so the event loop never blocks on I/O.
"""

from __future__ import annotations

import atexit
import copy
import logging
import logging.config
import queue
import sys
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Optional, TextIO

import structlog

from surfboard.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

_LIBRARY_LOGGERS = ("httpx", "httpcore", "rebulk")

_listener: Optional[QueueListener] = None


def _stamp_from_record(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Stdlib records are formatted late, on the listener thread; use their creation time.
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = created.isoformat().replace("+00:00", "Z")
    return event_dict


def _stdlib_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        _stamp_from_record,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def _formatter_processors(config: AppConfig) -> list[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if config.logging.format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    return [structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer]


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """dictConfig mapping for *config*.

    Library loggers stay at WARNING unless the app itself runs at DEBUG.
    """
    level = config.logging.level
    library_level = "DEBUG" if level == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": _stdlib_chain(),
                "processors": _formatter_processors(config),
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {name: {"level": library_level} for name in _LIBRARY_LOGGERS},
        "root": {"level": level, "handlers": ["default"]},
    }


class _LevelBand(logging.Filter):
    """Passes records with ``low <= levelno <= high``."""

    def __init__(self, low: int = logging.NOTSET, high: int = logging.CRITICAL) -> None:
        super().__init__()
        self.low = low
        self.high = high

    def filter(self, record: logging.LogRecord) -> bool:
        return self.low <= record.levelno <= self.high


class _EventDictQueueHandler(QueueHandler):
    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # The base class stringifies record.msg; ProcessorFormatter needs the event dict.
        return copy.copy(record)


def _stream_handler(stream: TextIO, formatter: logging.Formatter, band: _LevelBand) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(formatter)
    handler.addFilter(band)
    return handler


def _stop_listener() -> None:
    global _listener
    listener, _listener = _listener, None
    if listener is not None:
        listener.stop()


def _start_listener(config: AppConfig, stdout: TextIO) -> None:
    global _listener
    _stop_listener()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_stdlib_chain(),
        processors=_formatter_processors(config),
    )
    records: queue.Queue[logging.LogRecord] = queue.Queue()

    root = logging.getLogger()
    root.handlers[:] = [_EventDictQueueHandler(records)]
    root.setLevel(config.logging.level)
    # Handlers installed by dictConfig or libraries would bypass the queue.
    for name in list(logging.root.manager.loggerDict):
        named = logging.getLogger(name)
        named.handlers.clear()
        named.propagate = True

    _listener = QueueListener(
        records,
        _stream_handler(stdout, formatter, _LevelBand(high=logging.WARNING)),
        _stream_handler(sys.stderr, formatter, _LevelBand(low=logging.ERROR)),
        respect_handler_level=True,
    )
    _listener.start()
    atexit.register(_stop_listener)


def configure_logging(config: AppConfig, *, stdout: TextIO | None = None) -> dict[str, Any]:
    """Set up structlog and the stdlib root logger; returns the dictConfig used.

    Records up to WARNING go to *stdout* (``sys.stdout`` by default),
    ERROR and above to stderr.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    mapping = build_logging_config(config)
    logging.config.dictConfig(mapping)
    _start_listener(config, stdout or sys.stdout)

    log.info(
        "logging_configured",
        log_level=config.logging.level,
        log_format=config.logging.format,
    )
    return mapping
