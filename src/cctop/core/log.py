"""Logging setup for cctop.

Readers (CLI, TUI) log to stderr. The hook process must never write to
stdout or stderr, since the agent may surface either, so it logs to files
under ~/.cctop/logs/ instead.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

import structlog

_shared_processors = [
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

console_processors = [*_shared_processors, structlog.dev.ConsoleRenderer(colors=False)]

file_processors = [
    *_shared_processors,
    structlog.processors.format_exc_info,
    structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
]


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: str = "INFO", file: IO[str] | None = None) -> None:
    """Route cctop's loggers to stderr, or to an open file when given."""
    structlog.configure(
        processors=file_processors if file is not None else console_processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level(level)),
        logger_factory=structlog.WriteLoggerFactory(file=file or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None):
    return structlog.get_logger(name or "cctop")


@contextmanager
def file_logger(path: Path, level: str = "INFO") -> Iterator:
    """Yield a logger appending key=value lines to path.

    Creates the parent directory if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a") as f:
        yield structlog.wrap_logger(
            structlog.WriteLogger(f),
            processors=file_processors,
            wrapper_class=structlog.make_filtering_bound_logger(_level(level)),
        )
