"""Structured build logs.

Loggers are built with :func:`structlog.wrap_logger` and never touch the
global structlog configuration, so tests and embedding applications can hold
several at once.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO, cast

import structlog

from jxml.config import LogFormat, LogLevel

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor

    from jxml.config import LoggingConfig


def _renderer(log_format: LogFormat) -> list[Processor]:
    if log_format is LogFormat.JSON:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    # "timestamp [level] event key=value ..."
    return [structlog.dev.ConsoleRenderer(colors=False)]


def create_logger(
    stream: TextIO,
    *,
    level: LogLevel = LogLevel.INFO,
    log_format: LogFormat = LogFormat.TEXT,
) -> FilteringBoundLogger:
    """Return a logger writing one line per event to ``stream``.

    Events below ``level`` are dropped before rendering.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.WriteLogger(stream),
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                *_renderer(LogFormat(log_format)),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(LogLevel(level).number),
            context_class=dict,
        ),
    )


def logger_for(settings: LoggingConfig, *, command: str = "") -> FilteringBoundLogger:
    """Return the logger described by a ``[logging]`` section.

    Events go to ``settings.file``, appended and with parent directories
    created, or to stderr so they never mix with command output on stdout.
    Setting ``JXML_DEBUG`` lowers the threshold to debug.

    Args:
        settings: The ``[logging]`` section.
        command: Bound to every event when given.
    """
    if settings.file:
        path = Path(settings.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        stream: TextIO = path.open("a", encoding="utf-8")
    else:
        stream = sys.stderr

    level = LogLevel.DEBUG if os.environ.get("JXML_DEBUG") else settings.level
    logger = create_logger(stream, level=level, log_format=settings.format)
    return logger.bind(command=command) if command else logger
