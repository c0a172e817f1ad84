"""Logging utilities for sliders.

This module provides a standalone structlog logger factory for the
supervisor. The logger is self-contained and does not modify global
structlog configuration. ``open_log_output`` owns the optional log file.

Verbosity levels:
    0: silent
    1: basic, info and above without timestamps
    2: verbose, debug and above with timestamp and pid
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Literal, NoReturn, TextIO, cast

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

LogFormatType = Literal["json", "text"]

VERBOSE_TIME_FORMAT = "%H:%M:%S %Y-%m-%d"


def _drop_all(
    _logger: "WrappedLogger", _method_name: str, _event_dict: "EventDict"
) -> NoReturn:
    """Processor that discards every event."""
    raise structlog.DropEvent


def level_for_verbosity(verbosity: int) -> int:
    """Return the minimum log level for a verbosity setting."""
    return logging.DEBUG if verbosity >= 2 else logging.INFO  # noqa: PLR2004


def create_supervisor_logger(
    verbosity: int = 1,
    *,
    log_format: LogFormatType = "text",
    output: TextIO | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the supervisor's structlog logger.

    Args:
        verbosity: 0 (silent), 1 (basic) or 2 (verbose).
        log_format: Output format, either "json" or "text".
        output: Stream to write to. Defaults to stdout.

    Returns:
        A FilteringBoundLogger instance.
    """
    logger_factory = structlog.WriteLoggerFactory(file=output or sys.stdout)

    processors: list[structlog.typing.Processor] = []
    if verbosity <= 0:
        processors.append(_drop_all)
    processors.append(structlog.stdlib.add_log_level)
    if verbosity >= 2:  # noqa: PLR2004
        processors.append(structlog.processors.TimeStamper(fmt=VERBOSE_TIME_FORMAT))

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                level_for_verbosity(verbosity)
            ),
            context_class=dict,
        ),
    )
    if verbosity >= 2:  # noqa: PLR2004
        return logger.bind(pid=os.getpid())
    return logger


@contextmanager
def open_log_output(log_file: str = "") -> "Iterator[TextIO]":
    """Yield the stream supervisor logs are written to.

    An empty ``log_file`` means stdout. Otherwise the file is opened for
    appending, its directory created if needed, and closed on exit.
    """
    if not log_file:
        yield sys.stdout
        return

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a") as f:
        yield f
