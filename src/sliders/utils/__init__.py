"""Utilities shared across sliders."""

from ._host import short_hostname
from ._logging import (
    LogFormatType,
    create_supervisor_logger,
    level_for_verbosity,
    open_log_output,
)
from ._pidfile import PidFile, normalize_pidfile_path

__all__ = [
    "LogFormatType",
    "PidFile",
    "create_supervisor_logger",
    "level_for_verbosity",
    "normalize_pidfile_path",
    "open_log_output",
    "short_hostname",
]
