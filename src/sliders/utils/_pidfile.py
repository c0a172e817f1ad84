"""Pid file for the supervisor process."""

import os
from pathlib import Path
from typing import TYPE_CHECKING, final

from sliders.exceptions import PidFileError

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


def normalize_pidfile_path(path: Path) -> Path:
    """Expand ``path`` and append ``.pid`` unless the name already has it.

    Example:
        >>> normalize_pidfile_path(Path("/var/run/sliders"))
        PosixPath('/var/run/sliders.pid')
    """
    path = path.expanduser().absolute()
    if ".pid" in path.name:
        return path
    return path.with_name(f"{path.name}.pid")


@final
class PidFile:
    """Writes the supervisor's pid on startup and removes it on shutdown."""

    __slots__ = ("_logger", "_path")

    def __init__(
        self, path: Path, *, logger: "FilteringBoundLogger | None" = None
    ) -> None:
        """Initialize with the pid file path (normalized)."""
        self._path = normalize_pidfile_path(path)
        self._logger = logger

    @property
    def path(self) -> Path:
        """Return the normalized pid file path."""
        return self._path

    def save(self, pid: int | None = None) -> None:
        """Write ``pid`` (default: the current process) to the file.

        Missing parent directories are created.

        Raises:
            PidFileError: If the directory or file cannot be written.
        """
        if self._logger is not None:
            self._logger.info("saving_pid", path=str(self._path))
        try:
            if not self._path.parent.exists():
                if self._logger is not None:
                    self._logger.debug("creating_directory", path=str(self._path.parent))
                self._path.parent.mkdir(parents=True, exist_ok=True)
            _ = self._path.write_text(str(pid if pid is not None else os.getpid()))
        except OSError as e:
            msg = f"Cannot write pid file {self._path}: {e}"
            raise PidFileError(msg, path=self._path, cause=e) from e

    def remove(self) -> None:
        """Delete the pid file if present. Failures are logged."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            if self._logger is not None:
                self._logger.warning(
                    "pidfile_remove_failed", path=str(self._path), error=str(e)
                )
