"""Human-readable status line for the supervisor process."""

from typing import TYPE_CHECKING, final

import setproctitle

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structlog.typing import FilteringBoundLogger


def format_status(prefix: str, workers: "Mapping[int, str]") -> str:
    """Format the status line for the given ``pid -> queue`` workers.

    Example:
        >>> format_status("sliders", {101: "mail", 102: "video"})
        'sliders (2): 101 (mail), 102 (video)'
    """
    detail = ", ".join(f"{pid} ({queue})" for pid, queue in workers.items())
    return f"{prefix} ({len(workers)}): {detail}".rstrip(": ")


@final
class StatusLine:
    """Publishes the tracked workers as the process title.

    The title is only rewritten, and logged, when it changes.
    """

    __slots__ = ("_current", "_logger", "_prefix", "_set_title")

    def __init__(
        self,
        prefix: str = "sliders",
        *,
        logger: "FilteringBoundLogger | None" = None,
        set_title: bool = True,
    ) -> None:
        """Initialize the status line.

        Args:
            prefix: Leading text of the title.
            logger: Optional logger; each change is logged at debug level.
            set_title: Whether to rewrite the OS process title.
        """
        self._prefix = prefix
        self._logger = logger
        self._set_title = set_title
        self._current: str | None = None

    @property
    def current(self) -> str | None:
        """Return the last published status line."""
        return self._current

    def update(self, workers: "Mapping[int, str]", *, message: str = "") -> None:
        """Publish the status for ``workers`` if it changed.

        Args:
            workers: Tracked workers as ``pid -> queue``.
            message: Replaces the worker listing when given, e.g. "Starting".
        """
        line = f"{self._prefix}: {message}" if message else format_status(
            self._prefix, workers
        )
        if line == self._current:
            return
        self._current = line
        if self._set_title:
            setproctitle.setproctitle(line)
        if self._logger is not None:
            self._logger.debug("status", status=line)
