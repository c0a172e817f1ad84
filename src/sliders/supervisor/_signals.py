"""Maps OS signals to supervisor state transitions.

Handlers never touch supervisor state. They enqueue a ControlRequest that
the supervisor applies at the top of its next tick, so a signal arriving
mid-tick cannot interleave with the loop's own reads and writes.
"""

import signal
from typing import TYPE_CHECKING, Any, Protocol, final

from ._models import ControlRequest

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import FrameType

    from structlog.typing import FilteringBoundLogger

DEFAULT_SIGNAL_MAP: dict[str, ControlRequest] = {
    "SIGTERM": ControlRequest.SHUTDOWN,
    "SIGINT": ControlRequest.SHUTDOWN,
    "SIGQUIT": ControlRequest.SHUTDOWN,
    "SIGHUP": ControlRequest.PURGE_AND_RESTART,
    "SIGUSR1": ControlRequest.PURGE_AND_PAUSE,
    "SIGUSR2": ControlRequest.PAUSE,
    "SIGCONT": ControlRequest.RESUME,
}


class RequestSink(Protocol):
    """Anything that accepts control requests, normally the supervisor."""

    def request(self, request: ControlRequest) -> None:
        """Enqueue a control request."""
        ...


@final
class SignalController:
    """Installs signal handlers that forward to a RequestSink."""

    __slots__ = ("_logger", "_mapping", "_previous", "_sink")

    def __init__(
        self,
        sink: RequestSink,
        mapping: "Mapping[str, ControlRequest] | None" = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the controller.

        Args:
            sink: Receiver of control requests.
            mapping: Signal name to request. Defaults to DEFAULT_SIGNAL_MAP.
            logger: Optional logger.
        """
        self._sink = sink
        self._mapping = dict(mapping if mapping is not None else DEFAULT_SIGNAL_MAP)
        self._logger = logger
        self._previous: dict[signal.Signals, Any] = {}  # pyright: ignore[reportExplicitAny]

    @property
    def installed(self) -> list[signal.Signals]:
        """Return the signals currently handled by this controller."""
        return list(self._previous)

    def request_for(self, signum: int) -> ControlRequest | None:
        """Return the request mapped to ``signum``, if any."""
        try:
            name = signal.Signals(signum).name
        except ValueError:
            return None
        return self._mapping.get(name)

    def handle(self, signum: int, _frame: "FrameType | None" = None) -> None:
        """Signal handler: forward the mapped request to the sink."""
        request = self.request_for(signum)
        if request is not None:
            self._sink.request(request)

    def install(self) -> None:
        """Register handlers for every mapped signal.

        Signals the platform does not provide are skipped with a warning.
        """
        unsupported: list[str] = []
        for name in self._mapping:
            signum = getattr(signal, name, None)
            if not isinstance(signum, signal.Signals):
                unsupported.append(name)
                continue
            try:
                self._previous[signum] = signal.signal(signum, self.handle)
            except (OSError, ValueError):
                unsupported.append(name)

        if self._logger is not None:
            if unsupported:
                self._logger.warning("signals_unsupported", signals=unsupported)
            self._logger.debug(
                "signals_registered",
                signals=[signum.name for signum in self._previous],
            )

    def restore(self) -> None:
        """Put back the handlers that were active before ``install``."""
        for signum, previous in self._previous.items():
            _ = signal.signal(signum, previous)
        self._previous.clear()
