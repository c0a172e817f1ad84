"""Supervisor package for keeping queue workers in line with the store.

Key Components:
    - SupervisorState: Loop state enumeration
    - ControlRequest: Externally requested state transitions
    - PollResult: Liveness check outcome
    - Reconciliation / diff: Desired-versus-running diff
    - WorkerProcess: A spawned worker bound to one queue
    - ProcessLauncher: Protocol for starting and polling workers
    - SubprocessLauncher: subprocess-based launcher
    - ExponentialBackoff: Spawn retry delay calculator
    - StatusLine: Process title publisher
    - SignalController: OS signal to control request mapping
    - ProcessSupervisor: The tick loop

Example:
    >>> from sliders.store import CapacityRegistry, DesiredStateSource, MemoryStore
    >>> store = MemoryStore()
    >>> supervisor = ProcessSupervisor(
    ...     SubprocessLauncher(),
    ...     DesiredStateSource(store, "web1"),
    ...     CapacityRegistry(store, "web1", 5),
    ... )
    >>> supervisor.run()  # Blocks until shutdown
"""

from ._backoff import ExponentialBackoff
from ._launcher import (
    DEFAULT_QUEUE_ENV_VAR,
    DEFAULT_WORKER_COMMAND,
    ProcessLauncher,
    SubprocessLauncher,
    WorkerProcess,
    build_command,
)
from ._models import ControlRequest, PollResult, Reconciliation, SupervisorState
from ._reconcile import diff, expand_goal, summarize
from ._signals import DEFAULT_SIGNAL_MAP, SignalController
from ._status import StatusLine, format_status
from ._supervisor import ProcessSupervisor

__all__ = [
    "DEFAULT_QUEUE_ENV_VAR",
    "DEFAULT_SIGNAL_MAP",
    "DEFAULT_WORKER_COMMAND",
    "ControlRequest",
    "ExponentialBackoff",
    "PollResult",
    "ProcessLauncher",
    "ProcessSupervisor",
    "Reconciliation",
    "SignalController",
    "StatusLine",
    "SubprocessLauncher",
    "SupervisorState",
    "WorkerProcess",
    "build_command",
    "diff",
    "expand_goal",
    "format_status",
    "summarize",
]
