"""Data models for the supervisor.

This module defines the core data types for worker management:
- SupervisorState: Loop behavior (running, paused, shutting down)
- ControlRequest: State transitions requested by external signals
- PollResult: Outcome of a non-blocking liveness check
- Reconciliation: Result of diffing desired against running workers
"""

from dataclasses import dataclass, field
from enum import StrEnum


class SupervisorState(StrEnum):
    """Supervisor loop states.

    - RUNNING: Reconcile against the store and spawn workers
    - PAUSED: Keep polling liveness, but neither reconcile nor spawn
    - SHUTTING_DOWN: Terminal; workers are killed and the loop exits
    """

    RUNNING = "running"
    PAUSED = "paused"
    SHUTTING_DOWN = "shutting_down"


class ControlRequest(StrEnum):
    """State transitions that can be requested from outside the loop.

    - SHUTDOWN: Kill all workers, deregister and stop
    - PURGE_AND_RESTART: Kill all workers, then run (they are respawned)
    - PURGE_AND_PAUSE: Kill all workers, then pause
    - PAUSE: Pause without killing anything
    - RESUME: Return to running
    """

    SHUTDOWN = "shutdown"
    PURGE_AND_RESTART = "purge_and_restart"
    PURGE_AND_PAUSE = "purge_and_pause"
    PAUSE = "pause"
    RESUME = "resume"


class PollResult(StrEnum):
    """Outcome of polling a worker for liveness.

    NOT_FOUND is handled exactly like EXITED.
    """

    EXITED = "exited"
    STILL_RUNNING = "still_running"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Reconciliation[H]:
    """Result of diffing desired state against running workers.

    Attributes:
        to_start: Queue names that need a new worker, in goal order.
        to_kill: Handles of surplus workers, oldest first per queue.
        over_capacity: True if applying the diff would exceed max_children.
    """

    to_start: list[str] = field(default_factory=list)
    to_kill: list[H] = field(default_factory=list)
    over_capacity: bool = False

    @property
    def is_empty(self) -> bool:
        """Return True if nothing needs to start or stop."""
        return not self.to_start and not self.to_kill
