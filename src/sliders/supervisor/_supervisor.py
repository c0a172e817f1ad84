"""Process supervisor keeping workers in line with the desired state.

This module provides the ProcessSupervisor class, which owns the tracked
workers and runs the tick loop:

1. apply control requests queued by signal handlers
2. periodically reconcile against the store and kill surplus workers
3. fill free capacity, respawning dead workers before new ones
4. poll every worker for liveness and queue the dead for respawn
"""

import queue
import time
from collections import Counter, deque
from typing import TYPE_CHECKING, final

from sliders.exceptions import StoreError, WorkerSpawnError
from sliders.utils._logging import create_supervisor_logger

from ._backoff import ExponentialBackoff
from ._models import ControlRequest, PollResult, Reconciliation, SupervisorState
from ._reconcile import diff, summarize
from ._status import StatusLine

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import FilteringBoundLogger

    from sliders.store import CapacityRegistry, DesiredStateSource

    from ._launcher import ProcessLauncher, WorkerProcess

DEFAULT_MAX_CHILDREN = 5
DEFAULT_INTERVAL = 0.1
DEFAULT_RECONCILE_INTERVAL = 20.0
DEFAULT_STATUS_INTERVAL = 10.0


@final
class ProcessSupervisor:
    """Keeps one worker process per desired queue slot running.

    All mutable state lives on this object and is only changed by the
    thread running ``tick``. Other threads and signal handlers interact
    through ``request``, which is applied at the start of the next tick.
    """

    __slots__ = (
        "_backoff",
        "_clock",
        "_dead",
        "_desired",
        "_draining",
        "_interval",
        "_launcher",
        "_logger",
        "_max_children",
        "_need",
        "_next_reconcile_at",
        "_next_status_at",
        "_reconcile_interval",
        "_registry",
        "_requests",
        "_shutdown_complete",
        "_sleep",
        "_spawn_failures",
        "_spawn_hold_until",
        "_state",
        "_status_interval",
        "_status_line",
        "_workers",
    )

    def __init__(  # noqa: PLR0913
        self,
        launcher: "ProcessLauncher",
        desired: "DesiredStateSource",
        registry: "CapacityRegistry",
        *,
        max_children: int = DEFAULT_MAX_CHILDREN,
        interval: float = DEFAULT_INTERVAL,
        reconcile_interval: float = DEFAULT_RECONCILE_INTERVAL,
        status_interval: float = DEFAULT_STATUS_INTERVAL,
        spawn_backoff: ExponentialBackoff | None = None,
        status_line: StatusLine | None = None,
        logger: "FilteringBoundLogger | None" = None,
        clock: "Callable[[], float]" = time.monotonic,
        sleep: "Callable[[float], None]" = time.sleep,
    ) -> None:
        """Initialize the supervisor.

        Args:
            launcher: Starts, signals and polls worker processes.
            desired: Source of the desired queue counts.
            registry: Where this host's capacity is advertised.
            max_children: Maximum number of tracked workers.
            interval: Seconds between ticks in ``run``.
            reconcile_interval: Seconds between reconciliations.
            status_interval: Seconds between "watching" log lines.
            spawn_backoff: Delay policy after a failed spawn.
            status_line: Status publisher. A default one is created if None.
            logger: Logger. Silent if None.
            clock: Monotonic clock used by ``run``.
            sleep: Sleep function used by ``run``.

        Raises:
            ValueError: If max_children or interval is not positive.
        """
        if max_children < 1:
            msg = f"max_children must be positive, got {max_children}"
            raise ValueError(msg)
        if interval <= 0:
            msg = f"interval must be positive, got {interval}"
            raise ValueError(msg)

        self._launcher = launcher
        self._desired = desired
        self._registry = registry
        self._max_children = max_children
        self._interval = interval
        self._reconcile_interval = reconcile_interval
        self._status_interval = status_interval
        self._backoff = spawn_backoff or ExponentialBackoff()
        self._logger: FilteringBoundLogger = logger or create_supervisor_logger(0)
        self._status_line = status_line or StatusLine(logger=self._logger)
        self._clock = clock
        self._sleep = sleep

        self._workers: dict[int, WorkerProcess] = {}
        self._draining: list[WorkerProcess] = []
        self._need: list[str] = []
        self._dead: deque[str] = deque()
        self._state = SupervisorState.RUNNING
        self._requests: queue.SimpleQueue[ControlRequest] = queue.SimpleQueue()
        self._next_reconcile_at: float | None = None
        self._next_status_at: float | None = None
        self._spawn_hold_until: float | None = None
        self._spawn_failures = 0
        self._shutdown_complete = False

    @property
    def state(self) -> SupervisorState:
        """Return the current supervisor state."""
        return self._state

    @property
    def max_children(self) -> int:
        """Return the capacity ceiling."""
        return self._max_children

    @property
    def tracked(self) -> dict[int, str]:
        """Return tracked workers as ``pid -> queue``, in spawn order."""
        return {pid: worker.queue for pid, worker in self._workers.items()}

    @property
    def workers(self) -> list["WorkerProcess"]:
        """Return tracked workers in spawn order."""
        return list(self._workers.values())

    @property
    def need_queue(self) -> list[str]:
        """Return queues awaiting a first spawn, next first."""
        return list(self._need)

    @property
    def dead_queue(self) -> list[str]:
        """Return queues awaiting a respawn, next first."""
        return list(self._dead)

    # -------------------------------------------------------------------------
    # Control requests
    # -------------------------------------------------------------------------

    def request(self, request: ControlRequest) -> None:
        """Queue a state transition for the next tick.

        Safe to call from signal handlers and other threads.
        """
        self._requests.put(request)

    def apply(self, request: ControlRequest) -> None:
        """Apply a state transition immediately.

        Requests arriving once shutdown has started are ignored.
        """
        if self._state is SupervisorState.SHUTTING_DOWN:
            self._logger.debug("request_ignored", request=request.value)
            return

        if request is ControlRequest.SHUTDOWN:
            self.shutdown()
        elif request is ControlRequest.PURGE_AND_RESTART:
            self._logger.info("purging_workers", then="restart")
            self.kill_all()
            self._state = SupervisorState.RUNNING
        elif request is ControlRequest.PURGE_AND_PAUSE:
            self._logger.info("purging_workers", then="pause")
            self.kill_all()
            self._state = SupervisorState.PAUSED
        elif request is ControlRequest.PAUSE:
            self._logger.info("paused", reason="no new workers until resumed")
            self._state = SupervisorState.PAUSED
        elif request is ControlRequest.RESUME:
            self._logger.info("resumed")
            self._state = SupervisorState.RUNNING

    def _drain_requests(self) -> None:
        while True:
            try:
                request = self._requests.get_nowait()
            except queue.Empty:
                return
            self.apply(request)

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def startup(self) -> None:
        """Advertise capacity and publish the initial status.

        A store failure is logged; the supervisor still starts.
        """
        self._status_line.update({}, message="Starting")
        try:
            self._registry.register()
        except StoreError as e:
            self._logger.warning("register_failed", error=str(e))
        else:
            self._logger.debug(
                "registered",
                hostname=self._registry.hostname,
                max_children=self._max_children,
            )

    def run(self) -> None:
        """Run ticks until shutdown, then make sure shutdown completed."""
        self.startup()
        try:
            while self.tick(self._clock()):
                self._sleep(self._interval)
        finally:
            self.shutdown()

    def tick(self, now: float) -> bool:
        """Execute one loop iteration.

        Args:
            now: Current monotonic time in seconds.

        Returns:
            False once the supervisor is shutting down, True otherwise.
        """
        self._drain_requests()
        if self._state is SupervisorState.SHUTTING_DOWN:
            return False

        self._log_watching(now)

        spawned: set[int] = set()
        if self._state is SupervisorState.RUNNING:
            if self._next_reconcile_at is None or now >= self._next_reconcile_at:
                self._next_reconcile_at = now + self._reconcile_interval
                _ = self.reconcile()
            spawned = self._fill(now)

        self._poll(skip=spawned)
        return True

    def _log_watching(self, now: float) -> None:
        if self._next_status_at is not None and now < self._next_status_at:
            return
        self._next_status_at = now + self._status_interval
        self._logger.debug(
            "watching",
            workers=len(self._workers),
            pids=list(self._workers),
            state=self._state.value,
        )

    def reconcile(self) -> Reconciliation[int] | None:
        """Diff the store's desired state against tracked workers and apply it.

        Surplus workers are killed. The need queue is replaced by the queues
        that must start, minus those already waiting in the dead queue; dead
        queue entries the store no longer wants are dropped.

        Returns:
            The reconciliation, or None if the store could not be read.
        """
        try:
            desired = self._desired.read()
        except StoreError as e:
            self._logger.warning("reconcile_skipped", error=str(e))
            return None

        result = diff(desired, self.tracked, self._max_children)
        if result.over_capacity:
            self._logger.warning(
                "over_capacity",
                desired=sum(max(count, 0) for count in desired.values()),
                max_children=self._max_children,
                hint="raise max_children",
            )
        if result.to_start:
            self._logger.debug(
                "to_start", queues=summarize(result.to_start), total=len(result.to_start)
            )
        if result.to_kill:
            kill_queues = [self._workers[pid].queue for pid in result.to_kill]
            self._logger.debug(
                "to_kill", queues=summarize(kill_queues), total=len(result.to_kill)
            )

        for pid in result.to_kill:
            _ = self.kill(pid)

        pending = Counter(self._dead)
        need: list[str] = []
        for name in result.to_start:
            if pending[name] > 0:
                pending[name] -= 1
            else:
                need.append(name)
        if pending.total():
            # Drop respawns for slots the store no longer declares
            for name in pending.elements():
                self._dead.remove(name)
        self._need = need

        self._publish_status()
        return result

    def _fill(self, now: float) -> set[int]:
        spawned: set[int] = set()
        if self._spawn_hold_until is not None and now < self._spawn_hold_until:
            return spawned

        while len(self._workers) < self._max_children and (self._dead or self._need):
            name = self._dead.popleft() if self._dead else self._need.pop(0)
            try:
                worker = self.spawn(name)
            except WorkerSpawnError as e:
                self._dead.appendleft(name)
                delay = self._backoff.delay(self._spawn_failures)
                self._spawn_failures += 1
                self._spawn_hold_until = now + delay
                self._logger.error(
                    "spawn_failed", queue=name, error=str(e), retry_in=round(delay, 3)
                )
                break
            self._spawn_failures = 0
            self._spawn_hold_until = None
            spawned.add(worker.pid)
        return spawned

    def _poll(self, *, skip: set[int]) -> None:
        timeout = self._interval / 100
        changed = False
        for pid, worker in list(self._workers.items()):
            if pid in skip:
                continue
            if self._launcher.poll(worker, timeout) is PollResult.STILL_RUNNING:
                continue

            del self._workers[pid]
            self._dead.appendleft(worker.queue)
            changed = True
            self._logger.info(
                "worker_died",
                pid=pid,
                queue=worker.queue,
                action="respawn"
                if self._state is SupervisorState.RUNNING
                else "wait_for_resume",
            )

        self._draining = [
            worker
            for worker in self._draining
            if self._launcher.poll(worker, timeout) is PollResult.STILL_RUNNING
        ]
        if changed:
            self._publish_status()

    def _publish_status(self) -> None:
        self._status_line.update(self.tracked)

    # -------------------------------------------------------------------------
    # Process lifecycle
    # -------------------------------------------------------------------------

    def spawn(self, name: str) -> "WorkerProcess":
        """Start and track a worker for queue ``name``.

        Raises:
            WorkerSpawnError: If the launcher cannot start the process.
        """
        worker = self._launcher.start(name)
        self._workers[worker.pid] = worker
        self._logger.info(
            "worker_spawned", pid=worker.pid, queue=name, workers=len(self._workers)
        )
        self._publish_status()
        return worker

    def kill(self, pid: int, *, graceful: bool = True) -> bool:
        """Stop tracking a worker and ask it to exit.

        The worker's queue is discarded, not respawned. The process is
        reaped by later liveness polls.

        Args:
            pid: The worker's process ID.
            graceful: Send the graceful stop signal rather than SIGKILL.

        Returns:
            False if ``pid`` is not a tracked worker, True otherwise.
        """
        worker = self._workers.pop(pid, None)
        if worker is None:
            return False

        if self._launcher.terminate(worker, graceful=graceful):
            self._logger.debug(
                "worker_killed", pid=pid, queue=worker.queue, workers=len(self._workers)
            )
        else:
            self._logger.debug(
                "worker_already_dead",
                pid=pid,
                queue=worker.queue,
                workers=len(self._workers),
            )
        self._draining.append(worker)
        self._publish_status()
        return True

    def kill_all(self) -> None:
        """Stop every worker and block until all children have exited.

        Unless shutting down, each killed worker's queue goes to the front
        of the dead queue so it is respawned once running.
        """
        for pid, worker in list(self._workers.items()):
            if not self._launcher.terminate(worker):
                self._logger.debug("worker_already_dead", pid=pid, queue=worker.queue)
            del self._workers[pid]
            if self._state is not SupervisorState.SHUTTING_DOWN:
                self._dead.appendleft(worker.queue)
            self._draining.append(worker)
        self._publish_status()

        for worker in self._draining:
            self._launcher.wait(worker)
        self._draining.clear()

    def shutdown(self) -> None:
        """Kill all workers, deregister capacity and stop the loop.

        Calling it again after it completed does nothing.
        """
        if self._shutdown_complete:
            return
        self._logger.info("shutting_down", workers=len(self._workers))
        self._state = SupervisorState.SHUTTING_DOWN
        self.kill_all()
        self._need.clear()
        self._dead.clear()

        try:
            self._registry.deregister()
        except StoreError as e:
            self._logger.warning("deregister_failed", error=str(e))
        else:
            self._logger.debug("deregistered", hostname=self._registry.hostname)

        self._shutdown_complete = True
        self._status_line.update({}, message="Exiting")
