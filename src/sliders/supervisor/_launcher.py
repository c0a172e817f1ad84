"""Worker process launching and liveness polling.

The supervisor never touches ``subprocess`` directly. It goes through a
ProcessLauncher, so the control loop can be exercised with a fake
launcher and real launchers can differ by platform.
"""

import os
import signal
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, final, runtime_checkable

from sliders.exceptions import WorkerSpawnError

from ._models import PollResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from structlog.typing import FilteringBoundLogger

DEFAULT_WORKER_COMMAND: tuple[str, ...] = ("rake", "resque:work")
DEFAULT_QUEUE_ENV_VAR = "QUEUE"


@dataclass(slots=True)
class WorkerProcess:
    """A spawned worker bound to one queue.

    Attributes:
        pid: Process ID, used as the worker's handle.
        queue: Queue the worker serves.
        started_at: Monotonic clock reading at spawn time.
        process: Launcher-specific process object.
    """

    pid: int
    queue: str
    started_at: float = field(default_factory=time.monotonic)
    process: Any = field(default=None, repr=False, compare=False)  # pyright: ignore[reportExplicitAny]


@runtime_checkable
class ProcessLauncher(Protocol):
    """Protocol for starting, signalling and polling worker processes."""

    def start(self, queue: str) -> WorkerProcess:
        """Start a worker for ``queue``.

        Raises:
            WorkerSpawnError: If the process cannot be started.
        """
        ...

    def terminate(self, worker: WorkerProcess, *, graceful: bool = True) -> bool:
        """Ask the worker to stop.

        Args:
            worker: The worker to stop.
            graceful: Send the graceful stop signal rather than SIGKILL.

        Returns:
            False if the process was already gone, True otherwise.
        """
        ...

    def poll(self, worker: WorkerProcess, timeout: float) -> PollResult:
        """Check whether the worker is alive, waiting at most ``timeout``."""
        ...

    def wait(self, worker: WorkerProcess) -> None:
        """Block until the worker has exited."""
        ...


def build_command(
    command: "Sequence[str]",
    task_file: Path | None = None,
) -> list[str]:
    """Build the worker argv, pointing the task runner at ``task_file``.

    The ``-f <task_file>`` option goes right before the last argument, the
    task name, so wrappers such as ``bundle exec rake`` keep working.

    Example:
        >>> build_command(["rake", "resque:work"], Path("/app/Rakefile"))
        ['rake', '-f', '/app/Rakefile', 'resque:work']
    """
    if not command:
        msg = "Worker command must not be empty"
        raise ValueError(msg)
    argv = list(command)
    if task_file is not None:
        position = max(len(argv) - 1, 1)
        argv[position:position] = ["-f", str(task_file)]
    return argv


@final
class SubprocessLauncher:
    """Launches workers as child processes with ``subprocess.Popen``.

    The queue name is passed to the worker through an environment variable.
    Worker stdout and stderr are inherited from the supervisor.
    """

    __slots__ = (
        "_argv",
        "_cwd",
        "_env",
        "_logger",
        "_queue_env_var",
        "_stop_signal",
    )

    def __init__(  # noqa: PLR0913
        self,
        command: "Sequence[str]" = DEFAULT_WORKER_COMMAND,
        *,
        task_file: Path | None = None,
        queue_env_var: str = DEFAULT_QUEUE_ENV_VAR,
        stop_signal: signal.Signals = signal.SIGQUIT,
        env: "Mapping[str, str] | None" = None,
        cwd: Path | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize the launcher.

        Args:
            command: Task runner command and arguments.
            task_file: Task definition file for the runner. Ignored with a
                warning if it does not exist.
            queue_env_var: Environment variable that carries the queue name.
            stop_signal: Signal that asks a worker to finish and exit.
            env: Extra environment variables for every worker.
            cwd: Working directory for workers.
            logger: Optional logger.
        """
        self._logger = logger
        if task_file is not None:
            task_file = task_file.expanduser().resolve()
            if not task_file.is_file():
                if logger is not None:
                    logger.warning("task_file_missing", path=str(task_file))
                task_file = None
        self._argv = build_command(command, task_file)
        self._queue_env_var = queue_env_var
        self._stop_signal = stop_signal
        self._env = dict(env or {})
        self._cwd = cwd

    @property
    def argv(self) -> list[str]:
        """Return the command each worker runs."""
        return list(self._argv)

    def start(self, queue: str) -> WorkerProcess:
        """Start a worker process for ``queue``."""
        env = {**os.environ, **self._env, self._queue_env_var: queue}
        try:
            process = subprocess.Popen(self._argv, env=env, cwd=self._cwd)  # noqa: S603
        except (OSError, ValueError) as e:
            msg = f"Failed to start worker for queue '{queue}': {e}"
            raise WorkerSpawnError(msg, queue=queue, cause=e) from e
        return WorkerProcess(pid=process.pid, queue=queue, process=process)

    def terminate(self, worker: WorkerProcess, *, graceful: bool = True) -> bool:
        """Send the stop signal, or SIGKILL when not graceful."""
        process: subprocess.Popen[bytes] = worker.process
        if process.poll() is not None:
            return False
        try:
            process.send_signal(self._stop_signal if graceful else signal.SIGKILL)
        except ProcessLookupError:
            return False
        return True

    def poll(self, worker: WorkerProcess, timeout: float) -> PollResult:
        """Wait up to ``timeout`` seconds for the worker to exit."""
        process: subprocess.Popen[bytes] = worker.process
        try:
            _ = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return PollResult.STILL_RUNNING
        except ChildProcessError:
            return PollResult.NOT_FOUND
        return PollResult.EXITED

    def wait(self, worker: WorkerProcess) -> None:
        """Block until the worker has exited."""
        process: subprocess.Popen[bytes] = worker.process
        try:
            _ = process.wait()
        except ChildProcessError:
            return
