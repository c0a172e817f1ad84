# ruff: noqa: TC003  # Path needed at runtime for pydantic field validation
"""Configuration models.

Each section of the configuration file maps to one frozen Pydantic
model. Missing sections and keys fall back to the defaults below.
"""

import signal
from enum import StrEnum
from pathlib import Path
from typing import ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveFloat,
    PositiveInt,
    field_validator,
)

from sliders.store import DEFAULT_NAMESPACE
from sliders.supervisor import DEFAULT_QUEUE_ENV_VAR, DEFAULT_WORKER_COMMAND
from sliders.utils import short_hostname


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class SupervisorSettings(BaseModel):
    """Supervisor loop section.

    Attributes:
        max_children: Maximum number of concurrent workers on this host.
        interval: Seconds between ticks.
        reconcile_interval: Seconds between reads of the desired state.
        status_interval: Seconds between "watching" log lines.
        hostname: Name this host is known by in the store.
        pidfile: Where to write the supervisor pid, if anywhere.
        spawn_backoff_base: First delay after a failed spawn.
        spawn_backoff_max: Longest delay after repeated failed spawns.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_children: PositiveInt = 5
    interval: PositiveFloat = 0.1
    reconcile_interval: PositiveFloat = 20.0
    status_interval: PositiveFloat = 10.0
    hostname: str | None = None
    pidfile: Path | None = None
    spawn_backoff_base: NonNegativeFloat = 0.5
    spawn_backoff_max: NonNegativeFloat = 30.0

    @property
    def effective_hostname(self) -> str:
        """Return the configured host name, or this machine's short name."""
        return self.hostname or short_hostname()


class StoreSettings(BaseModel):
    """Shared store section."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    url: str = "redis://localhost:6379/0"
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)


class WorkerSettings(BaseModel):
    """Worker process section.

    Attributes:
        command: Task runner command and arguments.
        task_file: Task definition file passed to the runner with ``-f``.
        queue_env_var: Environment variable carrying the queue name.
        stop_signal: Name of the signal asking a worker to finish and exit.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    command: tuple[str, ...] = Field(default=DEFAULT_WORKER_COMMAND, min_length=1)
    task_file: Path | None = None
    queue_env_var: str = Field(default=DEFAULT_QUEUE_ENV_VAR, min_length=1)
    stop_signal: str = "SIGQUIT"

    @field_validator("stop_signal")
    @classmethod
    def _check_signal(cls, value: str) -> str:
        name = value.upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        if not isinstance(getattr(signal, name, None), signal.Signals):
            msg = f"Unknown signal: {value}"
            raise ValueError(msg)
        return name

    @property
    def stop_signum(self) -> signal.Signals:
        """Return the stop signal."""
        return signal.Signals[self.stop_signal]


class LoggingSettings(BaseModel):
    """Logging section.

    Attributes:
        verbosity: 0 (silent), 1 (basic) or 2 (verbose with timestamps).
        format: Log output format.
        file: Path to log file (empty logs to stdout).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    verbosity: int = Field(default=1, ge=0, le=2)
    format: LogFormat = LogFormat.TEXT
    file: str = ""
