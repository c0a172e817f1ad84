"""Wiring for the run command.

Builds the store views, launcher and supervisor from configuration, then
runs the supervisor with signal handlers and the pid file in place.
"""

from typing import TYPE_CHECKING

from sliders.store import CapacityRegistry, DesiredStateSource
from sliders.supervisor import (
    ExponentialBackoff,
    ProcessSupervisor,
    SignalController,
    StatusLine,
    SubprocessLauncher,
)
from sliders.utils import PidFile

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from sliders.config import Config
    from sliders.store import KeyValueStore
    from sliders.supervisor import ProcessLauncher


def build_supervisor(
    config: "Config",
    store: "KeyValueStore",
    *,
    logger: "FilteringBoundLogger",
    launcher: "ProcessLauncher | None" = None,
    set_title: bool = True,
) -> ProcessSupervisor:
    """Create a supervisor for this host from configuration.

    Args:
        config: Loaded configuration.
        store: Shared key-value store.
        logger: Supervisor logger.
        launcher: Worker launcher. Built from the worker section if None.
        set_title: Whether the status line rewrites the process title.

    Returns:
        A supervisor ready to ``run``.
    """
    settings = config.supervisor
    hostname = settings.effective_hostname
    namespace = config.store.namespace

    if launcher is None:
        launcher = SubprocessLauncher(
            config.worker.command,
            task_file=config.worker.task_file,
            queue_env_var=config.worker.queue_env_var,
            stop_signal=config.worker.stop_signum,
            logger=logger,
        )

    return ProcessSupervisor(
        launcher,
        DesiredStateSource(store, hostname, namespace=namespace, logger=logger),
        CapacityRegistry(store, hostname, settings.max_children, namespace=namespace),
        max_children=settings.max_children,
        interval=settings.interval,
        reconcile_interval=settings.reconcile_interval,
        status_interval=settings.status_interval,
        spawn_backoff=ExponentialBackoff(
            base=settings.spawn_backoff_base, max_delay=settings.spawn_backoff_max
        ),
        status_line=StatusLine(logger=logger, set_title=set_title),
        logger=logger,
    )


def run_supervisor(
    config: "Config",
    store: "KeyValueStore",
    *,
    logger: "FilteringBoundLogger",
) -> None:
    """Run the supervisor in the foreground until it shuts down.

    Raises:
        PidFileError: If the configured pid file cannot be written.
    """
    pidfile: PidFile | None = None
    if config.supervisor.pidfile is not None:
        pidfile = PidFile(config.supervisor.pidfile, logger=logger)
        pidfile.save()

    supervisor = build_supervisor(config, store, logger=logger)
    signals = SignalController(supervisor, logger=logger)
    signals.install()
    try:
        supervisor.run()
    finally:
        signals.restore()
        if pidfile is not None:
            pidfile.remove()
    logger.info("exited")
