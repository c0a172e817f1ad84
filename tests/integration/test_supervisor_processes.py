import os
import signal
import sys
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest
from structlog.typing import FilteringBoundLogger

from sliders.cli._commands._run import run_supervisor
from sliders.config import Config
from sliders.store import CapacityRegistry, DesiredStateSource, MemoryStore
from sliders.supervisor import (
    ControlRequest,
    ProcessSupervisor,
    StatusLine,
    SubprocessLauncher,
)

from tests.fakes import HOSTNAME, registered_hosts, set_desired

SLEEPER = (sys.executable, "-c", "import time; time.sleep(60)")


def tick_until(
    supervisor: ProcessSupervisor, condition: Callable[[], bool], timeout: float = 10
) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        assert time.monotonic() < deadline, "condition not reached"
        _ = supervisor.tick(time.monotonic())
        time.sleep(0.02)


@pytest.fixture
def supervisor(store: MemoryStore, logger: FilteringBoundLogger) -> ProcessSupervisor:
    return ProcessSupervisor(
        SubprocessLauncher(SLEEPER, stop_signal=signal.SIGTERM),
        DesiredStateSource(store, HOSTNAME),
        CapacityRegistry(store, HOSTNAME, 3),
        max_children=3,
        interval=0.05,
        reconcile_interval=0.2,
        status_line=StatusLine(set_title=False),
        logger=logger,
    )


class TestSupervisorWithProcesses:
    def test_respawns_killed_worker(
        self, supervisor: ProcessSupervisor, store: MemoryStore
    ) -> None:
        set_desired(store, {"mail": 2})
        try:
            _ = supervisor.tick(time.monotonic())
            first = set(supervisor.tracked)
            assert len(first) == 2

            victim = next(iter(first))
            os.kill(victim, signal.SIGKILL)
            tick_until(
                supervisor,
                lambda: victim not in supervisor.tracked and len(supervisor.tracked) == 2,
            )

            assert sorted(supervisor.tracked.values()) == ["mail", "mail"]
        finally:
            supervisor.shutdown()

    def test_follows_declaration_changes(
        self, supervisor: ProcessSupervisor, store: MemoryStore
    ) -> None:
        set_desired(store, {"mail": 2})
        try:
            _ = supervisor.tick(time.monotonic())
            workers = supervisor.workers

            set_desired(store, {"mail": 1, "video": 1})
            tick_until(
                supervisor,
                lambda: sorted(supervisor.tracked.values()) == ["mail", "video"],
            )

            killed = workers[0]
            assert killed.pid not in supervisor.tracked
            tick_until(supervisor, lambda: killed.process.returncode is not None)
        finally:
            supervisor.shutdown()

    def test_shutdown_stops_every_process(
        self, supervisor: ProcessSupervisor, store: MemoryStore
    ) -> None:
        set_desired(store, {"mail": 2, "video": 1})
        supervisor.startup()
        _ = supervisor.tick(time.monotonic())
        workers = supervisor.workers

        supervisor.request(ControlRequest.SHUTDOWN)

        assert supervisor.tick(time.monotonic()) is False
        assert all(worker.process.returncode is not None for worker in workers)
        assert registered_hosts(store) == {}


class TestRunSupervisor:
    def test_runs_until_sigterm(
        self,
        tmp_path: Path,
        store: MemoryStore,
        logger: FilteringBoundLogger,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("MARKER_DIR", str(tmp_path))
        script = (
            "import os, pathlib, time; "
            "pathlib.Path(os.environ['MARKER_DIR'], os.environ['QUEUE']).touch(); "
            "time.sleep(60)"
        )
        config = Config.from_dict(
            {
                "supervisor": {
                    "hostname": HOSTNAME,
                    "interval": 0.05,
                    "pidfile": str(tmp_path / "sliders"),
                },
                "worker": {"command": [sys.executable, "-c", script], "stop_signal": "TERM"},
            }
        )
        set_desired(store, {"mail": 1})
        previous = signal.getsignal(signal.SIGTERM)
        timer = threading.Timer(2.0, os.kill, args=(os.getpid(), signal.SIGTERM))
        timer.start()
        try:
            run_supervisor(config, store, logger=logger)
        finally:
            timer.cancel()

        assert (tmp_path / "mail").exists()
        assert not (tmp_path / "sliders.pid").exists()
        assert registered_hosts(store) == {}
        assert signal.getsignal(signal.SIGTERM) == previous
