"""Shared test fixtures for sliders tests."""

import logging

import pytest
import structlog
from structlog.testing import LogCapture
from structlog.typing import FilteringBoundLogger

from sliders.store import CapacityRegistry, DesiredStateSource, MemoryStore
from sliders.supervisor import ExponentialBackoff, ProcessSupervisor, StatusLine

from tests.fakes import HOSTNAME, FakeLauncher, FlakyStore, MakeSupervisor, set_desired


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def flaky_store(store: MemoryStore) -> FlakyStore:
    return FlakyStore(store)


@pytest.fixture
def log_capture() -> LogCapture:
    return LogCapture()


@pytest.fixture
def logger(log_capture: LogCapture) -> FilteringBoundLogger:
    """Debug-level logger whose events end up in ``log_capture.entries``."""
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


@pytest.fixture
def make_supervisor(
    launcher: FakeLauncher,
    flaky_store: FlakyStore,
    logger: FilteringBoundLogger,
) -> MakeSupervisor:
    """Return a factory building a supervisor over the fake launcher and store.

    The store is the ``flaky_store`` fixture, so tests can make it fail.
    """

    def _make(
        desired: dict[str, int] | None = None,
        *,
        max_children: int = 5,
        **kwargs: object,
    ) -> ProcessSupervisor:
        set_desired(flaky_store.inner, desired or {})
        options: dict[str, object] = {
            "max_children": max_children,
            "spawn_backoff": ExponentialBackoff(base=0.0, jitter=0.0),
            "status_line": StatusLine(set_title=False),
            "logger": logger,
        }
        options.update(kwargs)
        return ProcessSupervisor(
            launcher,
            DesiredStateSource(flaky_store, HOSTNAME, logger=logger),
            CapacityRegistry(flaky_store, HOSTNAME, max_children),
            **options,  # pyright: ignore[reportArgumentType]
        )

    return _make
