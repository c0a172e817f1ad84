import os
from collections.abc import Sequence
from pathlib import Path

import pytest

from sliders.cli import create_app
from sliders.store import MemoryStore

from tests.fakes import FlakyStore, Invoke


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run commands away from any sliders.toml and SLIDERS_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in [k for k in os.environ if k.startswith("SLIDERS_")]:
        monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture
def patched_store(
    flaky_store: FlakyStore, monkeypatch: pytest.MonkeyPatch
) -> FlakyStore:
    """Make every command talk to the in-memory store."""
    for module in ("_status", "_set", "_run._app"):
        monkeypatch.setattr(
            f"sliders.cli._commands.{module}.open_store", lambda _config: flaky_store
        )
    return flaky_store


@pytest.fixture
def invoke() -> Invoke:
    """Run the CLI with ``args`` and return the exit code."""

    def _invoke(args: Sequence[str]) -> int:
        app = create_app()
        try:
            app(list(args))
        except SystemExit as e:
            return int(e.code or 0)
        return 0

    return _invoke


@pytest.fixture
def memory_store(patched_store: FlakyStore) -> MemoryStore:
    return patched_store.inner
