from pathlib import Path

from structlog.typing import FilteringBoundLogger

from sliders.cli._commands._run import build_supervisor
from sliders.config import Config
from sliders.store import MemoryStore

from tests.fakes import FakeLauncher


class TestBuildSupervisor:
    def test_applies_supervisor_settings(
        self,
        store: MemoryStore,
        launcher: FakeLauncher,
        logger: FilteringBoundLogger,
    ) -> None:
        config = Config.from_dict(
            {
                "supervisor": {"max_children": 2, "hostname": "web3"},
                "store": {"namespace": "staging"},
            }
        )
        store.hset("plugins:staging:web3", "mail", "3")

        supervisor = build_supervisor(
            config, store, logger=logger, launcher=launcher, set_title=False
        )
        supervisor.startup()
        _ = supervisor.tick(0.0)

        assert supervisor.max_children == 2
        assert launcher.started_queues == ["mail", "mail"]
        assert store.hgetall("plugins:staging:hosts") == {"web3": "2"}

    def test_builds_subprocess_launcher_from_worker_settings(
        self, store: MemoryStore, logger: FilteringBoundLogger, tmp_path: Path
    ) -> None:
        task_file = tmp_path / "Rakefile"
        _ = task_file.write_text("")
        config = Config.from_dict(
            {
                "worker": {
                    "command": ["bundle", "exec", "rake", "resque:work"],
                    "task_file": str(task_file),
                },
                "supervisor": {"hostname": "web3"},
            }
        )

        supervisor = build_supervisor(config, store, logger=logger, set_title=False)

        assert supervisor.max_children == 5
        assert supervisor.tracked == {}
