from pathlib import Path

import pytest

from sliders.config import (
    deep_merge,
    parse_env_value,
    parse_env_vars,
    read_toml_file,
)
from sliders.exceptions import ConfigLoadError


class TestReadTomlFile:
    def test_reads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "sliders.toml"
        _ = path.write_text("[supervisor]\nmax_children = 3\n")

        assert read_toml_file(path) == {"supervisor": {"max_children": 3}}

    def test_invalid_toml_reports_position(self, tmp_path: Path) -> None:
        path = tmp_path / "sliders.toml"
        _ = path.write_text("[supervisor]\nmax_children = \n")

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.path == path
        assert exc_info.value.line == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(tmp_path / "missing.toml")


class TestDeepMerge:
    def test_nested_dicts_merge(self) -> None:
        base = {"supervisor": {"max_children": 5, "interval": 0.1}}
        override = {"supervisor": {"max_children": 8}}

        assert deep_merge(base, override) == {
            "supervisor": {"max_children": 8, "interval": 0.1}
        }

    def test_lists_are_replaced(self) -> None:
        base = {"worker": {"command": ["rake", "resque:work"]}}
        override = {"worker": {"command": ["bin/worker"]}}

        assert deep_merge(base, override)["worker"]["command"] == ["bin/worker"]

    def test_inputs_untouched(self) -> None:
        base = {"a": {"b": 1}}
        _ = deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}

    def test_section_replaces_scalar(self) -> None:
        merged = deep_merge({"store": "redis://"}, {"store": {"namespace": "x"}})

        assert merged == {"store": {"namespace": "x"}}

    def test_override_values_are_copied(self) -> None:
        override = {"worker": {"command": ["bin/worker"]}}
        merged = deep_merge({}, override)
        merged["worker"]["command"].append("extra")

        assert override == {"worker": {"command": ["bin/worker"]}}


class TestParseEnv:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("7", 7),
            ("0.25", 0.25),
            ('["bin/worker", "run"]', ["bin/worker", "run"]),
            ("redis://cache:6379/1", "redis://cache:6379/1"),
            ("web1.example.com", "web1.example.com"),
            ("-3", -3),
            ("1.2.3", "1.2.3"),
            ("[unterminated", "[unterminated"),
            ("", ""),
        ],
    )
    def test_value_inference(self, raw: str, expected: object) -> None:
        assert parse_env_value(raw) == expected

    def test_double_underscore_nests(self) -> None:
        environ = {
            "SLIDERS_SUPERVISOR__MAX_CHILDREN": "9",
            "SLIDERS_STORE__NAMESPACE": "staging",
            "SLIDERS_": "ignored",
            "OTHER_SETTING": "ignored",
        }

        assert parse_env_vars(environ=environ) == {
            "supervisor": {"max_children": 9},
            "store": {"namespace": "staging"},
        }

    def test_deeper_paths_nest_each_level(self) -> None:
        environ = {"SLIDERS_WORKER__ENV__QUEUE_VAR": "JOB_QUEUE"}

        assert parse_env_vars(environ=environ) == {
            "worker": {"env": {"queue_var": "JOB_QUEUE"}}
        }

    def test_custom_prefix(self) -> None:
        environ = {"APP_LOGGING__VERBOSITY": "2", "SLIDERS_LOGGING__VERBOSITY": "0"}

        assert parse_env_vars("APP_", environ) == {"logging": {"verbosity": 2}}
