# pyright: reportExplicitAny=false, reportAny=false
"""Configuration container and loading.

Sources are merged from lowest to highest precedence:
defaults, TOML file, environment variables, CLI overrides.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sliders.exceptions import ConfigValidationError

from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import LoggingSettings, StoreSettings, SupervisorSettings, WorkerSettings

if TYPE_CHECKING:
    from typing import Self

DEFAULT_CONFIG_FILENAME = "sliders.toml"


class Config(BaseModel):
    """Immutable, validated sliders configuration."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    supervisor: SupervisorSettings = Field(default_factory=SupervisorSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Self":
        """Validate a configuration dictionary.

        Raises:
            ConfigValidationError: If any value is invalid.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
            msg = f"Invalid configuration ({fields}): {e}"
            raise ConfigValidationError(
                msg, errors=[dict(error) for error in e.errors()]
            ) from e

    @classmethod
    def from_file(cls, path: Path) -> "Self":
        """Load configuration from a single TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If any value is invalid.
        """
        return cls.from_dict(read_toml_file(path))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        cwd: Path | None = None,
        include_env: bool = True,
        environ: dict[str, str] | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ) -> "Self":
        """Load merged configuration from all sources.

        Args:
            config_path: Explicit TOML file; it must exist. If None,
                ``sliders.toml`` in ``cwd`` is used when present.
            cwd: Directory searched for the default config file.
            include_env: Include ``SLIDERS_*`` environment variables.
            environ: Environment to read instead of ``os.environ``.
            cli_overrides: Nested dict of command-line overrides.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If ``config_path`` does not exist.
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If merged config fails validation.
        """
        merged: dict[str, Any] = {}

        if config_path is None:
            candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
            if candidate.is_file():
                config_path = candidate
        if config_path is not None:
            merged = deep_merge(merged, read_toml_file(config_path))

        if include_env:
            merged = deep_merge(merged, parse_env_vars(environ=environ))

        if cli_overrides:
            merged = deep_merge(merged, _drop_none(cli_overrides))

        return cls.from_dict(merged)


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Remove unset (None) CLI values so they do not mask other sources."""
    result: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            nested = _drop_none(value)
            if nested:
                result[key] = nested
        elif value is not None:
            result[key] = value
    return result
