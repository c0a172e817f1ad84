"""Configuration for sliders.

Key Components:
    - Config: Validated configuration container
    - SupervisorSettings, StoreSettings, WorkerSettings, LoggingSettings:
      Configuration sections
"""

from ._config import DEFAULT_CONFIG_FILENAME, Config
from ._loader import deep_merge, parse_env_value, parse_env_vars, read_toml_file
from ._models import (
    LogFormat,
    LoggingSettings,
    StoreSettings,
    SupervisorSettings,
    WorkerSettings,
)

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "Config",
    "LogFormat",
    "LoggingSettings",
    "StoreSettings",
    "SupervisorSettings",
    "WorkerSettings",
    "deep_merge",
    "parse_env_value",
    "parse_env_vars",
    "read_toml_file",
]
