# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Configuration loading with CLI overrides
- Store construction
- Console utilities for error handling
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

from sliders.config import Config
from sliders.exceptions import ConfigError
from sliders.store import RedisStore

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from sliders.store import KeyValueStore

__all__ = [
    "ExitCode",
    "exit_with_error",
    "get_console",
    "get_error_console",
    "load_config_or_exit",
    "open_store",
    "store_overrides",
]


class ExitCode(IntEnum):
    """Standard exit codes for sliders CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    STORE_ERROR = 2
    VALIDATION_ERROR = 3


def get_console() -> "Console":
    """Get a Rich console for standard output."""
    from rich.console import Console  # noqa: PLC0415

    return Console()


def get_error_console() -> "Console":
    """Get a Rich console configured for error output to stderr."""
    from rich.console import Console  # noqa: PLC0415

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.LOAD_ERROR,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)


def store_overrides(
    *,
    hostname: str | None = None,
    store_url: str | None = None,
    namespace: str | None = None,
) -> dict[str, Any]:
    """Build the config overrides shared by every command."""
    return {
        "supervisor": {"hostname": hostname},
        "store": {"url": store_url, "namespace": namespace},
    }


def load_config_or_exit(
    config_path: "Path | None",
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Load configuration, exiting with LOAD_ERROR on any failure."""
    try:
        return Config.load(config_path=config_path, cli_overrides=overrides)
    except FileNotFoundError:
        exit_with_error(f"Config file not found: {config_path}")
    except ConfigError as e:
        exit_with_error(str(e))


def open_store(config: Config) -> "KeyValueStore":
    """Create the shared store client for ``config``.

    The connection is established lazily on first use.
    """
    try:
        return RedisStore.from_url(config.store.url)
    except ValueError as e:
        exit_with_error(f"Invalid store URL '{config.store.url}': {e}")
