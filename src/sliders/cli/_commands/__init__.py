"""Sliders CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._run import app as run_app
from ._set import app as set_app
from ._shared import ExitCode, exit_with_error, get_error_console
from ._status import app as status_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "ExitCode",
    "exit_with_error",
    "get_error_console",
    "register_commands",
    "run_app",
    "set_app",
    "status_app",
]


def register_commands(app: "App") -> None:
    app.command(run_app)
    app.command(status_app)
    app.command(set_app)
