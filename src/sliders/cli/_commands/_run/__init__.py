"""Run command for the sliders CLI."""

from ._app import app
from ._runner import build_supervisor, run_supervisor

__all__ = ["app", "build_supervisor", "run_supervisor"]
