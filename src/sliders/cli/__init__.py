"""Utilities used by the sliders CLI."""

from ._app import app, create_app, main

__all__ = ["app", "create_app", "main"]
