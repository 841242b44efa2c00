# pyright: reportUnusedCallResult=false
"""Config command app for inspecting configuration."""

# Import command modules to register commands with the app
from . import _show as _show, _validate as _validate
from ._app import app

__all__ = ["app"]
