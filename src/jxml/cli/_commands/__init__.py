"""JXML CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._build import app as build_app
from ._config import app as config_app
from ._context import CLIContext
from ._render import app as render_app
from ._shared import ExitCode, exit_with_error, get_error_console

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "build_app",
    "config_app",
    "exit_with_error",
    "get_error_console",
    "register_commands",
    "render_app",
]


def register_commands(app: App) -> None:
    app.command(build_app)
    app.command(render_app)
    app.command(config_app)
