"""Utilities used by the JXML CLI."""

from ._app import create_app, main, open_session
from ._commands._context import CLIContext

__all__ = ["CLIContext", "create_app", "main", "open_session"]
