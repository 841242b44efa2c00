# ruff: noqa: D415
"""Show command for the merged configuration."""

from __future__ import annotations

from typing import Annotated

from cyclopts import Parameter

from jxml.cli._commands._context import CLIContext

from ._app import app


@app.command(name="show")
def _show(
    *,
    all_values: Annotated[
        bool,
        Parameter(name=["--all", "-a"], help="Include default values"),
    ] = False,
) -> None:
    """Display merged configuration as TOML

    Without --all only values that differ from the built-in defaults are
    shown.

    Args:
        all_values: Include values equal to their defaults.
    """
    ctx = CLIContext.get_current()
    if ctx.config_error:
        print(f"# Configuration failed to load: {ctx.config_error}")  # noqa: T201

    output = ctx.config.to_toml(include_defaults=all_values)
    if not output:
        print("# All values are defaults")  # noqa: T201
        return

    print(output.rstrip())  # noqa: T201
