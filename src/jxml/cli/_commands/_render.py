# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""The render command: expand one template and print the result."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import App, Parameter

from jxml.build import render_template
from jxml.exceptions import JXMLError

from ._build import resolve_options
from ._context import CLIContext
from ._shared import ExitCode, exit_with_error

app = App(
    name="render",
    help="Expand a single template and print it.",
    help_on_error=True,
)


@app.default
def render(
    template: Annotated[Path, Parameter(help="Template file to expand.")],
    /,
    *,
    library: Annotated[
        Path | None,
        Parameter(name=["--library", "-l"], help="Library script to use."),
    ] = None,
) -> None:
    """Expand a template against the library and print it unformatted.

    Useful for debugging a single template without touching the fragment
    directory or the master document.
    """
    ctx = CLIContext.get_current()
    options = resolve_options(ctx, library=library)

    try:
        text = anyio.run(
            render_template, template, options.library, options.expansion
        )
    except JXMLError as e:
        ctx.get_logger("render").error(  # noqa: TRY400
            "render_failed", template=str(template), error=str(e)
        )
        exit_with_error(str(e), ExitCode.FAILURE)

    print(text)  # noqa: T201
