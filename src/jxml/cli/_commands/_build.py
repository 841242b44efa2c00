# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""The build command: render templates and splice them into the master XML."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape

from jxml import __version__
from jxml.build import BuildOptions, run_build
from jxml.config import find_project_root
from jxml.exceptions import BuildError, LibraryError, XmlFormatError
from jxml.formatting import parse_indent

from ._context import CLIContext
from ._shared import ExitCode, exit_with_error

if TYPE_CHECKING:
    from jxml.build import BuildReport

app = App(
    name="build",
    help="Render templates and splice them into the master document.",
    help_on_error=True,
)

BANNER = f"JXML Processor version {__version__}"


def _resolve_base_dir(ctx: CLIContext) -> Path:
    return ctx.project_root or find_project_root() or Path.cwd()


def _override(path: Path | None) -> str | None:
    return str(path.resolve()) if path is not None else None


def resolve_options(  # noqa: PLR0913
    ctx: CLIContext,
    *,
    library: Path | None = None,
    template_dir: Path | None = None,
    fragment_dir: Path | None = None,
    input_xml: Path | None = None,
    output_xml: Path | None = None,
    indent: str | None = None,
) -> BuildOptions:
    """Combine command-line arguments with the ``[build]`` configuration.

    Arguments are resolved against the working directory; configured paths
    against the project root.
    """
    overrides = {
        "library": _override(library),
        "template_dir": _override(template_dir),
        "fragment_dir": _override(fragment_dir),
        "input_xml": _override(input_xml),
        "output_xml": _override(output_xml),
    }
    build_config = ctx.config.build.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    options = BuildOptions.from_config(
        build_config,
        ctx.config.expansion,
        base_dir=_resolve_base_dir(ctx),
    )
    if indent is not None:
        options = dataclasses.replace(options, indent=parse_indent(indent))
    return options


def _print_report(console: Console, report: BuildReport, *, verbose: bool) -> None:
    console.print(f"Cleaned {report.cleaned} fragment file(s)")
    console.print(f"Wrote {len(report.rendered)} fragment file(s)")
    if verbose:
        for key in report.spliced:
            console.print(f"  [green]spliced[/green] {escape(key)}")
    for failure in report.failures:
        console.print(
            f"  [yellow]skipped[/yellow] {escape(failure.key)} "
            f"({failure.stage.value}): {escape(str(failure.error))}"
        )
    console.print(
        f"Output: {escape(str(report.output))} ({report.output_size} bytes)"
    )


@app.default
def build(  # noqa: PLR0913
    library: Annotated[
        Path | None, Parameter(help="Library script defining Embeds and helpers.")
    ] = None,
    template_dir: Annotated[
        Path | None, Parameter(help="Directory containing templates.")
    ] = None,
    fragment_dir: Annotated[
        Path | None, Parameter(help="Directory for rendered fragments.")
    ] = None,
    input_xml: Annotated[
        Path | None, Parameter(help="Master document with fragment anchors.")
    ] = None,
    output_xml: Annotated[
        Path | None, Parameter(help="Where to write the merged document.")
    ] = None,
    indent: Annotated[
        str | None, Parameter(help="Spaces per indentation level, or a tab.")
    ] = None,
) -> None:
    """Render every template and splice the fragments into the master document.

    Arguments not given on the command line come from the [build] section of
    the configuration. Fragments that fail to render or have no anchors in
    the master document are reported and skipped.
    """
    ctx = CLIContext.get_current()
    console = Console()
    logger = ctx.get_logger("build")

    options = resolve_options(
        ctx,
        library=library,
        template_dir=template_dir,
        fragment_dir=fragment_dir,
        input_xml=input_xml,
        output_xml=output_xml,
        indent=indent,
    )

    if not ctx.quiet:
        console.print(BANNER, highlight=False)

    try:
        report = run_build(options, logger)
    except (BuildError, LibraryError, XmlFormatError) as e:
        logger.error("build_failed", error=str(e))  # noqa: TRY400
        exit_with_error(str(e), ExitCode.FAILURE)

    if not ctx.quiet:
        console.print(
            f"Library: {escape(str(options.library))} ({report.library_size} chars)"
        )
        console.print(
            f"Input: {escape(str(options.input_xml))} ({report.input_size} chars)"
        )
        _print_report(console, report, verbose=ctx.verbose)
