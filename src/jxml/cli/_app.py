"""The ``jxml`` command line."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from jxml import __version__
from jxml.config import LogLevel, safe_load_config
from jxml.utils import logger_for

from ._commands import register_commands
from ._commands._context import CLIContext

HELP = "Expand JXML templates and splice them into XML documents."


def _level_override(*, verbose: bool, quiet: bool) -> dict[str, object] | None:
    level = LogLevel.DEBUG if verbose else LogLevel.WARNING if quiet else None
    return {"logging": {"level": str(level)}} if level else None


def open_session(
    *,
    verbose: bool = False,
    quiet: bool = False,
    config: Path | None = None,
    project_root: Path | None = None,
) -> CLIContext:
    """Load settings for one invocation and build its context.

    ``--verbose`` and ``--quiet`` override the configured log level.
    """
    settings, error = safe_load_config(
        config_path=config,
        project_root=project_root,
        cli_overrides=_level_override(verbose=verbose, quiet=quiet),
    )
    return CLIContext(
        config=settings,
        verbose=verbose,
        quiet=quiet,
        project_root=project_root,
        config_error=error,
        logger=logger_for(settings.logging),
    )


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    app = App(
        name="jxml",
        help=HELP,
        version=__version__,
        help_on_error=True,
        console=console or Console(),
        error_console=error_console or Console(stderr=True),
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Log debug detail")] = False,
        quiet: Annotated[bool, Parameter(help="Log warnings and errors only")] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Settings file to use instead of jxml.toml")
        ] = None,
        project_root: Annotated[
            Path | None, Parameter(name="--project-root", help="Directory holding jxml.toml")
        ] = None,
    ) -> None:
        """Run a jxml command.

        Args:
            tokens: The subcommand and its arguments.
            verbose: Log debug detail.
            quiet: Log warnings and errors only.
            config: Settings file to use instead of jxml.toml.
            project_root: Directory holding jxml.toml.
        """
        session = open_session(
            verbose=verbose, quiet=quiet, config=config, project_root=project_root
        )
        with session.activate():
            app(tokens)

    register_commands(app)
    return app


def main() -> None:
    """Entry point of the ``jxml`` script."""
    create_app().meta()
