# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""Per-invocation state shared by the CLI commands.

The root command loads settings once, wraps them in a :class:`CLIContext`
and activates it; subcommands pick it up with :meth:`CLIContext.get_current`.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from jxml.config import Config

if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import FilteringBoundLogger


_active: contextvars.ContextVar[CLIContext | None] = contextvars.ContextVar(
    "cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Settings and global flags for one ``jxml`` invocation.

    Attributes:
        config: Merged settings, or the defaults if loading failed.
        verbose: ``--verbose`` was given.
        quiet: ``--quiet`` was given.
        project_root: ``--project-root``, if given.
        config_error: Why loading settings failed, if it did.
        logger: Logger built from ``config.logging``.
    """

    config: Config = field(default_factory=Config, repr=False)
    verbose: bool = False
    quiet: bool = False
    project_root: Path | None = None
    config_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)

    @classmethod
    def get_current(cls) -> CLIContext:
        """The active context, or one holding the default settings."""
        return _active.get() or cls()

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        _ = _active.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Forget the active context."""
        _ = _active.set(None)

    @contextmanager
    def activate(self) -> Iterator[CLIContext]:
        """Make this the active context until the block exits."""
        token = _active.set(self)
        try:
            yield self
        finally:
            _active.reset(token)

    def get_logger(self, command: str) -> FilteringBoundLogger:
        """Return a logger bound to ``command``.

        Without a prepared logger one is built from ``config.logging``.
        """
        if self.logger is not None:
            return self.logger.bind(command=command)

        from jxml.utils import logger_for  # noqa: PLC0415

        return logger_for(self.config.logging, command=command)
