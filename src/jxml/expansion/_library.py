"""Library scripts: the registration step that defines Embeds and helpers.

A library script is a list of bindings written in the JXML script language::

    var sayTemplate = Embed(`<Behavior text="{_text}">Say</Behavior>`);
    var say = (text, time) => sayTemplate(text, time || 0.0);

The script is parsed once per build and evaluated once per rendered
fragment, giving every fragment a fresh, isolated set of globals.
"""

from __future__ import annotations

from collections import ChainMap
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, final

from jxml.exceptions import JXMLError, LibraryError, ScriptError
from jxml.script import (
    Value,
    parse_program,
    run_program,
    stringify,
    to_number,
)

from ._capture import DEFAULT_PARAMETER_SIGIL, DEFAULT_SILENT_SIGIL
from ._embeds import Embed, TrimPolicy, collect_embeds
from ._expander import DEFAULT_MAX_ITERATIONS, Expander

if TYPE_CHECKING:
    from pathlib import Path

    from jxml.script import Statement


@dataclass(frozen=True, slots=True)
class ExpansionSettings:
    """Knobs shared by every expander created for a build."""

    parameter_sigil: str = DEFAULT_PARAMETER_SIGIL
    silent_sigil: str = DEFAULT_SILENT_SIGIL
    max_iterations: int = DEFAULT_MAX_ITERATIONS


def _join(separator: Value, *values: Value) -> str:
    return stringify(separator).join(stringify(value) for value in values)


BUILTINS: dict[str, Value] = {
    "String": stringify,
    "Number": to_number,
    "join": _join,
}


@dataclass(frozen=True, slots=True)
class LibraryScope:
    """Globals produced by evaluating a library for one fragment.

    Attributes:
        globals: Every name the library bound, plus the builtins.
        expander: Expander wired to ``globals``; use it to render templates.
    """

    globals: dict[str, Value] = field(repr=False)
    expander: Expander

    @property
    def embeds(self) -> dict[str, Embed]:
        """The Embeds the library registered, keyed by name."""
        return collect_embeds(self.globals)

    def expand(self, template: str) -> str:
        """Expand a whole template (no positional arguments) to a fixed point."""
        return self.expander.expand(template)


@final
class Library:
    """A parsed library script."""

    __slots__ = ("path", "source", "statements")

    def __init__(
        self,
        source: str,
        statements: tuple[Statement, ...],
        *,
        path: Path | None = None,
    ) -> None:
        self.source: str = source
        self.statements: tuple[Statement, ...] = statements
        self.path: Path | None = path

    @classmethod
    def parse(cls, source: str, *, path: Path | None = None) -> Library:
        """Parse library source.

        Raises:
            LibraryError: If the source has a syntax error.
        """
        try:
            statements = parse_program(source)
        except ScriptError as e:
            where = f" '{path}'" if path is not None else ""
            msg = f"Invalid library script{where}: {e}"
            raise LibraryError(msg, path=path, cause=e) from e
        return cls(source, statements, path=path)

    def instantiate(self, settings: ExpansionSettings | None = None) -> LibraryScope:
        """Evaluate the library into a fresh scope.

        ``Embed`` and ``StringEmbed`` are available to the script as
        constructors; the Embeds they build render through an expander that
        sees the finished globals, so Embeds may call each other regardless
        of definition order.

        Raises:
            LibraryError: If evaluating a statement fails.
        """
        settings = settings or ExpansionSettings()
        globals_: dict[str, Value] = dict(BUILTINS)
        expander = Expander(
            globals_,
            parameter_sigil=settings.parameter_sigil,
            silent_sigil=settings.silent_sigil,
            max_iterations=settings.max_iterations,
        )

        def embed(body: Value) -> Embed:
            return Embed(stringify(body), expander, trim=TrimPolicy.TRIM)

        def string_embed(body: Value) -> Embed:
            return Embed(stringify(body), expander, trim=TrimPolicy.VERBATIM)

        globals_["Embed"] = embed
        globals_["StringEmbed"] = string_embed

        try:
            run_program(self.statements, ChainMap(globals_))
        except JXMLError as e:
            where = f" '{self.path}'" if self.path is not None else ""
            msg = f"Failed to evaluate library script{where}: {e}"
            raise LibraryError(msg, path=self.path, cause=e) from e
        except RecursionError as e:
            where = f" '{self.path}'" if self.path is not None else ""
            msg = f"Failed to evaluate library script{where}: nested too deeply"
            raise LibraryError(msg, path=self.path, cause=e) from e

        for name, registered in collect_embeds(globals_).items():
            if registered.name == "<embed>":
                registered.name = name

        return LibraryScope(globals=globals_, expander=expander)
