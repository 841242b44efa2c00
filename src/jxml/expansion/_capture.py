"""Brace capture and parameter extraction for JXML templates."""

from dataclasses import dataclass

from jxml.exceptions import MalformedBraceError, UnclosedBraceError

DEFAULT_PARAMETER_SIGIL = "_"
DEFAULT_SILENT_SIGIL = "!"


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """Zero-based line and column of a character in a template."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class CapturedExpression:
    """A top-level ``{...}`` region of a template.

    Attributes:
        text: The literal region, braces included.
        start: Offset of the opening brace in the source.
        end: Offset just past the closing brace.
    """

    text: str
    start: int
    end: int

    @property
    def inner(self) -> str:
        """The region with one leading and one trailing brace removed."""
        return strip_braces(self.text)

    def is_silent(self, sigil: str = DEFAULT_SILENT_SIGIL) -> bool:
        return bool(sigil) and self.inner.startswith(sigil)


def position_of(source: str, index: int) -> SourcePosition:
    """Compute the line and column of ``index`` by counting from the start."""
    line = source.count("\n", 0, index)
    line_start = source.rfind("\n", 0, index) + 1
    return SourcePosition(line=line, column=index - line_start)


def capture_braces(source: str) -> list[CapturedExpression]:
    """Capture every top-level brace region of ``source`` in order.

    Nested braces stay inside the enclosing capture; they are never
    reported on their own.

    Raises:
        MalformedBraceError: A ``}`` appears without an open ``{``.
        UnclosedBraceError: Input ends while a ``{`` is still open; the error
            points at the outermost unmatched brace.
    """
    captures: list[CapturedExpression] = []
    depth = 0
    start = -1

    for index, char in enumerate(source):
        if char == "{":
            depth += 1
            if depth == 1:
                start = index
        elif char == "}":
            depth -= 1
            if depth < 0:
                position = position_of(source, index)
                msg = "Closing curly brace '}' was found without an open curly brace"
                raise MalformedBraceError(
                    msg,
                    source=source,
                    index=index,
                    line=position.line,
                    column=position.column,
                )
            if depth == 0:
                captures.append(
                    CapturedExpression(source[start : index + 1], start, index + 1)
                )

    if depth > 0:
        position = position_of(source, start)
        msg = "Opening curly brace '{' was found without a closing brace"
        raise UnclosedBraceError(
            msg,
            source=source,
            index=start,
            line=position.line,
            column=position.column,
        )

    return captures


def strip_braces(text: str) -> str:
    """Remove at most one leading ``{`` and one trailing ``}``."""
    if text.startswith("{"):
        text = text[1:]
    if text.endswith("}"):
        text = text[:-1]
    return text


def extract_parameters(
    captures: list[CapturedExpression],
    sigil: str = DEFAULT_PARAMETER_SIGIL,
) -> list[str]:
    """Derive the positional parameter names referenced by a template.

    Inner texts are deduplicated in first-occurrence order and only those
    beginning with ``sigil`` are kept; the resulting order defines which
    positional argument binds to which name.
    """
    unique = dict.fromkeys(capture.inner for capture in captures)
    return [inner for inner in unique if inner.startswith(sigil)]
