r"""JXML template expansion.

Templates are plain text with brace-delimited expressions. Each expansion
pass captures the top-level ``{...}`` regions, binds positional arguments
to the sigil-prefixed parameter names they reference, evaluates every
expression against the library globals and substitutes the results. Passes
repeat until the text stops changing.

Basic usage:
    from jxml.expansion import Library

    library = Library.parse('var hello = Embed(`<Say text="{_who}"/>`);')
    scope = library.instantiate()
    scope.expand('<Objects>{hello("world")}</Objects>')
    # '<Objects><Say text="world"/></Objects>'
"""

from ._capture import (
    DEFAULT_PARAMETER_SIGIL,
    DEFAULT_SILENT_SIGIL,
    CapturedExpression,
    SourcePosition,
    capture_braces,
    extract_parameters,
    position_of,
    strip_braces,
)
from ._embeds import Embed, TrimPolicy, collect_embeds
from ._expander import DEFAULT_MAX_ITERATIONS, Expander
from ._library import BUILTINS, ExpansionSettings, Library, LibraryScope
from ._scope import (
    bind_parameters,
    build_scope,
    coerce_argument,
    evaluate_capture,
    render_value,
)

__all__ = [
    "BUILTINS",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_PARAMETER_SIGIL",
    "DEFAULT_SILENT_SIGIL",
    "CapturedExpression",
    "Embed",
    "ExpansionSettings",
    "Expander",
    "Library",
    "LibraryScope",
    "SourcePosition",
    "TrimPolicy",
    "bind_parameters",
    "build_scope",
    "capture_braces",
    "coerce_argument",
    "collect_embeds",
    "evaluate_capture",
    "extract_parameters",
    "position_of",
    "render_value",
    "strip_braces",
]
