"""Fixed-point template expansion."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from jxml.exceptions import ExpansionDidNotConvergeError

from ._capture import (
    DEFAULT_PARAMETER_SIGIL,
    DEFAULT_SILENT_SIGIL,
    capture_braces,
    extract_parameters,
)
from ._scope import bind_parameters, build_scope, evaluate_capture

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from jxml.script import Value

DEFAULT_MAX_ITERATIONS = 100


@final
class Expander:
    """Expands JXML templates against a set of library globals.

    Each pass captures the top-level brace expressions of the text, binds
    positional arguments to the sigil-prefixed parameter names, evaluates
    every expression and splices the results back in. :meth:`expand` repeats
    passes until the text stops changing, so an expression may produce new
    brace syntax for the next pass to pick up.

    Attributes:
        library_globals: Names visible to every expression (Embeds, helpers,
            builtins). Never written to by template evaluation.
        parameter_sigil: Leading character marking a parameter reference.
        silent_sigil: Leading character marking an effect-only expression.
        max_iterations: Pass limit for :meth:`expand`.
    """

    __slots__ = (
        "library_globals",
        "max_iterations",
        "parameter_sigil",
        "silent_sigil",
    )

    def __init__(
        self,
        library_globals: Mapping[str, Value] | None = None,
        *,
        parameter_sigil: str = DEFAULT_PARAMETER_SIGIL,
        silent_sigil: str = DEFAULT_SILENT_SIGIL,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        if max_iterations < 1:
            msg = "max_iterations must be at least 1"
            raise ValueError(msg)
        self.library_globals: Mapping[str, Value] = (
            library_globals if library_globals is not None else {}
        )
        self.parameter_sigil: str = parameter_sigil
        self.silent_sigil: str = silent_sigil
        self.max_iterations: int = max_iterations

    def render_pass(self, template: str, arguments: Sequence[object] = ()) -> str:
        """Run a single capture-and-evaluate pass over ``template``.

        Args:
            template: Template text.
            arguments: Positional values for the template's parameters.

        Returns:
            The text with every top-level brace expression replaced.

        Raises:
            BraceError: If brace nesting is unbalanced.
            TemplateEvaluationError: If an expression fails.
        """
        captures = capture_braces(template)
        if not captures:
            return template

        names = extract_parameters(captures, self.parameter_sigil)
        scope = build_scope(bind_parameters(names, arguments), self.library_globals)

        parts: list[str] = []
        cursor = 0
        for capture in captures:
            parts.append(template[cursor : capture.start])
            parts.append(
                evaluate_capture(capture, scope, silent_sigil=self.silent_sigil)
            )
            cursor = capture.end
        parts.append(template[cursor:])
        return "".join(parts)

    def expand(self, template: str, arguments: Sequence[object] = ()) -> str:
        """Expand ``template`` until a pass leaves it unchanged.

        ``arguments`` bind only on the first pass; later passes see the
        parameters of whatever text the previous pass produced, bound to
        empty strings.

        Raises:
            BraceError: If brace nesting is unbalanced on any pass.
            TemplateEvaluationError: If an expression fails on any pass.
            ExpansionDidNotConvergeError: If the text is still changing after
                ``max_iterations`` passes.
        """
        current = template
        bound: Sequence[object] = arguments
        for _ in range(self.max_iterations):
            rendered = self.render_pass(current, bound)
            if rendered == current:
                return rendered
            current = rendered
            bound = ()

        msg = (
            "Template did not reach a fixed point after "
            f"{self.max_iterations} passes"
        )
        raise ExpansionDidNotConvergeError(msg, iterations=self.max_iterations)
