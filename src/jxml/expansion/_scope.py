"""Parameter binding and expression evaluation for one template pass."""

from __future__ import annotations

from collections import ChainMap
from functools import lru_cache
from typing import TYPE_CHECKING

from jxml.exceptions import ScriptError, TemplateEvaluationError
from jxml.script import (
    Value,
    evaluate,
    execute,
    parse_expression,
    parse_statement,
    stringify,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ._capture import CapturedExpression

# Parsed trees are immutable, so identical sources share one parse.
_parse = lru_cache(maxsize=1024)(parse_expression)
_parse_silent = lru_cache(maxsize=256)(parse_statement)


def coerce_argument(value: object) -> str | int | float | bool:
    """Coerce a positional argument to a bindable scalar.

    Strings, numbers and booleans pass through; anything else (including a
    missing or null value, containers and callables) becomes ``""``.
    """
    if isinstance(value, str | int | float | bool):
        return value
    return ""


def bind_parameters(
    names: Sequence[str],
    values: Sequence[object],
) -> dict[str, Value]:
    """Bind positional ``values`` to parameter ``names`` by index.

    Names beyond the supplied values bind to ``""``; surplus values are
    ignored.
    """
    return {
        name: coerce_argument(values[index] if index < len(values) else None)
        for index, name in enumerate(names)
    }


def build_scope(
    bindings: Mapping[str, Value],
    library_globals: Mapping[str, Value],
) -> ChainMap[str, Value]:
    """Layer parameter bindings over the library globals.

    The first layer is a fresh dict that receives silent ``let``/``var``/
    ``const`` bindings for the rest of the pass, so nothing evaluated in
    this scope can write into ``bindings`` or the library globals.
    """
    return ChainMap({}, dict(bindings), library_globals)  # pyright: ignore[reportArgumentType]


def render_value(value: Value) -> str:
    """Render an evaluation result for substitution into template text."""
    if value is None:
        return ""
    return stringify(value)


def evaluate_capture(
    capture: CapturedExpression,
    scope: ChainMap[str, Value],
    *,
    silent_sigil: str,
) -> str:
    """Evaluate one captured expression and return its rendered text.

    A capture led by ``silent_sigil`` is a statement rather than an
    expression: a ``let``/``var``/``const`` binding lands in the first
    layer of ``scope``, where later captures of the same pass see it. It
    renders as ``""``.

    Raises:
        TemplateEvaluationError: If the expression fails to parse or evaluate.
    """
    expression = capture.inner
    silent = capture.is_silent(silent_sigil)
    if silent:
        expression = expression[len(silent_sigil) :]

    try:
        if silent:
            _ = execute(_parse_silent(expression), scope)
            return ""
        value = evaluate(_parse(expression), scope)
    except ScriptError as e:
        msg = f"Failed to evaluate '{capture.text}': {e}"
        raise TemplateEvaluationError(msg, expression=expression, cause=e) from e
    except RecursionError as e:
        msg = f"Failed to evaluate '{capture.text}': expression is nested too deeply"
        raise TemplateEvaluationError(msg, expression=expression, cause=e) from e

    return render_value(value)
