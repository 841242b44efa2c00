from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from jxml.exceptions import (
    ScriptRuntimeError,
    ScriptSyntaxError,
    TemplateEvaluationError,
)
from jxml.expansion import (
    bind_parameters,
    build_scope,
    capture_braces,
    coerce_argument,
    evaluate_capture,
    render_value,
)

if TYPE_CHECKING:
    from jxml.script import Value


class TestCoerceArgument:
    @pytest.mark.parametrize("value", ["text", 3, 1.5, True])
    def test_scalars_pass_through(self, value: object) -> None:
        assert coerce_argument(value) == value

    @pytest.mark.parametrize("value", [None, [1], {"a": 1}, print])
    def test_everything_else_becomes_empty(self, value: object) -> None:
        assert coerce_argument(value) == ""


class TestBindParameters:
    def test_binds_by_position(self) -> None:
        assert bind_parameters(["_a", "_b"], ["x", 2]) == {"_a": "x", "_b": 2}

    def test_missing_values_bind_to_empty_string(self) -> None:
        assert bind_parameters(["_a", "_b"], ["x"]) == {"_a": "x", "_b": ""}

    def test_surplus_values_are_ignored(self) -> None:
        assert bind_parameters(["_a"], [1, 2, 3]) == {"_a": 1}


class TestBuildScope:
    def test_bindings_shadow_globals(self) -> None:
        scope = build_scope({"x": 1}, {"x": 2, "y": 3})

        assert scope["x"] == 1
        assert scope["y"] == 3

    def test_writes_do_not_reach_bindings_or_globals(self) -> None:
        bindings: dict[str, Value] = {"x": 1}
        library_globals: dict[str, Value] = {"y": 2}
        scope = build_scope(bindings, library_globals)

        scope["x"] = 10
        scope["y"] = 20

        assert bindings == {"x": 1}
        assert library_globals == {"y": 2}


class TestRenderValue:
    def test_null_renders_empty(self) -> None:
        assert render_value(None) == ""

    def test_numbers_render_without_trailing_zero(self) -> None:
        assert render_value(0.0) == "0"
        assert render_value(2.5) == "2.5"


class TestEvaluateCapture:
    def test_renders_the_expression_value(self) -> None:
        capture = capture_braces("{_a + 1}")[0]
        scope = build_scope({"_a": 2}, {})

        assert evaluate_capture(capture, scope, silent_sigil="!") == "3"

    def test_silent_expression_runs_but_renders_nothing(self) -> None:
        calls: list[tuple[Value, ...]] = []

        def record(*args: Value) -> Value:
            calls.append(args)
            return "ignored"

        capture = capture_braces("{!record(1)}")[0]
        scope = build_scope({}, {"record": record})

        assert evaluate_capture(capture, scope, silent_sigil="!") == ""
        assert calls == [(1,)]

    def test_syntax_error_is_wrapped(self) -> None:
        capture = capture_braces("{1 +}")[0]

        with pytest.raises(TemplateEvaluationError) as exc_info:
            evaluate_capture(capture, build_scope({}, {}), silent_sigil="!")

        assert exc_info.value.expression == "1 +"
        assert isinstance(exc_info.value.cause, ScriptSyntaxError)

    def test_runtime_error_is_wrapped(self) -> None:
        capture = capture_braces("{missing}")[0]

        with pytest.raises(TemplateEvaluationError) as exc_info:
            evaluate_capture(capture, build_scope({}, {}), silent_sigil="!")

        assert isinstance(exc_info.value.cause, ScriptRuntimeError)
        assert "{missing}" in str(exc_info.value)

    def test_silent_binding_lands_in_the_first_scope_layer(self) -> None:
        library_globals: dict[str, Value] = {"n": 2}
        scope = build_scope({"_a": 1}, library_globals)
        capture = capture_braces("{!let doubled = n * 2}")[0]

        assert evaluate_capture(capture, scope, silent_sigil="!") == ""
        assert scope.maps[0] == {"doubled": 4}
        assert "doubled" not in library_globals

    def test_silent_syntax_error_is_wrapped(self) -> None:
        capture = capture_braces("{!let = 5}")[0]

        with pytest.raises(TemplateEvaluationError) as exc_info:
            evaluate_capture(capture, build_scope({}, {}), silent_sigil="!")

        assert exc_info.value.expression == "let = 5"
        assert isinstance(exc_info.value.cause, ScriptSyntaxError)

    def test_bindings_are_not_expressions(self) -> None:
        capture = capture_braces("{let x = 5}")[0]

        with pytest.raises(TemplateEvaluationError):
            evaluate_capture(capture, build_scope({}, {}), silent_sigil="!")

    def test_deep_evaluation_is_wrapped(self) -> None:
        capture = capture_braces("{" + "-" * 5000 + "1}")[0]

        with pytest.raises(TemplateEvaluationError, match="nested too deeply") as exc_info:
            evaluate_capture(capture, build_scope({}, {}), silent_sigil="!")

        assert isinstance(exc_info.value.cause, RecursionError)
