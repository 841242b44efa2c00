"""Tree-walking evaluator for the JXML script language.

Evaluation never touches the host process: names resolve only against the
explicit environment handed in by the caller, and the only callables are
script lambdas plus whatever the caller placed in that environment.
"""

from __future__ import annotations

import math
from collections import ChainMap
from typing import TYPE_CHECKING, final

from jxml.exceptions import JXMLError, ScriptRuntimeError

from ._ast import (
    Binary,
    Call,
    Conditional,
    Lambda,
    Let,
    Literal,
    Logical,
    Name,
    Return,
    Unary,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ._ast import Expr, Statement

type Value = str | int | float | bool | None | Callable[..., Value]
type Environment = ChainMap[str, Value]


@final
class Function:
    """A closure created by an arrow function expression."""

    __slots__ = ("body", "environment", "name", "parameters")

    def __init__(
        self,
        parameters: tuple[str, ...],
        body: Expr | tuple[Statement, ...],
        environment: Environment,
        name: str = "<anonymous>",
    ) -> None:
        self.parameters: tuple[str, ...] = parameters
        self.body: Expr | tuple[Statement, ...] = body
        self.environment: Environment = environment
        self.name: str = name

    def __call__(self, *arguments: Value) -> Value:
        bindings: dict[str, Value] = {
            parameter: arguments[index] if index < len(arguments) else None
            for index, parameter in enumerate(self.parameters)
        }
        local = self.environment.new_child(bindings)
        if isinstance(self.body, tuple):
            return _run_block(self.body, local)
        return evaluate(self.body, local)

    def __repr__(self) -> str:
        return f"<function {self.name}({', '.join(self.parameters)})>"


class _ReturnSignal(Exception):  # noqa: N818
    def __init__(self, value: Value) -> None:
        super().__init__()
        self.value: Value = value


# ----------------------------------------------------------------------------
# Coercions
# ----------------------------------------------------------------------------


def _is_number(value: Value) -> bool:
    return isinstance(value, int | float)


def is_truthy(value: Value) -> bool:
    """Return script truthiness: ``""``, ``0``, ``NaN``, false and null are falsy."""
    if value is None or value is False:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, str | int | float):
        return bool(value)
    return True


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:  # noqa: PLR2004
        return str(int(value))
    return repr(value)


def stringify(value: Value) -> str:
    """Convert a script value to its string form.

    Booleans render as ``true``/``false``, null as ``null`` and integral
    floats without a fractional part (``2.0`` -> ``2``).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, int):
        return str(value)
    return f"[function {getattr(value, 'name', getattr(value, '__name__', ''))}]"


def to_number(value: Value) -> int | float:
    """Convert a script value to a number, yielding NaN when impossible."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _same_kind(left: Value, right: Value) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool)
    if _is_number(left) and _is_number(right):
        return True
    return type(left) is type(right)


# ----------------------------------------------------------------------------
# Operators
# ----------------------------------------------------------------------------


def _arithmetic(operator: str, left: Value, right: Value) -> Value:
    if operator == "+" and (isinstance(left, str) or isinstance(right, str)):
        return stringify(left) + stringify(right)
    if not (_is_number(left) and _is_number(right)):
        msg = (
            f"Operator '{operator}' needs numbers, got "
            f"{stringify(left)!r} and {stringify(right)!r}"
        )
        raise ScriptRuntimeError(msg)
    lhs = to_number(left)
    rhs = to_number(right)
    if operator == "+":
        return lhs + rhs
    if operator == "-":
        return lhs - rhs
    if operator == "*":
        return lhs * rhs
    if rhs == 0:
        msg = f"Division by zero in '{operator}'"
        raise ScriptRuntimeError(msg)
    if operator == "/":
        return lhs / rhs
    # Remainder takes the sign of the dividend.
    remainder = math.fmod(lhs, rhs)
    if isinstance(lhs, int) and isinstance(rhs, int):
        return int(remainder)
    return remainder


def _compare(operator: str, left: Value, right: Value) -> bool:
    if operator in ("==", "==="):
        return _same_kind(left, right) and left == right
    if operator in ("!=", "!=="):
        return not (_same_kind(left, right) and left == right)
    if not (
        (_is_number(left) and _is_number(right))
        or (isinstance(left, str) and isinstance(right, str))
    ):
        msg = f"Cannot compare {stringify(left)!r} {operator} {stringify(right)!r}"
        raise ScriptRuntimeError(msg)
    if operator == "<":
        return left < right  # pyright: ignore[reportOperatorIssue]
    if operator == "<=":
        return left <= right  # pyright: ignore[reportOperatorIssue]
    if operator == ">":
        return left > right  # pyright: ignore[reportOperatorIssue]
    return left >= right  # pyright: ignore[reportOperatorIssue]


# ----------------------------------------------------------------------------
# Evaluation
# ----------------------------------------------------------------------------


def _call(node: Call, environment: Environment) -> Value:
    callee = evaluate(node.callee, environment)
    if not callable(callee):
        name = node.callee.identifier if isinstance(node.callee, Name) else "value"
        msg = f"'{name}' is not a function (line {node.line}, col {node.column})"
        raise ScriptRuntimeError(msg)
    arguments = [evaluate(argument, environment) for argument in node.arguments]
    try:
        return callee(*arguments)
    except (JXMLError, _ReturnSignal):
        raise
    except RecursionError as e:
        msg = "Maximum call depth exceeded"
        raise ScriptRuntimeError(msg) from e
    except (TypeError, ValueError, ArithmeticError) as e:
        msg = f"Call failed: {e}"
        raise ScriptRuntimeError(msg) from e


def evaluate(node: Expr, environment: Environment) -> Value:
    """Evaluate an expression node against an environment.

    Args:
        node: Parsed expression.
        environment: Name bindings visible to the expression.

    Returns:
        The resulting script value.

    Raises:
        ScriptRuntimeError: On unknown names, type errors or bad calls.
    """
    match node:
        case Literal(value=value):
            return value
        case Name(identifier=identifier, line=line, column=column):
            try:
                return environment[identifier]
            except KeyError:
                msg = f"'{identifier}' is not defined (line {line}, col {column})"
                raise ScriptRuntimeError(msg) from None
        case Unary(operator="!", operand=operand):
            return not is_truthy(evaluate(operand, environment))
        case Unary(operator=operator, operand=operand):
            value = evaluate(operand, environment)
            if operator == "+":
                return to_number(value)
            if not _is_number(value):
                msg = f"Cannot negate {stringify(value)!r}"
                raise ScriptRuntimeError(msg)
            return -to_number(value)
        case Logical(operator=operator, left=left, right=right):
            lhs = evaluate(left, environment)
            if operator == "||":
                return lhs if is_truthy(lhs) else evaluate(right, environment)
            return evaluate(right, environment) if is_truthy(lhs) else lhs
        case Binary(operator=operator, left=left, right=right):
            lhs = evaluate(left, environment)
            rhs = evaluate(right, environment)
            if operator in ("+", "-", "*", "/", "%"):
                return _arithmetic(operator, lhs, rhs)
            return _compare(operator, lhs, rhs)
        case Conditional(test=test, consequent=consequent, alternate=alternate):
            if is_truthy(evaluate(test, environment)):
                return evaluate(consequent, environment)
            return evaluate(alternate, environment)
        case Call():
            return _call(node, environment)
        case Lambda(parameters=parameters, body=body):
            return Function(parameters, body, environment)
        case _:
            msg = f"Unsupported expression node: {type(node).__name__}"
            raise ScriptRuntimeError(msg)


def execute(statement: Statement, environment: Environment) -> Value:
    """Execute one statement, binding ``let`` names in the innermost scope."""
    match statement:
        case Let(name=name, value=value_node):
            value = evaluate(value_node, environment)
            if isinstance(value, Function) and value.name == "<anonymous>":
                value.name = name
            environment[name] = value
            return None
        case Return(value=value_node):
            raise _ReturnSignal(evaluate(value_node, environment))
        case _:
            return evaluate(statement, environment)


def _run_block(statements: tuple[Statement, ...], environment: Environment) -> Value:
    try:
        for statement in statements:
            _ = execute(statement, environment)
    except _ReturnSignal as signal:
        return signal.value
    return None


def run_program(
    statements: tuple[Statement, ...],
    environment: Environment,
) -> None:
    """Execute top-level library statements in order.

    Raises:
        ScriptRuntimeError: If a statement fails or ``return`` is used at
            the top level.
    """
    for statement in statements:
        try:
            _ = execute(statement, environment)
        except _ReturnSignal:
            msg = "'return' outside of a function body"
            raise ScriptRuntimeError(msg) from None


def new_environment(*layers: Mapping[str, Value]) -> Environment:
    """Create an environment whose first layer receives new bindings."""
    return ChainMap({}, *layers)
