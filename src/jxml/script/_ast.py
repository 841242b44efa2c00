"""Syntax tree nodes for the JXML script language."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Literal:
    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name:
    identifier: str
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Unary:
    operator: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class Binary:
    operator: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Logical:
    """Short-circuiting ``&&`` / ``||`` that yields an operand, not a bool."""

    operator: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Conditional:
    test: Expr
    consequent: Expr
    alternate: Expr


@dataclass(frozen=True, slots=True)
class Call:
    callee: Expr
    arguments: tuple[Expr, ...]
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Let:
    name: str
    value: Expr


@dataclass(frozen=True, slots=True)
class Return:
    value: Expr


@dataclass(frozen=True, slots=True)
class Lambda:
    """An arrow function; ``body`` is an expression or a statement block."""

    parameters: tuple[str, ...]
    body: Expr | tuple[Statement, ...]


type Expr = Literal | Name | Unary | Binary | Logical | Conditional | Call | Lambda
type Statement = Let | Return | Expr
