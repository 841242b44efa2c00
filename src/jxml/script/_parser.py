"""LALR parser for the JXML script language.

The grammar lives in ``grammar.lark`` next to this module. Syntax trees are
built by :class:`AstBuilder` while the parser reduces, so parsing never
recurses on nesting depth; :class:`NestingLimit` caps how deeply groups and
blocks may nest instead.
"""

from __future__ import annotations

import re
from functools import cache
from importlib.resources import files
from typing import TYPE_CHECKING, Any, final

from lark import (
    Lark,
    Token,
    Transformer,
    UnexpectedCharacters,
    UnexpectedInput,
    UnexpectedToken,
)
from lark.lark import PostLex

from jxml.exceptions import ScriptSyntaxError

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
    from collections.abc import Iterator

    from ._ast import Expr, Statement

MAX_NESTING = 200
"""Deepest allowed nesting of parentheses and blocks."""

_OPENERS = frozenset({"LPAR", "LBRACE"})
_CLOSERS = frozenset({"RPAR", "RBRACE"})

_ESCAPE = re.compile(r"\\([\s\S])")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}
_PARAMETER = re.compile(r"[\w$]+")


def _position(token: Token) -> tuple[int, int]:
    # lark counts from 1
    return (token.line or 1) - 1, (token.column or 1) - 1


def _unescape(body: str) -> str:
    return _ESCAPE.sub(lambda match: _ESCAPES.get(match[1], match[1]), body)


@final
class AstBuilder(Transformer[Token, Any]):
    """Turns grammar rules into frozen syntax tree nodes."""

    def program(self, items: list[Statement]) -> tuple[Statement, ...]:
        return tuple(items)

    block = program

    def single_expression(self, items: list[Expr]) -> Expr:
        return items[0]

    silent_statement = single_expression

    def declaration(self, items: list[Any]) -> Let:
        name, value = items
        return Let(str(name), value)

    def return_statement(self, items: list[Expr]) -> Return:
        return Return(items[0])

    def arrow(self, items: list[Any]) -> Lambda:
        head, body = items
        parameters = _PARAMETER.findall(head.removesuffix("=>"))
        return Lambda(tuple(parameters), body)

    def ternary(self, items: list[Expr]) -> Conditional:
        test, consequent, alternate = items
        return Conditional(test, consequent, alternate)

    def logical(self, items: list[Any]) -> Logical:
        left, operator, right = items
        return Logical(str(operator), left, right)

    def binary(self, items: list[Any]) -> Binary:
        left, operator, right = items
        return Binary(str(operator), left, right)

    def prefix(self, items: list[Any]) -> Unary:
        operator, operand = items
        return Unary(str(operator), operand)

    def invocation(self, items: list[Any]) -> Call:
        callee, paren, *arguments = items
        line, column = _position(paren)
        return Call(callee, tuple(arguments), line, column)

    def number(self, items: list[Token]) -> Literal:
        (token,) = items
        return Literal(float(token) if "." in token else int(token))

    def string(self, items: list[Token]) -> Literal:
        (token,) = items
        return Literal(_unescape(token[1:-1]))

    def true(self, _items: list[Any]) -> Literal:
        return Literal(value=True)

    def false(self, _items: list[Any]) -> Literal:
        return Literal(value=False)

    def null(self, _items: list[Any]) -> Literal:
        return Literal(None)

    def name(self, items: list[Token]) -> Name:
        (token,) = items
        line, column = _position(token)
        return Name(str(token), line, column)


@final
class NestingLimit(PostLex):
    """Reject sources that nest groups and blocks deeper than ``MAX_NESTING``."""

    def process(self, stream: Iterator[Token]) -> Iterator[Token]:
        depth = 0
        for token in stream:
            if token.type in _OPENERS:
                depth += 1
                if depth > MAX_NESTING:
                    line, column = _position(token)
                    msg = f"Too many nested groups (more than {MAX_NESTING})"
                    raise ScriptSyntaxError(msg, line=line, column=column)
            elif token.type in _CLOSERS:
                depth -= 1
            yield token


@cache
def _get_parser() -> Lark:
    grammar = (files(__package__) / "grammar.lark").read_text(encoding="utf-8")
    return Lark(
        grammar,
        parser="lalr",
        lexer="basic",
        start=["program", "single_expression", "silent_statement"],
        transformer=AstBuilder(),
        postlex=NestingLimit(),
    )


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedCharacters):
        return f"Unexpected character '{error.char}'"
    if not isinstance(error, UnexpectedToken):
        return "Invalid syntax"

    expected = error.expected
    if error.token.type == "$END":
        if "RBRACE" in expected:
            return "Unterminated block, expected '}'"
        if "RPAR" in expected:
            return "Expected ')' but found end of input"
        return "Unexpected end of input"
    if "$END" in expected:
        return f"Unexpected '{error.token}' after expression"
    if expected == {"NAME"}:
        return f"Expected an identifier but found '{error.token}'"
    return f"Unexpected '{error.token}'"


def _parse(source: str, start: str) -> Any:
    try:
        return _get_parser().parse(source, start=start)
    except UnexpectedInput as e:
        line = max(e.line - 1, 0) if isinstance(e.line, int) else 0
        column = max(e.column - 1, 0) if isinstance(e.column, int) else 0
        raise ScriptSyntaxError(_describe(e), line=line, column=column) from e


def parse_expression(source: str) -> Expr:
    """Parse a single expression, such as the inside of a template brace.

    Raises:
        ScriptSyntaxError: If the source is not exactly one expression.
    """
    return _parse(source, "single_expression")


def parse_statement(source: str) -> Statement:
    """Parse one ``let``/``var``/``const`` binding or a single expression.

    Used for silent template captures, which run for their effect on the
    template scope.

    Raises:
        ScriptSyntaxError: If the source is not exactly one statement.
    """
    return _parse(source, "silent_statement")


def parse_program(source: str) -> tuple[Statement, ...]:
    """Parse a library script into a sequence of statements.

    Raises:
        ScriptSyntaxError: If the source is not a valid program.
    """
    return _parse(source, "program")
