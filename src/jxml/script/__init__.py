"""The JXML script language.

A deliberately small expression language used inside template braces and
in library scripts. It supports literals, names, calls, arithmetic, string
concatenation, comparisons, ``&&``/``||``/``!``, the ternary operator and
arrow functions, and nothing that reaches the host process. The grammar is
a ``lark`` LALR grammar; evaluation walks the frozen syntax tree.

Example:
    >>> from jxml.script import evaluate, new_environment, parse_expression
    >>> evaluate(parse_expression("'x' + (1 + 2)"), new_environment())
    'x3'
"""

from ._ast import Expr, Statement
from ._interpreter import (
    Environment,
    Function,
    Value,
    evaluate,
    execute,
    format_number,
    is_truthy,
    new_environment,
    run_program,
    stringify,
    to_number,
)
from ._parser import MAX_NESTING, parse_expression, parse_program, parse_statement

__all__ = [
    "MAX_NESTING",
    "Environment",
    "Expr",
    "Function",
    "Statement",
    "Value",
    "evaluate",
    "execute",
    "format_number",
    "is_truthy",
    "new_environment",
    "parse_expression",
    "parse_program",
    "parse_statement",
    "run_program",
    "stringify",
    "to_number",
]
