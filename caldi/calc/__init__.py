"""Arithmetic expression engine.

Pipeline: tokenize -> parse -> evaluate, with render_error() turning parse
failures into a pointer diagram under the input line. Every stage is a
pure function of its input, so callers may share nothing and need no locking.
"""

from __future__ import annotations

from caldi.calc.errors import CalcError, UnexpectedEndError, UnexpectedTokenError, render_error
from caldi.calc.evaluator import Value, evaluate
from caldi.calc.lexer import Token, TokenKind, tokenize
from caldi.calc.parser import parse

__all__ = [
    "CalcError",
    "Token",
    "TokenKind",
    "UnexpectedEndError",
    "UnexpectedTokenError",
    "Value",
    "evaluate",
    "evaluate_source",
    "parse",
    "render_error",
    "tokenize",
]


def evaluate_source(text: str) -> Value:
    """Tokenize, parse and evaluate one line of input.

    Raises:
        CalcError: The line does not contain a well-formed expression.
    """
    return evaluate(parse(tokenize(text)))
