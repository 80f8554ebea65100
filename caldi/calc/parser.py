"""Precedence-climbing parser for calculator expressions.

Prefix ``+``/``-`` and the four infix operators share one loop: a primary
expression (literal or unary operator) is parsed first, then infix operators
are folded in for as long as they bind tighter than the current precedence
floor. Filler words and stray characters are skipped wherever an operand is
expected, so "hey caldi what is two plus two" parses like "2 + 2" once the
numbers are digits.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from caldi.calc.errors import UnexpectedEndError, UnexpectedTokenError
from caldi.calc.lexer import Token, TokenKind, tokenize
from caldi.calc.nodes import BinaryExpr, BinOp, Expression, FloatLiteral, IntegerLiteral, UnaryExpr, UnOp


class Precedence(IntEnum):
    NONE = 0
    SUM = 1
    PRODUCT = 2
    PREFIX = 3


_BINARY_OPS: dict[TokenKind, BinOp] = {
    TokenKind.PLUS: BinOp.PLUS,
    TokenKind.MINUS: BinOp.MINUS,
    TokenKind.TIMES: BinOp.TIMES,
    TokenKind.OVER: BinOp.OVER,
}

_UNARY_OPS: dict[TokenKind, UnOp] = {
    TokenKind.PLUS: UnOp.PLUS,
    TokenKind.MINUS: UnOp.MINUS,
}

_PRECEDENCE: dict[BinOp, Precedence] = {
    BinOp.PLUS: Precedence.SUM,
    BinOp.MINUS: Precedence.SUM,
    BinOp.TIMES: Precedence.PRODUCT,
    BinOp.OVER: Precedence.PRODUCT,
}

_SKIPPED = frozenset({TokenKind.IDENT, TokenKind.ILLEGAL})


class Parser:
    """Builds an expression tree from a token sequence ending in EOF."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("Token sequence must end with an EOF token")
        self.tokens = tokens
        self.position = 0

    @property
    def token(self) -> Token:
        return self.tokens[self.position]

    @property
    def peek_token(self) -> Token:
        # Never look past EOF.
        return self.tokens[min(self.position + 1, len(self.tokens) - 1)]

    def advance(self) -> None:
        if self.token.kind is not TokenKind.EOF:
            self.position += 1

    def parse(self) -> Expression:
        return self.parse_expr(Precedence.NONE)

    def parse_expr(self, min_precedence: Precedence) -> Expression:
        expr = self._parse_prefix()
        while True:
            op = _BINARY_OPS.get(self.peek_token.kind)
            if op is None or _PRECEDENCE[op] <= min_precedence:
                return expr
            self.advance()
            expr = self._parse_binary(expr, op)

    def _parse_prefix(self) -> Expression:
        # A prefix operand binds tighter than any infix operator, so a chain of
        # unary operators is collected here instead of recursing per operator.
        unary_ops: list[UnOp] = []
        while True:
            while self.token.kind in _SKIPPED:
                self.advance()
            op = _UNARY_OPS.get(self.token.kind)
            if op is None:
                break
            unary_ops.append(op)
            self.advance()

        expr = self._parse_literal()
        for op in reversed(unary_ops):
            expr = UnaryExpr(op, expr)
        return expr

    def _parse_literal(self) -> Expression:
        token = self.token
        if token.kind is TokenKind.INTEGER:
            try:
                return IntegerLiteral(int(token.text))
            except ValueError:
                # Beyond the interpreter's int/str conversion limit.
                return FloatLiteral(float(token.text))
        if token.kind is TokenKind.FLOAT:
            return FloatLiteral(float(token.text))
        if token.kind is TokenKind.EOF:
            raise UnexpectedEndError(token.start)
        raise UnexpectedTokenError(token.kind, token.start)

    def _parse_binary(self, left: Expression, op: BinOp) -> Expression:
        self.advance()
        return BinaryExpr(left, op, self.parse_expr(_PRECEDENCE[op]))


def parse(tokens: Sequence[Token]) -> Expression:
    """Parse a full token sequence into an expression tree."""
    return Parser(tokens).parse()


def parse_source(source: str) -> Expression:
    """Tokenize and parse a source line."""
    return parse(tokenize(source))
