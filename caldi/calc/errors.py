"""Parse errors and their human readable rendering."""

from __future__ import annotations

from caldi.calc.lexer import TokenKind

ARROW = "^"


class CalcError(Exception):
    """Base class for errors raised while parsing an expression."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class UnexpectedTokenError(CalcError):
    """A token showed up where no expression can start or continue."""

    def __init__(self, kind: TokenKind, position: int) -> None:
        super().__init__(f"unexpected token {kind} at position {position}", position)
        self.kind = kind


class UnexpectedEndError(CalcError):
    """Input ran out while an operand was still required."""

    def __init__(self, position: int) -> None:
        super().__init__(f"unexpected end of expression encountered at position {position}", position)


def render_error(error: CalcError, source: str) -> str:
    """Draw the source line with an arrow under the offending position."""
    return f"{source}\n{' ' * error.position}{ARROW} {error}"
