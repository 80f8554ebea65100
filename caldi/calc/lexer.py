"""Tokenizer for calculator expressions.

Turns a line of typed or transcribed text into positioned tokens. Operators
may be symbols (``+ - * /``) or spoken phrases ("plus", "multiplied by", ...).
Words that are not operators become ``IDENT`` tokens and anything else that
is not recognized becomes ``ILLEGAL``; tokenizing never fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_WHITESPACE = frozenset(" \t\n\r\x0b\x0c")
_DIGITS = frozenset("0123456789")


class TokenKind(Enum):
    IDENT = "Ident"
    INTEGER = "Integer"
    FLOAT = "Float"
    PLUS = "Plus"
    MINUS = "Minus"
    TIMES = "Times"
    OVER = "Over"
    EOF = "Eof"
    ILLEGAL = "Illegal"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A lexeme and where it starts.

    ``start`` counts characters (code points), not UTF-8 bytes, so an error
    arrow rendered under the source lines up even after non-ASCII text.
    """

    kind: TokenKind
    text: str
    start: int


# Ordered longest phrase first; multi-word phrases only match a whole word run.
PHRASES: tuple[tuple[str, TokenKind], ...] = (
    ("multiplied by", TokenKind.TIMES),
    ("divided by", TokenKind.OVER),
    ("negative", TokenKind.MINUS),
    ("minus", TokenKind.MINUS),
    ("times", TokenKind.TIMES),
    ("plus", TokenKind.PLUS),
    ("over", TokenKind.OVER),
    ("x", TokenKind.TIMES),
)

_WORDS: dict[str, TokenKind] = {phrase: kind for phrase, kind in PHRASES if " " not in phrase}

_SYMBOLS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.TIMES,
    "/": TokenKind.OVER,
}


def match_phrase(text: str) -> TokenKind | None:
    """Return the operator kind for a whole phrase, or None when it is not one."""
    normalized = " ".join(text.lower().split())
    for phrase, kind in PHRASES:
        if normalized == phrase:
            return kind
    return None


class Lexer:
    """Single-pass scanner over one input line."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        while not self.tokens or self.tokens[-1].kind is not TokenKind.EOF:
            self._next_token()
        return self.tokens

    def _char(self, offset: int = 0) -> str:
        index = self.position + offset
        if index < len(self.source):
            return self.source[index]
        return ""

    def _emit(self, kind: TokenKind, start: int, end: int) -> None:
        self.tokens.append(Token(kind, self.source[start:end], start))

    def _next_token(self) -> None:
        while self._char() in _WHITESPACE:
            self.position += 1

        char = self._char()
        start = self.position
        if not char:
            self._emit(TokenKind.EOF, start, start)
            return

        if char in _SYMBOLS:
            self.position += 1
            self._emit(_SYMBOLS[char], start, self.position)
        elif char in _DIGITS:
            self._read_number()
        elif char.isalpha():
            self._read_words()
        else:
            self.position += 1
            self._emit(TokenKind.ILLEGAL, start, self.position)

    def _read_number(self) -> None:
        start = self.position
        while self._char() in _DIGITS:
            self.position += 1
        kind = TokenKind.INTEGER
        if self._char() == "." and self._char(1) in _DIGITS:
            kind = TokenKind.FLOAT
            self.position += 1
            while self._char() in _DIGITS:
                self.position += 1
        self._emit(kind, start, self.position)

    def _read_words(self) -> None:
        start = self.position
        while self._char() and (self._char().isalpha() or self._char() == " "):
            self.position += 1
        run = self.source[start : self.position].rstrip(" ")
        end = start + len(run)

        kind = match_phrase(run)
        if kind is not None:
            self._emit(kind, start, end)
            return

        offset = start
        for word in run.split(" "):
            if word:
                self._emit(_WORDS.get(word.lower(), TokenKind.IDENT), offset, offset + len(word))
            offset += len(word) + 1


def tokenize(source: str) -> list[Token]:
    """Scan ``source`` into tokens terminated by a single EOF token."""
    return Lexer(source).tokenize()
