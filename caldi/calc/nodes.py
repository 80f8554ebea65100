"""Expression tree produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class UnOp(Enum):
    PLUS = "+"
    MINUS = "-"


class BinOp(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    OVER = "/"


@dataclass(frozen=True)
class IntegerLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatLiteral:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class UnaryExpr:
    op: UnOp
    operand: Expression

    def __str__(self) -> str:
        return f"({self.op.value}{self.operand})"


@dataclass(frozen=True)
class BinaryExpr:
    left: Expression
    op: BinOp
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


Expression = Union[IntegerLiteral, FloatLiteral, UnaryExpr, BinaryExpr]
