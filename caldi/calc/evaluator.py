"""Evaluate calculator expression trees.

Values are plain ``int`` or ``float``. Integer arithmetic stays integral
until a float operand shows up; division always produces a float. Nothing
here raises for a well-formed tree: dividing by zero and overflowing a
float give IEEE-754 infinities or NaN.
"""

from __future__ import annotations

import math

from caldi.calc.nodes import BinaryExpr, BinOp, Expression, FloatLiteral, IntegerLiteral, UnaryExpr, UnOp

Value = int | float


def to_float(value: Value) -> float:
    """Convert a value to float, saturating integers too large to represent."""
    try:
        return float(value)
    except OverflowError:
        return math.copysign(math.inf, value)


def divide(left: Value, right: Value) -> float:
    """IEEE-754 division of two values coerced to float."""
    numerator = to_float(left)
    denominator = to_float(right)
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def apply_unary(op: UnOp, value: Value) -> Value:
    if op is UnOp.MINUS:
        return -value
    return value


def apply_binary(op: BinOp, left: Value, right: Value) -> Value:
    if op is BinOp.OVER:
        return divide(left, right)
    if isinstance(left, float) or isinstance(right, float):
        left = to_float(left)
        right = to_float(right)
    if op is BinOp.PLUS:
        return left + right
    if op is BinOp.MINUS:
        return left - right
    return left * right


def evaluate(expr: Expression) -> Value:
    """Compute the value of an expression tree, left operand first."""
    # Explicit stack: long operator chains produce deep left-leaning trees.
    pending: list[tuple[Expression, bool]] = [(expr, False)]
    values: list[Value] = []
    while pending:
        node, operands_done = pending.pop()
        if isinstance(node, (IntegerLiteral, FloatLiteral)):
            values.append(node.value)
        elif isinstance(node, UnaryExpr):
            if operands_done:
                values.append(apply_unary(node.op, values.pop()))
            else:
                pending.append((node, True))
                pending.append((node.operand, False))
        elif isinstance(node, BinaryExpr):
            if operands_done:
                right = values.pop()
                left = values.pop()
                values.append(apply_binary(node.op, left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise TypeError(f"Unsupported expression node: {type(node).__name__}")
    return values.pop()
