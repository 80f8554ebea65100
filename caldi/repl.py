"""Line-oriented calculator loop."""

from __future__ import annotations

import logging
import math
from typing import TextIO

from caldi.calc import CalcError, Value, evaluate, render_error
from caldi.calc.parser import parse_source

LOGGER = logging.getLogger(__name__)

DEFAULT_PROMPT = "> "
EXIT_WORDS = frozenset({"exit", "quit"})


def approximate_int(value: int) -> tuple[float, int]:
    """Mantissa (six decimals, 1 <= m < 10) and exponent of ``abs(value)``.

    Used for ints too long for str().
    """
    magnitude = math.log10(abs(value))
    exponent = math.floor(magnitude)
    mantissa = round(10 ** (magnitude - exponent), 6)
    # Rounding can carry 9.9999996 up to 10.0.
    if mantissa >= 10:
        mantissa /= 10
        exponent += 1
    return mantissa, exponent


def format_value(value: Value) -> str:
    """Render a result for display; floats always keep a decimal point."""
    if isinstance(value, float):
        return repr(value)
    try:
        return str(value)
    except ValueError:
        mantissa, exponent = approximate_int(value)
        sign = "-" if value < 0 else ""
        return f"{sign}{mantissa:.6f}e+{exponent}"


def evaluate_line(line: str) -> str:
    """Evaluate one line, returning the formatted result or a rendered error."""
    try:
        expr = parse_source(line)
    except CalcError as exc:
        LOGGER.debug("Failed to parse %r: %s", line, exc)
        return render_error(exc, line)
    LOGGER.debug("Parsed %r", line)
    return format_value(evaluate(expr))


def run_repl(stdin: TextIO, stdout: TextIO, prompt: str = DEFAULT_PROMPT) -> int:
    """Read expressions until EOF or an exit word; return the number evaluated."""
    evaluated = 0
    while True:
        if prompt:
            stdout.write(prompt)
            stdout.flush()
        line = stdin.readline()
        if not line:
            break
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        if line.strip().lower() in EXIT_WORDS:
            break
        stdout.write(evaluate_line(line) + "\n")
        evaluated += 1
    return evaluated
