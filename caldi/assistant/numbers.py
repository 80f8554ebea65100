"""Spoken-number normalization for transcripts.

Speech recognizers often spell numbers out ("twenty one plus three"). The
calculator only understands digits, so number words are folded into digit
strings before evaluation. Words that are not part of a number, including
the spoken operators, pass through untouched.
"""

from __future__ import annotations

import re

_UNITS = {
    "zero": 0,
    "oh": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}

_TENS = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}

_SCALES = {
    "thousand": 1_000,
    "million": 1_000_000,
    "billion": 1_000_000_000,
}

HUNDRED = "hundred"
AND = "and"
POINT = "point"

_DIGIT_WORDS = {word for word, value in _UNITS.items() if value < 10}
_CONNECTORS = frozenset({AND, POINT})

_SYMBOLS = str.maketrans({"×": "*", "÷": "/", "−": "-"})
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
_PIECES = re.compile(r"[A-Za-z]+(?:-[A-Za-z]+)*|[^A-Za-z]+")


def _can_follow(previous: list[str], word: str) -> bool:
    if POINT in previous:
        return word in _DIGIT_WORDS
    last = previous[-1] if previous else None
    # "oh" only counts as a digit after "point" ("two point oh five").
    if word == "oh":
        return False
    if word == POINT:
        return True
    if last is None:
        return word in _UNITS or word in _TENS or word == HUNDRED or word in _SCALES
    if last in _UNITS:
        return word == HUNDRED or word in _SCALES
    if last in _TENS:
        return (word in _UNITS and 0 < _UNITS[word] < 10) or word in _SCALES
    if last == HUNDRED:
        return word in _UNITS or word in _TENS or word == AND or word in _SCALES
    if last in _SCALES:
        return word in _UNITS or word in _TENS or word == AND
    if last == AND:
        return word in _UNITS or word in _TENS
    return False


def _collect_number(pieces: list[str], start: int) -> tuple[list[str], int]:
    """Gather the number words starting at ``pieces[start]``.

    Returns the accepted words and the index just past the last piece used.
    A trailing "and"/"point" is given back when nothing follows it.
    """
    words: list[str] = []
    committed = 0
    end = start
    index = start
    while index < len(pieces):
        if words:
            if not pieces[index].isspace() or index + 1 >= len(pieces):
                break
            index += 1
        accepted = list(words)
        for part in pieces[index].lower().split("-"):
            if not _can_follow(accepted, part):
                break
            accepted.append(part)
        else:
            words = accepted
            index += 1
            if words[-1] not in _CONNECTORS:
                committed = len(words)
                end = index
            continue
        break
    return words[:committed], end


def words_to_number(words: list[str]) -> str:
    """Convert a validated run of number words into a digit string."""
    total = 0
    current = 0
    decimals: list[str] | None = None
    for word in words:
        if decimals is not None:
            decimals.append(str(_UNITS[word]))
        elif word == POINT:
            decimals = []
        elif word == AND:
            continue
        elif word in _UNITS:
            current += _UNITS[word]
        elif word in _TENS:
            current += _TENS[word]
        elif word == HUNDRED:
            current = (current or 1) * 100
        else:
            total += (current or 1) * _SCALES[word]
            current = 0
    number = str(total + current)
    if decimals:
        number = f"{number}.{''.join(decimals)}"
    return number


def normalize_number_words(text: str) -> str:
    """Replace spelled-out numbers with digits and typographic operators with ASCII."""
    pieces = _PIECES.findall(text.translate(_SYMBOLS))
    output: list[str] = []
    index = 0
    while index < len(pieces):
        words, end = _collect_number(pieces, index)
        if words:
            output.append(words_to_number(words))
            index = end
        else:
            output.append(pieces[index])
            index += 1
    # Separators go last so "one,000" ends up as 1000 in a single pass.
    return _THOUSANDS_SEPARATOR.sub("", "".join(output))
