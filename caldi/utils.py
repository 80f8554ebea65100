"""
Small helpers shared by the Caldi assistant

- Environment values: parse_bool, parse_int, parse_float, split_csv and
  strip_or_none turn raw ``CALDI_*`` / ``MQTT_*`` strings into config fields,
  falling back to defaults instead of raising on bad input
- Wyoming I/O: await_with_timeout bounds each network round trip and
  chunk_bytes slices recorded commands into protocol-sized audio chunks
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from typing import Any, TypeVar

_N = TypeVar("_N", int, float)

TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Env-style flag; anything outside TRUE_WORDS is False."""
    if value is None:
        return default
    return value.strip().lower() in TRUE_WORDS


def _parse_number(value: str | None, default: _N, cast: Callable[[str], _N]) -> _N:
    if value is None:
        return default
    try:
        return cast(value.strip())
    except ValueError:
        return default


def parse_int(value: str | None, default: int) -> int:
    return _parse_number(value, default, int)


def parse_float(value: str | None, default: float) -> float:
    return _parse_number(value, default, float)


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated list, dropping blank entries."""
    return [item for item in (part.strip() for part in (value or "").split(",")) if item]


def strip_or_none(value: str | None) -> str | None:
    """Trim a string, collapsing empty results to None."""
    return (value or "").strip() or None


async def await_with_timeout(awaitable: Awaitable[Any], timeout: float | None) -> Any:
    """Await with an optional deadline (None waits forever)."""
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout)


def chunk_bytes(data: bytes, size: int) -> Iterator[bytes]:
    """Yield ``size``-byte slices of ``data``; the last one may be shorter."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    view = memoryview(data)
    for start in range(0, len(view), size):
        yield bytes(view[start : start + size])
