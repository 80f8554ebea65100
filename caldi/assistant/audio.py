"""Microphone capture and speech playback through ALSA/PipeWire command-line tools."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
from asyncio.subprocess import Process

PLAYER_CANDIDATES = ("pw-play", "paplay", "aplay")

_ALSA_FORMATS = {1: "U8", 2: "S16_LE", 3: "S24_LE", 4: "S32_LE"}
_PW_FORMATS = {1: "s8", 2: "s16", 4: "s32"}
_PA_FORMATS = {1: "s8", 2: "s16le", 3: "s24le", 4: "s32le"}


class ArecordStream:
    """Read fixed-size PCM chunks from a capture command such as ``arecord``."""

    def __init__(
        self,
        command: list[str],
        bytes_per_chunk: int,
        logger: logging.Logger | None = None,
    ) -> None:
        self.command = command
        self.bytes_per_chunk = bytes_per_chunk
        self._proc: Process | None = None
        self._logger = logger or logging.getLogger(__name__)

    @property
    def running(self) -> bool:
        return self._proc is not None

    async def start(self) -> None:
        if self._proc:
            return
        self._logger.debug("Starting microphone capture: %s", " ".join(self.command))
        self._proc = await asyncio.create_subprocess_exec(
            *self.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    async def read_chunk(self) -> bytes:
        if not self._proc or not self._proc.stdout:
            raise RuntimeError("Microphone stream is not running")
        try:
            return await self._proc.stdout.readexactly(self.bytes_per_chunk)
        except asyncio.IncompleteReadError as exc:
            stderr = await _read_stderr(self._proc)
            message = "Microphone stream ended unexpectedly"
            if stderr:
                message = f"{message} ({stderr})"
            raise RuntimeError(message) from exc

    async def stop(self) -> None:
        if not self._proc:
            return
        self._logger.debug("Stopping microphone capture")
        proc = self._proc
        self._proc = None
        with contextlib.suppress(ProcessLookupError):
            proc.terminate()
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(proc.wait(), timeout=2)


class AplaySink:
    """Stream raw PCM into ``pw-play``, ``paplay`` or ``aplay``."""

    def __init__(self, binary: str | None = None, logger: logging.Logger | None = None) -> None:
        self.binary = binary or "auto"
        self._proc: Process | None = None
        self._logger = logger or logging.getLogger(__name__)

    async def start(self, rate: int, width: int, channels: int) -> None:
        await self.stop()
        player = resolve_player(self.binary, self._logger)
        try:
            cmd = build_player_command(player, rate, width, channels)
        except ValueError as exc:
            self._logger.warning("Player %s cannot handle width=%s (%s); falling back to aplay", player, width, exc)
            cmd = build_player_command("aplay", rate, width, channels)
        self._logger.debug("Starting playback: %s", " ".join(cmd))
        self._proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )

    async def write(self, chunk: bytes) -> None:
        if not self._proc or not self._proc.stdin:
            raise RuntimeError("Playback is not active")
        try:
            self._proc.stdin.write(chunk)
            await self._proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            stderr = await _read_stderr(self._proc, timeout=0.05)
            await self.stop()
            detail = f" ({stderr})" if stderr else ""
            raise RuntimeError(f"Playback process exited unexpectedly{detail}") from exc

    async def stop(self) -> None:
        if not self._proc:
            return
        self._logger.debug("Stopping playback")
        proc = self._proc
        self._proc = None
        if proc.stdin:
            proc.stdin.close()
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                await proc.stdin.wait_closed()
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(proc.wait(), timeout=2)


def build_player_command(player: str, rate: int, width: int, channels: int) -> list[str]:
    """Command line for streaming raw PCM from stdin into ``player``."""
    name = os.path.basename(player)
    if name == "pw-play":
        fmt = _PW_FORMATS.get(width)
        if not fmt:
            raise ValueError(f"pw-play has no format for width={width}")
        return [player, "--raw", "--rate", str(rate), "--channels", str(channels), "--format", fmt, "-"]
    if name == "paplay":
        fmt = _PA_FORMATS.get(width, "s16le")
        return [player, "--raw", "--rate", str(rate), "--channels", str(channels), f"--format={fmt}", "-"]
    fmt = _ALSA_FORMATS.get(width, "S16_LE")
    return [player, "-q", "-t", "raw", "-f", fmt, "-c", str(channels), "-r", str(rate), "-"]


def player_available(binary: str) -> bool:
    if os.path.isabs(binary):
        return os.access(binary, os.X_OK)
    return shutil.which(binary) is not None


def resolve_player(preferred: str, logger: logging.Logger) -> str:
    """Pick the requested player when installed, else the first available candidate."""
    if preferred != "auto":
        if player_available(preferred):
            return preferred
        logger.warning("Requested audio player '%s' not found; falling back to auto-detection", preferred)
    for candidate in PLAYER_CANDIDATES:
        if player_available(candidate):
            return candidate
    return "aplay"


async def _read_stderr(proc: Process, timeout: float = 1.0) -> str:
    if not proc.stderr:
        return ""
    try:
        data = await asyncio.wait_for(proc.stderr.read(), timeout=timeout)
    except (TimeoutError, RuntimeError):
        return ""
    return data.decode("utf-8", errors="ignore").strip()
