"""Wake phrase matching, silence detection and the listening state machine.

The assistant idles in ``WAITING`` and only transcribes chunks that carry
sound. Once an utterance like "hey Caldi" is heard it switches to
``LISTENING`` and buffers audio until a silent chunk follows some speech,
then hands the buffer over in ``TRANSCRIBING`` and returns to waiting.
"""

from __future__ import annotations

import logging
import math
import sys
from array import array
from collections.abc import Iterable
from enum import Enum

LOGGER = logging.getLogger("caldi-assistant.listener")

WAKE_GREETING = "hey"


class ListenState(Enum):
    WAITING = "waiting"
    LISTENING = "listening"
    TRANSCRIBING = "transcribing"


def compute_rms(chunk: bytes, sample_width: int) -> int:
    """Compute RMS (Root Mean Square) for a little-endian PCM chunk."""
    if not chunk or sample_width <= 0:
        return 0
    frames = len(chunk) // sample_width
    if frames <= 0:
        return 0
    trimmed = chunk[: frames * sample_width]
    typecode = {1: "b", 2: "h", 4: "i"}.get(sample_width)
    if typecode:
        samples = array(typecode)
        samples.frombytes(trimmed)
        if sample_width > 1 and sys.byteorder != "little":
            samples.byteswap()
        total = math.fsum(value * value for value in samples)
    else:
        total = 0.0
        for i in range(0, len(trimmed), sample_width):
            sample = int.from_bytes(trimmed[i : i + sample_width], "little", signed=True)
            total += sample * sample
    return int(math.sqrt(total / frames))


class WakePhrase:
    """Decides whether a transcript is the user calling the assistant."""

    def __init__(self, name: str, aliases: Iterable[str] = ()) -> None:
        self.name = name
        self.names = tuple(dict.fromkeys(n.strip().lower() for n in (name, *aliases) if n.strip()))

    def matches(self, text: str | None) -> bool:
        if not text:
            return False
        lowered = text.strip().lower()
        return lowered.startswith(WAKE_GREETING) and any(name in lowered for name in self.names)

    def __repr__(self) -> str:
        return f"WakePhrase({self.name!r})"


class ListenSession:
    """Tracks listen state and the audio captured for the current command."""

    def __init__(self, *, rms_floor: int, sample_width: int, max_command_bytes: int) -> None:
        self.rms_floor = rms_floor
        self.sample_width = sample_width
        self.max_command_bytes = max_command_bytes
        self.state = ListenState.WAITING
        self._buffer = bytearray()
        self._heard_speech = False

    def is_silent(self, chunk: bytes) -> bool:
        return compute_rms(chunk, self.sample_width) < self.rms_floor

    def start_listening(self) -> None:
        if self.state is not ListenState.WAITING:
            raise RuntimeError(f"Cannot start listening while {self.state.value}")
        self._reset_buffer()
        self._set_state(ListenState.LISTENING)

    def feed(self, chunk: bytes) -> ListenState:
        """Add a chunk captured while listening and return the resulting state."""
        if self.state is not ListenState.LISTENING:
            LOGGER.debug("Ignoring audio chunk while %s", self.state.value)
            return self.state

        self._buffer.extend(chunk)
        if self.is_silent(chunk):
            if self._heard_speech:
                LOGGER.info("Silence detected after speech; transcribing command")
                self._set_state(ListenState.TRANSCRIBING)
                return self.state
        else:
            self._heard_speech = True

        if len(self._buffer) >= self.max_command_bytes:
            if self._heard_speech:
                LOGGER.info("Command reached maximum length; transcribing")
                self._set_state(ListenState.TRANSCRIBING)
            else:
                LOGGER.info("No speech heard after wake phrase; going back to waiting")
                self.reset()
        return self.state

    def take_command_audio(self) -> bytes:
        """Hand over the buffered command audio and return to waiting."""
        if self.state is not ListenState.TRANSCRIBING:
            raise RuntimeError(f"No command audio available while {self.state.value}")
        audio = bytes(self._buffer)
        self.reset()
        return audio

    def reset(self) -> None:
        self._reset_buffer()
        self._set_state(ListenState.WAITING)

    def _reset_buffer(self) -> None:
        self._buffer.clear()
        self._heard_speech = False

    def _set_state(self, state: ListenState) -> None:
        if state is not self.state:
            LOGGER.debug("Listen state %s -> %s", self.state.value, state.value)
        self.state = state
