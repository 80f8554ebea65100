"""Wyoming protocol helpers for speech-to-text and text-to-speech."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from wyoming.asr import Transcribe, Transcript
from wyoming.audio import AudioChunk, AudioStart, AudioStop
from wyoming.client import AsyncTcpClient
from wyoming.event import Event
from wyoming.tts import Synthesize, SynthesizeVoice

from caldi.utils import await_with_timeout, chunk_bytes

from .audio import AplaySink
from .config import MicConfig, WyomingEndpoint

LoggerLike = logging.Logger | None

STT_CHUNK_MS = 100


async def transcribe_audio(
    audio_bytes: bytes,
    *,
    endpoint: WyomingEndpoint,
    mic: MicConfig,
    language: str | None = None,
    timeout: float | None = None,
    logger: LoggerLike = None,
) -> str | None:
    """Send PCM audio to a Wyoming STT endpoint and return the transcript text."""

    client = AsyncTcpClient(endpoint.host, endpoint.port)
    await await_with_timeout(client.connect(), timeout)
    try:
        events = [
            Transcribe(name=endpoint.model, language=language).event(),
            AudioStart(rate=mic.rate, width=mic.width, channels=mic.channels).event(),
        ]
        events.extend(
            AudioChunk(rate=mic.rate, width=mic.width, channels=mic.channels, audio=chunk).event()
            for chunk in chunk_bytes(audio_bytes, max(1, mic.bytes_per_second * STT_CHUNK_MS // 1000))
        )
        events.append(AudioStop().event())
        for event in events:
            await await_with_timeout(client.write_event(event), timeout)

        while True:
            event = await await_with_timeout(client.read_event(), timeout)
            if event is None:
                if logger:
                    logger.debug("Wyoming STT connection closed before transcript returned")
                return None
            if Transcript.is_type(event.type):
                return Transcript.from_event(event).text
    finally:
        await client.disconnect()


async def play_tts_stream(
    text: str,
    *,
    endpoint: WyomingEndpoint,
    sink: AplaySink,
    voice_name: str | None = None,
    timeout: float | None = None,
) -> int:
    """Synthesize ``text`` via Wyoming TTS, streaming audio into ``sink``.

    Returns the number of audio chunks played.
    """

    started = False
    chunks = 0
    try:
        async for event in _tts_event_stream(text, endpoint=endpoint, voice_name=voice_name, timeout=timeout):
            if AudioStart.is_type(event.type):
                audio_start = AudioStart.from_event(event)
                await sink.start(audio_start.rate, audio_start.width, audio_start.channels)
                started = True
            elif AudioChunk.is_type(event.type):
                chunk = AudioChunk.from_event(event)
                if not started:
                    await sink.start(chunk.rate, chunk.width, chunk.channels)
                    started = True
                await sink.write(chunk.audio)
                chunks += 1
            elif AudioStop.is_type(event.type):
                break
    finally:
        if started:
            await sink.stop()
    return chunks


async def _tts_event_stream(
    text: str,
    *,
    endpoint: WyomingEndpoint,
    voice_name: str | None = None,
    timeout: float | None = None,
) -> AsyncIterator[Event]:
    client = AsyncTcpClient(endpoint.host, endpoint.port)
    await await_with_timeout(client.connect(), timeout)
    voice = SynthesizeVoice(name=voice_name) if voice_name else None
    try:
        await await_with_timeout(client.write_event(Synthesize(text=text, voice=voice).event()), timeout)
        while True:
            event = await await_with_timeout(client.read_event(), timeout)
            if event is None:
                break
            yield event
            if AudioStop.is_type(event.type):
                break
    finally:
        await client.disconnect()
