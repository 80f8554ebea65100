"""Voice pipeline: microphone chunks in, spoken answers out."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from caldi.calc import CalcError, Value, evaluate_source, render_error
from caldi.repl import approximate_int, format_value

from .listener import ListenSession, ListenState, WakePhrase
from .numbers import normalize_number_words
from .wyoming import play_tts_stream, transcribe_audio

if TYPE_CHECKING:
    from .audio import AplaySink, ArecordStream
    from .config import AssistantConfig
    from .mqtt import AssistantMqtt

LOGGER = logging.getLogger("caldi-assistant")

ERROR_REPLY = "Sorry, I couldn't work that out."


@dataclass(frozen=True)
class CalculationOutcome:
    transcript: str
    expression: str
    value: Value | None = None
    error: CalcError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_payload(self) -> dict[str, object]:
        return {
            "transcript": self.transcript,
            "expression": self.expression,
            "result": format_value(self.value) if self.value is not None else None,
            "error": str(self.error) if self.error else None,
        }


def describe_value(value: Value) -> str:
    """Phrase a result so a TTS voice reads it naturally.

    Only fixed-point digits reach the voice: no exponent notation, and the
    sign becomes a leading "minus".
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "not a number"
        if math.isinf(value):
            return "infinity" if value > 0 else "negative infinity"
        if value.is_integer():
            return describe_value(int(value))
        text = f"{abs(value):.6f}".rstrip("0").rstrip(".")
        if text == "0":
            mantissa, exponent = f"{abs(value):.5e}".split("e")
            text = f"{mantissa.rstrip('0').rstrip('.')} times ten to the power of minus {-int(exponent)}"
    else:
        try:
            text = str(abs(value))
        except ValueError:
            mantissa, exponent = approximate_int(value)
            text = f"about {mantissa:g} times ten to the power of {exponent}"
    return f"minus {text}" if value < 0 else text


def calculate_transcript(transcript: str) -> CalculationOutcome:
    """Normalize spoken numbers in ``transcript`` and evaluate it."""
    expression = normalize_number_words(transcript)
    try:
        value = evaluate_source(expression)
    except CalcError as exc:
        return CalculationOutcome(transcript=transcript, expression=expression, error=exc)
    return CalculationOutcome(transcript=transcript, expression=expression, value=value)


class CalculatorPipeline:
    """Runs the listen state machine over microphone audio."""

    def __init__(
        self,
        config: AssistantConfig,
        *,
        mic: ArecordStream,
        player: AplaySink,
        mqtt: AssistantMqtt | None = None,
    ) -> None:
        self.config = config
        self.mic = mic
        self.player = player
        self.mqtt = mqtt
        self.wake_phrase = WakePhrase(config.assistant_name, config.wake_aliases)
        max_command_bytes = int(config.mic.bytes_per_second * config.listen.max_command_seconds)
        self.session = ListenSession(
            rms_floor=config.listen.rms_floor,
            sample_width=config.mic.width,
            max_command_bytes=max(1, max_command_bytes),
        )
        self._running = False

    async def run(self) -> None:
        if self.mqtt:
            self.mqtt.connect()
        self._running = True
        await self.mic.start()
        LOGGER.info("Caldi ready; say \"hey %s\" followed by a math problem", self.config.assistant_name)
        self._publish_state()
        try:
            while self._running:
                chunk = await self.mic.read_chunk()
                await self.process_chunk(chunk)
        finally:
            await self.mic.stop()

    async def shutdown(self) -> None:
        self._running = False
        await self.mic.stop()
        await self.player.stop()
        if self.mqtt:
            self.mqtt.disconnect()

    async def process_chunk(self, chunk: bytes) -> CalculationOutcome | None:
        """Advance the state machine with one chunk; returns an outcome once a command is handled."""
        state = self.session.state
        if state is ListenState.WAITING:
            await self._check_wake(chunk)
            return None
        if state is ListenState.LISTENING and self.session.feed(chunk) is ListenState.LISTENING:
            return None
        self._publish_state()
        if self.session.state is not ListenState.TRANSCRIBING:
            return None

        audio = self.session.take_command_audio()
        await self.mic.stop()
        try:
            transcript = await self._transcribe(audio)
            if not transcript:
                LOGGER.info("No transcript for command audio")
                return None
            return await self.handle_transcript(transcript)
        finally:
            self._publish_state()
            if self._running:
                await self.mic.start()

    async def handle_transcript(self, transcript: str) -> CalculationOutcome:
        LOGGER.info("Transcript: %s", transcript)
        outcome = calculate_transcript(transcript)
        if outcome.ok:
            LOGGER.info("Result: %s = %s", outcome.expression, format_value(outcome.value))
            reply = f"{transcript.strip().rstrip('?.!')} is {describe_value(outcome.value)}"
        else:
            LOGGER.warning("Could not evaluate transcript:\n%s", render_error(outcome.error, outcome.expression))
            reply = ERROR_REPLY
        if self._telemetry_ready():
            self.mqtt.publish(self.config.transcript_topic, transcript)
            self.mqtt.publish_json(self.config.result_topic, outcome.as_payload())
        if self.config.speak_results:
            await self._speak(reply)
        return outcome

    async def _check_wake(self, chunk: bytes) -> None:
        if self.session.is_silent(chunk):
            LOGGER.debug("Silence detected, still waiting")
            return
        text = await self._transcribe(chunk)
        LOGGER.debug("Heard while waiting: %s", text)
        if not self.wake_phrase.matches(text):
            return
        LOGGER.info("Wake phrase detected (%s); recording command", text)
        await self.mic.stop()
        try:
            await self._speak(self.config.ready_phrase)
        finally:
            self.session.start_listening()
            self._publish_state()
            if self._running:
                await self.mic.start()

    async def _transcribe(self, audio: bytes) -> str | None:
        try:
            text = await transcribe_audio(
                audio,
                endpoint=self.config.stt_endpoint,
                mic=self.config.mic,
                language=self.config.language,
                timeout=self.config.wyoming_timeout,
                logger=LOGGER,
            )
        except (OSError, TimeoutError) as exc:
            LOGGER.warning("Speech-to-text failed: %s", exc)
            return None
        return text.strip() if text else None

    async def _speak(self, text: str) -> None:
        try:
            await play_tts_stream(
                text,
                endpoint=self.config.tts_endpoint,
                sink=self.player,
                voice_name=self.config.tts_voice,
                timeout=self.config.wyoming_timeout,
            )
        except (OSError, RuntimeError, TimeoutError) as exc:
            LOGGER.warning("Text-to-speech failed: %s", exc)

    def _telemetry_ready(self) -> bool:
        if not self.mqtt or not self.mqtt.enabled:
            return False
        if not self.mqtt.is_connected():
            LOGGER.debug("MQTT broker not connected; skipping telemetry")
            return False
        return True

    def _publish_state(self) -> None:
        if self._telemetry_ready():
            self.mqtt.publish(self.config.state_topic, self.session.state.value, retain=True)
