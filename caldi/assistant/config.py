"""Configuration helpers for the Caldi voice calculator."""

from __future__ import annotations

import os
import shlex
import socket
from dataclasses import dataclass, replace

from caldi.utils import parse_bool, parse_float, parse_int, split_csv, strip_or_none

DEFAULT_ASSISTANT_NAME = "Caldi"
DEFAULT_READY_PHRASE = "Ready!"
DEFAULT_MIC_COMMAND = "arecord -q -t raw -f S16_LE -c 1 -r 16000 -"


@dataclass(frozen=True)
class WyomingEndpoint:
    host: str
    port: int
    model: str | None = None


@dataclass(frozen=True)
class MicConfig:
    command: list[str]
    rate: int
    width: int
    channels: int
    chunk_ms: int

    @property
    def bytes_per_chunk(self) -> int:
        samples = int(self.rate * (self.chunk_ms / 1000))
        return samples * self.width * self.channels

    @property
    def bytes_per_second(self) -> int:
        return self.rate * self.width * self.channels


@dataclass(frozen=True)
class ListenConfig:
    rms_floor: int
    max_command_seconds: float


@dataclass(frozen=True)
class MqttConfig:
    host: str | None
    port: int
    username: str | None
    password: str | None
    tls_enabled: bool
    cert: str | None
    key: str | None
    ca_cert: str | None
    topic_base: str


@dataclass(frozen=True)
class AssistantConfig:
    hostname: str
    assistant_name: str
    wake_aliases: tuple[str, ...]
    language: str | None
    ready_phrase: str
    mic: MicConfig
    listen: ListenConfig
    stt_endpoint: WyomingEndpoint
    tts_endpoint: WyomingEndpoint
    tts_voice: str | None
    wyoming_timeout: float
    speak_results: bool
    audio_player: str | None
    mqtt: MqttConfig

    @property
    def transcript_topic(self) -> str:
        return f"{self.mqtt.topic_base}/transcript"

    @property
    def result_topic(self) -> str:
        return f"{self.mqtt.topic_base}/result"

    @property
    def state_topic(self) -> str:
        return f"{self.mqtt.topic_base}/state"

    def with_assistant_name(self, name: str | None) -> AssistantConfig:
        """Return a copy answering to ``name`` (command-line override)."""
        cleaned = strip_or_none(name)
        if not cleaned or cleaned == self.assistant_name:
            return self
        return replace(self, assistant_name=cleaned)

    @staticmethod
    def from_env(env: dict[str, str] | None = None) -> AssistantConfig:
        source = env if env is not None else os.environ
        hostname = source.get("CALDI_HOSTNAME") or socket.gethostname()
        assistant_name = strip_or_none(source.get("CALDI_ASSISTANT_NAME")) or DEFAULT_ASSISTANT_NAME
        wake_aliases = tuple(alias.lower() for alias in split_csv(source.get("CALDI_WAKE_ALIASES")))

        mic = MicConfig(
            command=shlex.split(source.get("CALDI_MIC_CMD", DEFAULT_MIC_COMMAND)),
            rate=parse_int(source.get("CALDI_MIC_RATE"), 16000),
            width=parse_int(source.get("CALDI_MIC_WIDTH"), 2),
            channels=parse_int(source.get("CALDI_MIC_CHANNELS"), 1),
            chunk_ms=max(100, parse_int(source.get("CALDI_MIC_CHUNK_MS"), 3000)),
        )

        listen = ListenConfig(
            rms_floor=max(0, parse_int(source.get("CALDI_SILENCE_RMS"), 120)),
            max_command_seconds=max(1.0, parse_float(source.get("CALDI_MAX_COMMAND_SECONDS"), 15.0)),
        )

        stt_endpoint = WyomingEndpoint(
            host=source.get("WYOMING_WHISPER_HOST", "127.0.0.1"),
            port=parse_int(source.get("WYOMING_WHISPER_PORT"), 10300),
            model=strip_or_none(source.get("CALDI_STT_MODEL")),
        )
        tts_endpoint = WyomingEndpoint(
            host=source.get("WYOMING_PIPER_HOST", "127.0.0.1"),
            port=parse_int(source.get("WYOMING_PIPER_PORT"), 10200),
            model=None,
        )

        topic_base = source.get("CALDI_TOPIC_BASE") or f"caldi/{hostname}"
        mqtt = MqttConfig(
            host=strip_or_none(source.get("MQTT_HOST")),
            port=parse_int(source.get("MQTT_PORT"), 1883),
            username=strip_or_none(source.get("MQTT_USER") or source.get("MQTT_USERNAME")),
            password=strip_or_none(source.get("MQTT_PASS") or source.get("MQTT_PASSWORD")),
            tls_enabled=parse_bool(source.get("MQTT_TLS_ENABLED"), False),
            cert=strip_or_none(source.get("MQTT_CERT")),
            key=strip_or_none(source.get("MQTT_KEY")),
            ca_cert=strip_or_none(source.get("MQTT_CA_CERT")),
            topic_base=topic_base.rstrip("/"),
        )

        return AssistantConfig(
            hostname=hostname,
            assistant_name=assistant_name,
            wake_aliases=wake_aliases,
            language=strip_or_none(source.get("CALDI_LANGUAGE", "en")),
            ready_phrase=strip_or_none(source.get("CALDI_READY_PHRASE")) or DEFAULT_READY_PHRASE,
            mic=mic,
            listen=listen,
            stt_endpoint=stt_endpoint,
            tts_endpoint=tts_endpoint,
            tts_voice=strip_or_none(source.get("CALDI_TTS_VOICE")),
            wyoming_timeout=max(1.0, parse_float(source.get("CALDI_WYOMING_TIMEOUT"), 30.0)),
            speak_results=parse_bool(source.get("CALDI_SPEAK_RESULTS"), True),
            audio_player=strip_or_none(source.get("CALDI_AUDIO_PLAYER")),
            mqtt=mqtt,
        )
