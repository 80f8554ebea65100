"""Tests for caldi.assistant.config: environment parsing and helpers."""

from __future__ import annotations

from unittest.mock import patch

from caldi.assistant.config import (
    DEFAULT_ASSISTANT_NAME,
    DEFAULT_READY_PHRASE,
    AssistantConfig,
    MicConfig,
)

# ===================================================================
# MicConfig
# ===================================================================


class TestMicConfig:
    def test_bytes_per_chunk(self):
        mic = MicConfig(command=["arecord"], rate=16000, width=2, channels=1, chunk_ms=100)
        # 1600 frames * 2 bytes
        assert mic.bytes_per_chunk == 3200

    def test_bytes_per_second_stereo(self):
        mic = MicConfig(command=["arecord"], rate=16000, width=2, channels=2, chunk_ms=100)
        assert mic.bytes_per_second == 64000


# ===================================================================
# AssistantConfig.from_env
# ===================================================================


class TestFromEnvDefaults:
    def test_defaults(self):
        config = AssistantConfig.from_env({"CALDI_HOSTNAME": "desk"})

        assert config.hostname == "desk"
        assert config.assistant_name == DEFAULT_ASSISTANT_NAME
        assert config.ready_phrase == DEFAULT_READY_PHRASE
        assert config.wake_aliases == ()
        assert config.language == "en"
        assert config.mic.command == ["arecord", "-q", "-t", "raw", "-f", "S16_LE", "-c", "1", "-r", "16000", "-"]
        assert config.mic.rate == 16000
        assert config.mic.chunk_ms == 3000
        assert config.listen.rms_floor == 120
        assert config.listen.max_command_seconds == 15.0
        assert config.stt_endpoint.host == "127.0.0.1"
        assert config.stt_endpoint.port == 10300
        assert config.stt_endpoint.model is None
        assert config.tts_endpoint.port == 10200
        assert config.wyoming_timeout == 30.0
        assert config.speak_results is True
        assert config.audio_player is None
        assert config.mqtt.host is None
        assert config.mqtt.topic_base == "caldi/desk"

    def test_hostname_falls_back_to_socket(self):
        with patch("caldi.assistant.config.socket.gethostname", return_value="kitchen"):
            config = AssistantConfig.from_env({})
        assert config.hostname == "kitchen"
        assert config.state_topic == "caldi/kitchen/state"

    def test_reads_os_environ_when_env_missing(self, monkeypatch):
        monkeypatch.setenv("CALDI_HOSTNAME", "office")
        monkeypatch.setenv("CALDI_ASSISTANT_NAME", "Abacus")
        config = AssistantConfig.from_env()
        assert config.hostname == "office"
        assert config.assistant_name == "Abacus"


class TestFromEnvOverrides:
    def test_assistant_and_aliases(self, make_config):
        config = make_config(CALDI_ASSISTANT_NAME=" Abacus ", CALDI_WAKE_ALIASES="Calc, Calculator,")
        assert config.assistant_name == "Abacus"
        assert config.wake_aliases == ("calc", "calculator")

    def test_mic_settings(self, make_config):
        config = make_config(
            CALDI_MIC_CMD="parecord --raw --format=s16le",
            CALDI_MIC_RATE="48000",
            CALDI_MIC_CHANNELS="2",
            CALDI_MIC_CHUNK_MS="250",
        )
        assert config.mic.command == ["parecord", "--raw", "--format=s16le"]
        assert config.mic.rate == 48000
        assert config.mic.channels == 2
        assert config.mic.chunk_ms == 250

    def test_chunk_ms_has_floor(self, make_config):
        assert make_config(CALDI_MIC_CHUNK_MS="10").mic.chunk_ms == 100

    def test_listen_limits(self, make_config):
        config = make_config(CALDI_SILENCE_RMS="-5", CALDI_MAX_COMMAND_SECONDS="0.2")
        assert config.listen.rms_floor == 0
        assert config.listen.max_command_seconds == 1.0

    def test_invalid_numbers_fall_back(self, make_config):
        config = make_config(CALDI_SILENCE_RMS="loud", WYOMING_WHISPER_PORT="abc", CALDI_WYOMING_TIMEOUT="soon")
        assert config.listen.rms_floor == 120
        assert config.stt_endpoint.port == 10300
        assert config.wyoming_timeout == 30.0

    def test_wyoming_endpoints(self, make_config):
        config = make_config(
            WYOMING_WHISPER_HOST="stt.local",
            WYOMING_WHISPER_PORT="10301",
            CALDI_STT_MODEL="tiny-int8",
            WYOMING_PIPER_HOST="tts.local",
            WYOMING_PIPER_PORT="10201",
            CALDI_TTS_VOICE="en_US-amy-medium",
        )
        assert config.stt_endpoint.host == "stt.local"
        assert config.stt_endpoint.port == 10301
        assert config.stt_endpoint.model == "tiny-int8"
        assert config.tts_endpoint.host == "tts.local"
        assert config.tts_endpoint.port == 10201
        assert config.tts_voice == "en_US-amy-medium"

    def test_speech_settings(self, make_config):
        config = make_config(
            CALDI_LANGUAGE="",
            CALDI_READY_PHRASE="Go ahead",
            CALDI_SPEAK_RESULTS="false",
            CALDI_AUDIO_PLAYER="/usr/bin/paplay",
        )
        assert config.language is None
        assert config.ready_phrase == "Go ahead"
        assert config.speak_results is False
        assert config.audio_player == "/usr/bin/paplay"

    def test_mqtt_settings(self, make_config):
        config = make_config(
            MQTT_HOST="broker.local",
            MQTT_PORT="8883",
            MQTT_USERNAME="caldi",
            MQTT_PASSWORD="secret",
            MQTT_TLS_ENABLED="true",
            MQTT_CA_CERT="/etc/ca.pem",
            CALDI_TOPIC_BASE="home/calc/",
        )
        assert config.mqtt.host == "broker.local"
        assert config.mqtt.port == 8883
        assert config.mqtt.username == "caldi"
        assert config.mqtt.password == "secret"
        assert config.mqtt.tls_enabled is True
        assert config.mqtt.ca_cert == "/etc/ca.pem"
        assert config.mqtt.topic_base == "home/calc"

    def test_short_mqtt_credential_names(self, make_config):
        config = make_config(MQTT_USER="u", MQTT_PASS="p")
        assert config.mqtt.username == "u"
        assert config.mqtt.password == "p"


class TestTopicsAndOverrides:
    def test_topics(self, make_config):
        config = make_config()
        assert config.transcript_topic == "caldi/desk/transcript"
        assert config.result_topic == "caldi/desk/result"
        assert config.state_topic == "caldi/desk/state"

    def test_with_assistant_name(self, make_config):
        config = make_config()
        renamed = config.with_assistant_name("  Abacus ")
        assert renamed.assistant_name == "Abacus"
        assert config.assistant_name == DEFAULT_ASSISTANT_NAME

    def test_with_assistant_name_noop(self, make_config):
        config = make_config()
        assert config.with_assistant_name(None) is config
        assert config.with_assistant_name("") is config
        assert config.with_assistant_name(DEFAULT_ASSISTANT_NAME) is config
