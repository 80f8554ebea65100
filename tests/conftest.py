"""Shared test fixtures and configuration for the Caldi test suite.

This module provides reusable fixtures for common test scenarios including:
- Configuration objects built from a minimal environment
- MQTT client mocking
- PCM audio factories for silence/speech chunks
- Async test utilities
"""

from __future__ import annotations

import logging
import sys
from array import array
from typing import Any
from unittest.mock import AsyncMock, Mock

import paho.mqtt.client as mqtt
import pytest
from caldi.assistant.config import AssistantConfig, MicConfig, MqttConfig

# ============================================================================
# Pytest Configuration
# ============================================================================


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing.

    Returns a Mock with spec=logging.Logger to ensure only valid
    logger methods can be called.
    """
    return Mock(spec=logging.Logger)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def mic_config():
    """Standard 16kHz mono mic configuration with 100ms chunks."""
    return MicConfig(command=["arecord"], rate=16000, width=2, channels=1, chunk_ms=100)


@pytest.fixture
def make_config():
    """Factory fixture for AssistantConfig objects built from env overrides.

    Usage:
        config = make_config(CALDI_ASSISTANT_NAME="Abacus")
    """

    def _create_config(**overrides: Any) -> AssistantConfig:
        env = {
            "CALDI_HOSTNAME": "desk",
            "CALDI_MIC_CHUNK_MS": "100",
            "CALDI_MAX_COMMAND_SECONDS": "1",
        }
        env.update({key: str(value) for key, value in overrides.items()})
        return AssistantConfig.from_env(env)

    return _create_config


@pytest.fixture
def mqtt_config():
    """Create a basic MQTT configuration for testing."""
    return MqttConfig(
        host="localhost",
        port=1883,
        username=None,
        password=None,
        tls_enabled=False,
        cert=None,
        key=None,
        ca_cert=None,
        topic_base="caldi/desk",
    )


# ============================================================================
# MQTT Fixtures
# ============================================================================


@pytest.fixture
def mock_mqtt_client():
    """Create a mock paho MQTT client.

    Provides common MQTT client methods as mocks for testing
    MQTT interactions without a real broker.
    """
    client = Mock(spec=mqtt.Client)
    client.connect = Mock()
    client.disconnect = Mock()
    message_info = Mock(spec=mqtt.MQTTMessageInfo)
    message_info.rc = mqtt.MQTT_ERR_SUCCESS
    client.publish = Mock(return_value=message_info)
    client.loop_start = Mock()
    client.loop_stop = Mock()
    client.is_connected = Mock(return_value=True)
    return client


@pytest.fixture
def mock_assistant_mqtt():
    """Mock AssistantMqtt recording publish calls."""
    client = Mock()
    client.enabled = True
    client.is_connected = Mock(return_value=True)
    client.connect = Mock()
    client.disconnect = Mock()
    client.publish = Mock()
    client.publish_json = Mock()
    return client


# ============================================================================
# Audio Fixtures
# ============================================================================


@pytest.fixture
def make_pcm():
    """Factory for 16-bit little-endian PCM chunks alternating +/- amplitude.

    Usage:
        chunk = make_pcm(2000, frames=1600)  # 100ms of "speech" at 16kHz
    """

    def _make(amplitude: int, frames: int = 1600) -> bytes:
        samples = array("h", (amplitude if i % 2 == 0 else -amplitude for i in range(frames)))
        if sys.byteorder != "little":
            samples.byteswap()
        return samples.tobytes()

    return _make


@pytest.fixture
def silent_chunk(make_pcm):
    return make_pcm(0)


@pytest.fixture
def speech_chunk(make_pcm):
    return make_pcm(2000)


@pytest.fixture
def mock_mic():
    """Mock ArecordStream with async start/read_chunk/stop."""
    mic = AsyncMock()
    mic.start = AsyncMock()
    mic.stop = AsyncMock()
    mic.read_chunk = AsyncMock()
    return mic


@pytest.fixture
def mock_sink():
    """Mock AplaySink with async start/write/stop."""
    sink = AsyncMock()
    sink.start = AsyncMock()
    sink.write = AsyncMock()
    sink.stop = AsyncMock()
    return sink
