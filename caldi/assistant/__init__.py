"""
Voice front end for the Caldi calculator

This package wires the expression engine to a microphone and a speaker:

- Wake phrase: "hey <name>" heard while waiting starts a command
- Silence detection: RMS gating decides when speech has started and ended
- Speech recognition: Wyoming protocol (faster-whisper) for transcription
- Number normalization: "twenty one" becomes "21" before evaluation
- Speech synthesis: Wyoming Piper TTS reads the answer back
- Telemetry: transcripts, results and listen state over MQTT (optional)

Key modules:
- config: Configuration management from environment variables
- listener: Listen state machine and wake phrase matching
- pipeline: Microphone-to-answer orchestration
"""

from __future__ import annotations

__all__ = [
    "audio",
    "config",
    "listener",
    "mqtt",
    "numbers",
    "pipeline",
    "wyoming",
]
