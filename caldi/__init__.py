"""
Caldi - voice-driven arithmetic calculator

Caldi listens for "hey Caldi", transcribes the math problem that follows and
speaks the answer back. The same expression engine also backs a plain
line-oriented REPL.

Core modules:
- calc: Tokenizer, precedence-climbing parser, evaluator and error renderer
- repl: Interactive line loop and result formatting
- assistant: Microphone capture, silence detection, wake phrase handling,
  Wyoming STT/TTS and MQTT telemetry around the calculator
- utils: Environment parsing and byte/async helpers
"""

__version__ = "0.4.2"
