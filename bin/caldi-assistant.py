#!/usr/bin/env python3
"""Caldi voice calculator daemon."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal

from caldi.assistant.audio import AplaySink, ArecordStream
from caldi.assistant.config import AssistantConfig
from caldi.assistant.mqtt import AssistantMqtt
from caldi.assistant.pipeline import CalculatorPipeline

LOGGER = logging.getLogger("caldi-assistant")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Listen for 'hey <name>' and answer spoken math problems.")
    parser.add_argument("assistant_name", nargs="?", default=None, help="Name to answer to (default: Caldi)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    config = AssistantConfig.from_env().with_assistant_name(args.assistant_name)
    pipeline = CalculatorPipeline(
        config,
        mic=ArecordStream(config.mic.command, config.mic.bytes_per_chunk, LOGGER),
        player=AplaySink(config.audio_player, logger=LOGGER),
        mqtt=AssistantMqtt(config.mqtt, logger=LOGGER),
    )

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _handle_signal(signum: int) -> None:
        LOGGER.info("Received signal %s, shutting down", signum)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _handle_signal, sig)

    run_task = asyncio.create_task(pipeline.run())
    stop_task = asyncio.create_task(stop_event.wait())
    done, _ = await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
    stop_task.cancel()
    if run_task in done:
        if exc := run_task.exception():
            LOGGER.error("Voice pipeline stopped: %s", exc, exc_info=exc)
    else:
        run_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await run_task
    await pipeline.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
