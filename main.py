#!/usr/bin/env python3
"""Gate Allocation Engine — Entry point.

    python main.py demo    run the seeded console simulation (default)
    python main.py serve   serve the HTTP API (and the ops bot, if configured)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import pytz
from aiohttp import web

from gate_engine.api.server import create_app
from gate_engine.config import Settings, get_settings, setup_logging
from gate_engine.demo import run_demo, seed_gates
from gate_engine.services.engine import AllocationEngine
from gate_engine.services.feed import DisruptionFeed
from gate_engine.utils.cache import configure_cache

logger = logging.getLogger("gate_engine")


async def serve(settings: Settings) -> None:
    engine = AllocationEngine(settings.turnaround_buffer_minutes)
    for gate in seed_gates():
        engine.add_gate(gate)
    feed = DisruptionFeed()

    runner = web.AppRunner(create_app(engine, feed))
    await runner.setup()
    site = web.TCPSite(runner, settings.api_host, settings.api_port)
    await site.start()
    logger.info("Listening on %s:%d", settings.api_host, settings.api_port)

    bot_app = None
    relay: asyncio.Task | None = None
    if settings.bot_enabled:
        from gate_engine.bot import create_application
        from gate_engine.handlers.scheduler import forward_disruptions

        bot_app = create_application(settings, engine)
        await bot_app.initialize()
        await bot_app.start()
        await bot_app.updater.start_polling(drop_pending_updates=True)
        relay = asyncio.create_task(forward_disruptions(
            bot_app.bot, feed, settings.telegram_chat_id, pytz.timezone(settings.timezone),
        ))

    try:
        await asyncio.Event().wait()
    finally:
        feed.close()
        if relay is not None:
            await asyncio.gather(relay, return_exceptions=True)
        if bot_app is not None:
            await bot_app.updater.stop()
            await bot_app.stop()
            await bot_app.shutdown()
        await runner.cleanup()
        logger.info("Server stopped.")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Airport gate allocation engine")
    parser.add_argument("mode", nargs="?", default="demo", help="'demo' or 'serve'")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)
    configure_cache(settings.classification_cache_size)

    if args.mode == "demo":
        run_demo(settings.airport_iata, settings.turnaround_buffer_minutes)
    elif args.mode == "serve":
        try:
            asyncio.run(serve(settings))
        except KeyboardInterrupt:
            pass
    else:
        print(f"Unknown mode: '{args.mode}'. Use 'demo' or 'serve'.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
