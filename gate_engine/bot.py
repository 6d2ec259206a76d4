"""Telegram Application factory for the ops bot."""

from __future__ import annotations

import logging

import pytz
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from gate_engine.config import Settings
from gate_engine.handlers.commands import (
    BTN_ASSIGNMENTS,
    BTN_GATES,
    BTN_STATS,
    cmd_assignments,
    cmd_gates,
    cmd_help,
    cmd_start,
    cmd_stats,
    handle_button,
)
from gate_engine.handlers.scheduler import scheduled_stats
from gate_engine.services.engine import AllocationEngine

logger = logging.getLogger(__name__)


def create_application(settings: Settings, engine: AllocationEngine) -> Application:
    app = Application.builder().token(settings.telegram_bot_token).build()

    app.bot_data["engine"] = engine
    app.bot_data["chat_id"] = settings.telegram_chat_id
    app.bot_data["tz"] = pytz.timezone(settings.timezone)

    # ── Commands ──────────────────────────────────────────────────────
    app.add_handler(CommandHandler("start",       cmd_start))
    app.add_handler(CommandHandler("help",        cmd_help))
    app.add_handler(CommandHandler("stats",       cmd_stats))
    app.add_handler(CommandHandler("gates",       cmd_gates))
    app.add_handler(CommandHandler("assignments", cmd_assignments))

    # ── Keyboard buttons ──────────────────────────────────────────────
    app.add_handler(
        MessageHandler(
            filters.TEXT & filters.Regex(f"^({BTN_STATS}|{BTN_ASSIGNMENTS}|{BTN_GATES})$"),
            handle_button,
        )
    )

    # ── Scheduled stats ───────────────────────────────────────────────
    if settings.stats_interval_hours > 0:
        app.job_queue.run_repeating(
            scheduled_stats,
            interval=settings.stats_interval_hours * 3600,
            first=60,
            name="stats_report",
        )
        logger.info("Stats report every %dh.", settings.stats_interval_hours)

    logger.info("Ops bot ready (chat_id=%s).", settings.telegram_chat_id)
    return app
