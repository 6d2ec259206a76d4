"""Telegram command and keyboard-button handlers for gate operations."""

from __future__ import annotations

import logging
from datetime import datetime

import pytz
from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from gate_engine.services.formatter import (
    format_assignments_report,
    format_gates_report,
    format_stats_report,
)
from gate_engine.utils.text import split_message

logger = logging.getLogger(__name__)

# ── Keyboard ──────────────────────────────────────────────────────────────────

BTN_STATS       = "📊 Stats"
BTN_ASSIGNMENTS = "🛬 Assignments"
BTN_GATES       = "🚪 Gates"

KEYBOARD = ReplyKeyboardMarkup(
    [[BTN_STATS, BTN_ASSIGNMENTS], [BTN_GATES]],
    resize_keyboard=True,
    one_time_keyboard=False,
)


# ── Command handlers ──────────────────────────────────────────────────────────

async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        "🛫 <b>Gate Allocation Engine</b>\n\n"
        "Live gate assignments and disruption alerts.\n"
        "Tap a button below to get started.",
        parse_mode="HTML",
        reply_markup=KEYBOARD,
    )


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        "🛫 <b>Gate Allocation — Help</b>\n\n"
        "/stats — gate and assignment counters\n"
        "/gates — registered gates by terminal\n"
        "/assignments [terminal] — live bookings, optionally for one terminal\n"
        "/help — this message",
        parse_mode="HTML",
        reply_markup=KEYBOARD,
    )


async def cmd_stats(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _reply(update, context, _stats_text)


async def cmd_gates(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _reply(update, context, _gates_text)


async def cmd_assignments(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    terminal = context.args[0] if context.args else None
    await _reply(update, context, lambda ctx: _assignments_text(ctx, terminal))


async def handle_button(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = (update.message.text or "").strip()
    if text == BTN_STATS:
        await cmd_stats(update, context)
    elif text == BTN_ASSIGNMENTS:
        await _reply(update, context, lambda ctx: _assignments_text(ctx, None))
    elif text == BTN_GATES:
        await cmd_gates(update, context)


# ── Internal helpers ──────────────────────────────────────────────────────────

def stats_report(context: ContextTypes.DEFAULT_TYPE) -> str:
    return _stats_text(context)


def _tz(context: ContextTypes.DEFAULT_TYPE) -> pytz.BaseTzInfo:
    return context.bot_data.get("tz") or pytz.utc


def _stats_text(context: ContextTypes.DEFAULT_TYPE) -> str:
    engine = context.bot_data["engine"]
    return format_stats_report(engine.stats(), datetime.now(tz=_tz(context)))


def _gates_text(context: ContextTypes.DEFAULT_TYPE) -> str:
    return format_gates_report(context.bot_data["engine"].get_gates())


def _assignments_text(context: ContextTypes.DEFAULT_TYPE, terminal: str | None) -> str:
    assignments = context.bot_data["engine"].get_assignments(terminal)
    return format_assignments_report(assignments, _tz(context), terminal)


async def _reply(update: Update, context: ContextTypes.DEFAULT_TYPE, render) -> None:
    if context.bot_data.get("engine") is None:
        await update.message.reply_text("⚠️ Engine not ready yet, please try again.")
        return
    try:
        text = render(context)
    except Exception:
        logger.exception("Report rendering failed")
        await update.message.reply_text(
            "❌ Could not build report. Please try again in a moment.",
            reply_markup=KEYBOARD,
        )
        return
    for chunk in split_message(text):
        await update.message.reply_text(chunk, parse_mode="HTML", reply_markup=KEYBOARD)
