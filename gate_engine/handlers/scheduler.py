"""Background jobs: scheduled stats report and live disruption alerts."""

from __future__ import annotations

import logging
from datetime import tzinfo

import pytz
from telegram import Bot
from telegram.ext import ContextTypes

from gate_engine.handlers.commands import stats_report
from gate_engine.services.feed import DisruptionFeed
from gate_engine.services.formatter import format_disruption_notice
from gate_engine.utils.text import split_message

logger = logging.getLogger(__name__)


async def scheduled_stats(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Post the stats report to the ops chat on a repeating timer."""
    engine = context.bot_data.get("engine")
    chat_id = context.bot_data.get("chat_id")
    if engine is None or chat_id is None:
        logger.error("Scheduled stats: engine or chat_id missing from bot_data")
        return
    try:
        for chunk in split_message(stats_report(context)):
            await context.bot.send_message(chat_id=chat_id, text=chunk, parse_mode="HTML")
        logger.info("Scheduled stats sent to chat_id=%s", chat_id)
    except Exception:
        logger.exception("Scheduled stats failed")


async def forward_disruptions(
    bot: Bot,
    feed: DisruptionFeed,
    chat_id: str,
    tz: tzinfo = pytz.utc,
) -> None:
    """Relay every published disruption to the ops chat until the feed closes."""
    async for event in feed.subscribe():
        try:
            await bot.send_message(
                chat_id=chat_id,
                text=format_disruption_notice(event, tz),
                parse_mode="HTML",
            )
        except Exception:
            logger.exception("Disruption alert for %s failed", event.event_id)
    logger.info("Disruption feed closed, alert relay stopped")
