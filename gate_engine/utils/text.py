"""Text helpers shared by the formatter and the bot handlers."""

from __future__ import annotations

import html

TELEGRAM_LIMIT = 4_000


def escape(value: object) -> str:
    """HTML-escape a dynamic value before embedding in a Telegram HTML message."""
    return html.escape(str(value))


def split_message(text: str, limit: int = TELEGRAM_LIMIT) -> list[str]:
    """Split *text* into chunks of at most *limit* chars, preferring line breaks."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current or not chunks:
        chunks.append(current)
    return chunks
