"""Shared aiohttp client session with retry on transient network errors."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

_session: aiohttp.ClientSession | None = None

MAX_RETRIES = 3
RETRY_BACKOFF = 2.0
_TIMEOUT = aiohttp.ClientTimeout(total=30, connect=10)
_HEADERS = {"User-Agent": "gate-engine-client/1.0"}
# Only these are safe to resend after the server may already have acted
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD"})


async def get_session() -> aiohttp.ClientSession:
    global _session
    if _session is None or _session.closed:
        _session = aiohttp.ClientSession(timeout=_TIMEOUT, headers=_HEADERS)
    return _session


async def close_session() -> None:
    global _session
    if _session and not _session.closed:
        await _session.close()
    _session = None


async def request_json(
    method: str,
    url: str,
    *,
    json: Any = None,
    params: dict[str, str] | None = None,
    retries: int = MAX_RETRIES,
    backoff: float = RETRY_BACKOFF,
) -> Any:
    """Send a request and return the parsed JSON body.

    Connection failures and timeouts on GET/HEAD are retried with exponential
    back-off. Anything else is sent once: a dropped response does not mean the
    server did not apply it. HTTP error statuses are never retried; they raise
    ClientResponseError.
    """
    if method.upper() not in IDEMPOTENT_METHODS:
        retries = 1
    session = await get_session()
    last_exc: Exception | None = None
    for attempt in range(1, retries + 1):
        try:
            async with session.request(method, url, json=json, params=params) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except aiohttp.ClientResponseError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            last_exc = exc
            if attempt < retries:
                wait = backoff ** attempt
                logger.warning(
                    "%s %s attempt %d/%d failed (%s), retry in %.1fs",
                    method, url, attempt, retries, exc, wait,
                )
                await asyncio.sleep(wait)
    logger.error("%s %s failed after %d attempts: %s", method, url, retries, last_exc)
    raise last_exc  # type: ignore[misc]
