"""JSON-over-HTTP transport adapter for the allocation engine.

Handlers only translate: decode the wire payload, call exactly one engine
operation, encode the result. Structurally invalid requests are answered
with HTTP 400 before the engine is touched.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import web

from gate_engine.api.codec import (
    InvalidRequestError,
    decode_allocate_request,
    decode_disruption,
    decode_gate,
    encode_allocation_result,
    encode_assignment,
    encode_disruption,
    encode_disruption_result,
    encode_gate,
    encode_stats,
)
from gate_engine.services.engine import AllocationEngine
from gate_engine.services.feed import DisruptionFeed

logger = logging.getLogger(__name__)

ENGINE_KEY = web.AppKey("engine", AllocationEngine)
FEED_KEY = web.AppKey("feed", DisruptionFeed)


@web.middleware
async def error_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    try:
        return await handler(request)
    except InvalidRequestError as exc:
        logger.warning("%s %s rejected: %s", request.method, request.path, exc)
        return web.json_response({"error": str(exc)}, status=400)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("%s %s failed", request.method, request.path)
        return web.json_response({"error": "internal error"}, status=500)


async def _read_json(request: web.Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError(f"Malformed JSON body: {exc}") from exc


# ── Handlers ──────────────────────────────────────────────────────────────────

async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def register_gate(request: web.Request) -> web.Response:
    gate = decode_gate(await _read_json(request))
    request.app[ENGINE_KEY].add_gate(gate)
    return web.json_response(encode_gate(gate), status=201)


async def list_gates(request: web.Request) -> web.Response:
    gates = request.app[ENGINE_KEY].get_gates()
    return web.json_response({"gates": [encode_gate(g) for g in gates]})


async def allocate_gate(request: web.Request) -> web.Response:
    flight, airport, preferred = decode_allocate_request(await _read_json(request))
    result = request.app[ENGINE_KEY].allocate_gate(flight, airport, preferred)
    return web.json_response(encode_allocation_result(result))


async def report_disruption(request: web.Request) -> web.Response:
    event = decode_disruption(await _read_json(request))
    result = request.app[ENGINE_KEY].handle_disruption(event)
    request.app[FEED_KEY].publish(event)
    return web.json_response(encode_disruption_result(result))


async def get_assignments(request: web.Request) -> web.Response:
    terminal = request.query.get("terminal") or None
    assignments = request.app[ENGINE_KEY].get_assignments(terminal)
    return web.json_response({"assignments": [encode_assignment(a) for a in assignments]})


async def get_stats(request: web.Request) -> web.Response:
    return web.json_response(encode_stats(request.app[ENGINE_KEY].stats()))


async def stream_disruptions(request: web.Request) -> web.StreamResponse:
    """Newline-delimited JSON, one line per published disruption."""
    response = web.StreamResponse(headers={"Content-Type": "application/x-ndjson"})
    await response.prepare(request)
    try:
        async for event in request.app[FEED_KEY].subscribe():
            await response.write((json.dumps(encode_disruption(event)) + "\n").encode())
    except ConnectionResetError:
        logger.debug("Disruption stream client went away")
    return response


# ── App factory ───────────────────────────────────────────────────────────────

async def _close_feed(app: web.Application) -> None:
    app[FEED_KEY].close()


def create_app(engine: AllocationEngine, feed: DisruptionFeed | None = None) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[ENGINE_KEY] = engine
    app[FEED_KEY] = feed or DisruptionFeed()

    app.router.add_get("/health", health)
    app.router.add_post("/gates", register_gate)
    app.router.add_get("/gates", list_gates)
    app.router.add_post("/allocations", allocate_gate)
    app.router.add_post("/disruptions", report_disruption)
    app.router.add_get("/disruptions/stream", stream_disruptions)
    app.router.add_get("/assignments", get_assignments)
    app.router.add_get("/stats", get_stats)

    app.on_shutdown.append(_close_feed)
    return app
