"""Translate between JSON wire payloads and the domain model.

Wire rules:
  - instants are epoch seconds (UTC, second resolution); unusable values
    fall back to "now"
  - unknown or missing enum values decode to the safest default instead of
    failing the request
  - a request missing its required payload is rejected here, before the
    engine is ever called
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

import pytz

from gate_engine.models import (
    AircraftSize,
    AllocationResult,
    DisruptionEvent,
    DisruptionResult,
    DisruptionType,
    EngineStats,
    Flight,
    FlightStatus,
    Gate,
    GateAssignment,
    utcnow,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# A week either way; beyond that a shifted window leaves the datetime range
MAX_DELAY_MINUTES = 7 * 24 * 60


class InvalidRequestError(ValueError):
    """A request is structurally unusable and must not reach the engine."""


# ── Scalars ──────────────────────────────────────────────────────────────────

def ts_to_dt(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return utcnow()
    try:
        return datetime.fromtimestamp(int(float(value)), tz=pytz.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug("Unusable timestamp %r, using now", value)
        return utcnow()


def dt_to_ts(value: datetime) -> int:
    return int(value.timestamp())


def _norm(text: str) -> str:
    return text.replace("_", "").replace("-", "").replace(" ", "").lower()


def decode_enum(enum_cls: type[E], value: Any, default: E) -> E:
    """Match by value or name, ignoring case and separators."""
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    if isinstance(value, str) and value:
        wanted = _norm(value)
        for member in enum_cls:
            if wanted in (_norm(str(member.value)), _norm(member.name)):
                return member
    if value not in (None, ""):
        logger.debug("Unknown %s %r, defaulting to %s", enum_cls.__name__, value, default)
    return default


def _str(payload: dict, key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def _require_dict(payload: Any, what: str) -> dict:
    if not isinstance(payload, dict) or not payload:
        raise InvalidRequestError(f"{what} required")
    return payload


# ── Decoding ─────────────────────────────────────────────────────────────────

def decode_flight(payload: Any) -> Flight:
    data = _require_dict(payload, "Flight")
    if not _str(data, "flight_id"):
        raise InvalidRequestError("Flight requires flight_id")
    return Flight(
        flight_id=_str(data, "flight_id"),
        airline=_str(data, "airline"),
        origin=_str(data, "origin"),
        destination=_str(data, "destination"),
        aircraft_type=_str(data, "aircraft_type"),
        scheduled_arrival=ts_to_dt(data.get("scheduled_arrival_utc")),
        scheduled_departure=ts_to_dt(data.get("scheduled_departure_utc")),
        status=decode_enum(FlightStatus, data.get("status"), FlightStatus.SCHEDULED),
    )


def decode_gate(payload: Any) -> Gate:
    data = _require_dict(payload, "Gate")
    if not _str(data, "gate_id"):
        raise InvalidRequestError("Gate requires gate_id")
    return Gate(
        gate_id=_str(data, "gate_id"),
        terminal=_str(data, "terminal"),
        size=decode_enum(AircraftSize, data.get("size"), AircraftSize.MEDIUM),
        is_available=bool(data.get("is_available", True)),
    )


def decode_allocate_request(payload: Any) -> tuple[Flight, str, list[str]]:
    data = _require_dict(payload, "Request body")
    flight = decode_flight(data.get("flight"))
    preferred = data.get("preferred_gates") or []
    if not isinstance(preferred, list):
        raise InvalidRequestError("preferred_gates must be a list")
    return flight, _str(data, "airport_iata"), [str(g) for g in preferred]


def decode_disruption(payload: Any) -> DisruptionEvent:
    data = _require_dict(payload, "Request body")
    kind = decode_enum(DisruptionType, data.get("type"), DisruptionType.DELAY)

    flight_id = _str(data, "affected_flight_id")
    affected = data.get("affected_flight")
    if isinstance(affected, dict) and affected.get("flight_id"):
        flight_id = str(affected["flight_id"])

    description = _str(data, "description")
    if not flight_id and not (kind == DisruptionType.GATE_UNAVAILABLE and description):
        raise InvalidRequestError("Flight required")

    try:
        delay = int(data.get("delay_minutes") or 0)
    except (TypeError, ValueError) as exc:
        raise InvalidRequestError("delay_minutes must be an integer") from exc
    if abs(delay) > MAX_DELAY_MINUTES:
        raise InvalidRequestError(
            f"delay_minutes must be within ±{MAX_DELAY_MINUTES}, got {delay}"
        )

    return DisruptionEvent(
        disruption_type=kind,
        affected_flight_id=flight_id,
        description=description,
        delay_minutes=delay,
        reported_at=utcnow(),
    )


def decode_assignment(payload: Any) -> GateAssignment:
    data = _require_dict(payload, "Assignment")
    return GateAssignment(
        assignment_id=uuid.UUID(_str(data, "assignment_id")),
        flight=decode_flight(data.get("flight")),
        gate=decode_gate(data.get("gate")),
        assigned_from=ts_to_dt(data.get("assigned_from_utc")),
        assigned_until=ts_to_dt(data.get("assigned_until_utc")),
    )


def decode_stats(payload: Any) -> EngineStats:
    data = _require_dict(payload, "Stats")
    return EngineStats(
        total_gates=int(data.get("total_gates", 0)),
        available_gates=int(data.get("available_gates", 0)),
        occupied_gates=int(data.get("occupied_gates", 0)),
        total_disruptions=int(data.get("total_disruptions", 0)),
    )


# ── Encoding ─────────────────────────────────────────────────────────────────

def encode_flight(f: Flight) -> dict[str, Any]:
    return {
        "flight_id": f.flight_id,
        "airline": f.airline,
        "origin": f.origin,
        "destination": f.destination,
        "aircraft_type": f.aircraft_type,
        "scheduled_arrival_utc": dt_to_ts(f.scheduled_arrival),
        "scheduled_departure_utc": dt_to_ts(f.scheduled_departure),
        "status": f.status.value,
    }


def encode_gate(g: Gate) -> dict[str, Any]:
    return {
        "gate_id": g.gate_id,
        "terminal": g.terminal,
        "size": str(g.size),
        "is_available": g.is_available,
    }


def encode_assignment(a: GateAssignment) -> dict[str, Any]:
    return {
        "assignment_id": str(a.assignment_id),
        "flight": encode_flight(a.flight),
        "gate": encode_gate(a.gate),
        "assigned_from_utc": dt_to_ts(a.assigned_from),
        "assigned_until_utc": dt_to_ts(a.assigned_until),
    }


def encode_allocation_result(r: AllocationResult) -> dict[str, Any]:
    return {
        "success": r.success,
        "assignment": encode_assignment(r.assignment) if r.assignment else None,
        "message": r.message,
    }


def encode_disruption_result(r: DisruptionResult) -> dict[str, Any]:
    return {
        "acknowledged": r.acknowledged,
        "reassignments": [encode_assignment(a) for a in r.reassignments],
        "summary": r.summary,
    }


def encode_disruption(e: DisruptionEvent) -> dict[str, Any]:
    return {
        "event_id": str(e.event_id),
        "type": e.disruption_type.value,
        "affected_flight_id": e.affected_flight_id,
        "description": e.description,
        "reported_at_utc": dt_to_ts(e.reported_at),
        "delay_minutes": e.delay_minutes,
    }


def encode_stats(s: EngineStats) -> dict[str, Any]:
    return {
        "total_gates": s.total_gates,
        "available_gates": s.available_gates,
        "occupied_gates": s.occupied_gates,
        "total_disruptions": s.total_disruptions,
    }
