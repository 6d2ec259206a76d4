"""Per-disruption-type repair of the engine's assignment and gate lists.

Runs with the engine lock held. Re-allocation goes through the engine's own
allocate_gate(), so repaired bookings obey the same scoring and conflict
rules as fresh ones.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import TYPE_CHECKING, Callable

from gate_engine.models import (
    DisruptionEvent,
    DisruptionResult,
    DisruptionType,
    FlightStatus,
    GateAssignment,
)
from gate_engine.services.conflicts import has_conflict

if TYPE_CHECKING:
    from gate_engine.services.engine import AllocationEngine

logger = logging.getLogger(__name__)


class DisruptionResolver:
    def __init__(self, engine: AllocationEngine) -> None:
        self.engine = engine
        self._handlers: dict[DisruptionType, Callable[[DisruptionEvent], DisruptionResult]] = {
            DisruptionType.DELAY: self._delay,
            DisruptionType.CANCELLATION: self._cancellation,
            DisruptionType.DIVERSION: self._diversion,
            DisruptionType.GATE_UNAVAILABLE: self._gate_unavailable,
            DisruptionType.WEATHER: self._record_only,
            DisruptionType.MECHANICAL: self._record_only,
        }

    def resolve(self, event: DisruptionEvent) -> DisruptionResult:
        return self._handlers[event.disruption_type](event)

    # ── Handlers ──────────────────────────────────────────────────────

    def _delay(self, event: DisruptionEvent) -> DisruptionResult:
        delay = timedelta(minutes=event.delay_minutes)
        affected = self._assignments_for(event.affected_flight_id)
        reassignments: list[GateAssignment] = []

        for a in affected:
            new_from = a.assigned_from + delay
            new_until = a.assigned_until + delay
            gate_id = a.gate.gate_id
            shifted = replace(
                a.flight,
                scheduled_arrival=a.flight.scheduled_arrival + delay,
                scheduled_departure=a.flight.scheduled_departure + delay,
                status=FlightStatus.DELAYED,
            )

            if not has_conflict(gate_id, new_from, new_until, self.engine.assignments, exclude=a):
                a.assigned_from = new_from
                a.assigned_until = new_until
                a.flight = shifted
                logger.info("Window shifted: %s on %s", shifted.flight_id, gate_id)
                reassignments.append(a.snapshot())
                continue

            logger.info("Delay conflict on %s for %s - re-allocating", gate_id, shifted.flight_id)
            result = self.engine.allocate_gate(shifted, shifted.destination, [gate_id])
            self._remove(lambda x: x is a)
            if result.assignment is not None:
                reassignments.append(result.assignment)
            else:
                logger.warning("Delayed flight %s left without a gate", shifted.flight_id)

        return DisruptionResult(
            reassignments=reassignments,
            summary=(
                f"{event.affected_flight_id} delayed {event.delay_minutes}min - "
                f"{len(affected)} assignment(s) adjusted"
            ),
        )

    def _cancellation(self, event: DisruptionEvent) -> DisruptionResult:
        freed = self._remove(lambda a: a.flight.flight_id == event.affected_flight_id)
        logger.info("Cancelled %s - %d gate(s) freed", event.affected_flight_id, freed)
        return DisruptionResult(
            summary=f"{event.affected_flight_id} cancelled - {freed} gate(s) freed",
        )

    def _diversion(self, event: DisruptionEvent) -> DisruptionResult:
        freed = self._remove(lambda a: a.flight.flight_id == event.affected_flight_id)
        logger.info("Diverted %s - %d gate(s) freed", event.affected_flight_id, freed)
        return DisruptionResult(
            summary=f"{event.disruption_type} event for {event.affected_flight_id}",
        )

    def _gate_unavailable(self, event: DisruptionEvent) -> DisruptionResult:
        gate_id = event.target_gate_id
        affected = [a.flight for a in self.engine.assignments if a.gate.gate_id == gate_id]

        gate = next((g for g in self.engine.gates if g.gate_id == gate_id), None)
        if gate is not None:
            gate.is_available = False
        else:
            logger.warning("Gate %s is not registered", gate_id)
        self._remove(lambda a: a.gate.gate_id == gate_id)

        reassignments: list[GateAssignment] = []
        for flight in affected:
            result = self.engine.allocate_gate(flight, flight.destination)
            if result.assignment is not None:
                reassignments.append(result.assignment)
            else:
                # Known gap: the flight simply drops out of the assignment list
                logger.warning("Re-allocation failed after gate loss: %s", flight.flight_id)

        return DisruptionResult(
            reassignments=reassignments,
            summary=(
                f"Gate {gate_id} unavailable - {len(reassignments)} of "
                f"{len(affected)} flight(s) re-allocated"
            ),
        )

    def _record_only(self, event: DisruptionEvent) -> DisruptionResult:
        return DisruptionResult(
            summary=f"{event.disruption_type} event for {event.affected_flight_id}",
        )

    # ── Helpers ───────────────────────────────────────────────────────

    def _assignments_for(self, flight_id: str) -> list[GateAssignment]:
        return [a for a in self.engine.assignments if a.flight.flight_id == flight_id]

    def _remove(self, predicate: Callable[[GateAssignment], bool]) -> int:
        before = len(self.engine.assignments)
        self.engine.assignments[:] = [a for a in self.engine.assignments if not predicate(a)]
        return before - len(self.engine.assignments)
