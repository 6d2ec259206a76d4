"""Authoritative engine state: gates, live assignments, disruption history.

Every public method runs under one re-entrant lock, so allocation's
scan-then-append is atomic and readers always see a consistent snapshot.
The disruption resolver calls back into allocate_gate() while the lock is
already held.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Sequence

from gate_engine.models import (
    AllocationResult,
    DisruptionEvent,
    DisruptionResult,
    EngineStats,
    Flight,
    Gate,
    GateAssignment,
)
from gate_engine.services.allocator import (
    TURNAROUND_BUFFER_MINUTES,
    build_assignment,
    rank_candidates,
)
from gate_engine.services.disruptions import DisruptionResolver

logger = logging.getLogger(__name__)


class AllocationEngine:
    def __init__(self, turnaround_buffer_minutes: int = TURNAROUND_BUFFER_MINUTES) -> None:
        self.turnaround_buffer_minutes = turnaround_buffer_minutes
        self.gates: list[Gate] = []
        self.assignments: list[GateAssignment] = []
        self.disruptions: list[DisruptionEvent] = []
        self._lock = threading.RLock()
        self._resolver = DisruptionResolver(self)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add_gate(self, gate: Gate) -> None:
        with self._lock:
            self.gates.append(gate)
        logger.info("Gate registered: %s (terminal %s, %s)", gate.gate_id, gate.terminal, gate.size)

    def find_gate(self, gate_id: str) -> Gate | None:
        with self._lock:
            return next((g for g in self.gates if g.gate_id == gate_id), None)

    def allocate_gate(
        self,
        flight: Flight,
        airport: str,
        preferred: Sequence[str] = (),
    ) -> AllocationResult:
        """Book the best-scoring compatible, conflict-free gate for *flight*."""
        logger.info(
            "Attempting allocation: flight=%s aircraft=%s airport=%s",
            flight.flight_id, flight.aircraft_type, airport,
        )
        with self._lock:
            ranked = rank_candidates(
                flight, self.gates, self.assignments, preferred,
                self.turnaround_buffer_minutes,
            )
            if not ranked:
                logger.warning("No available gates for %s", flight.flight_id)
                return AllocationResult(
                    success=False,
                    message=(
                        f"No compatible gate for {flight.flight_id} "
                        f"({flight.aircraft_type}) at {airport}"
                    ),
                )
            gate, score = ranked[0]
            assignment = build_assignment(flight, gate, self.turnaround_buffer_minutes)
            self.assignments.append(assignment)
            booked = assignment.snapshot()

        logger.info("Allocated %s -> %s (score %d)", flight.flight_id, gate.gate_id, score)
        return AllocationResult(
            success=True,
            assignment=booked,
            message=f"Allocated {flight.flight_id} -> {gate.gate_id} (score: {score})",
        )

    def handle_disruption(self, event: DisruptionEvent) -> DisruptionResult:
        logger.info(
            "Disruption %s: %s flight=%s",
            event.event_id, event.disruption_type, event.affected_flight_id or "-",
        )
        with self._lock:
            # History is a full audit log, recorded before any repair
            self.disruptions.append(event)
            return self._resolver.resolve(event)

    def get_assignments(self, terminal: str | None = None) -> list[GateAssignment]:
        with self._lock:
            return [
                a.snapshot()
                for a in self.assignments
                if terminal is None or a.gate.terminal == terminal
            ]

    def get_gates(self) -> list[Gate]:
        with self._lock:
            return [replace(g) for g in self.gates]

    def get_disruptions(self) -> list[DisruptionEvent]:
        with self._lock:
            return list(self.disruptions)

    def stats(self) -> EngineStats:
        with self._lock:
            return EngineStats(
                total_gates=len(self.gates),
                available_gates=sum(1 for g in self.gates if g.is_available),
                occupied_gates=len(self.assignments),
                total_disruptions=len(self.disruptions),
            )
