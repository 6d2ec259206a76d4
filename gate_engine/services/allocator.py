"""Greedy, score-based gate selection.

Lower score is better:
  - oversize penalty: 10 per size class the gate exceeds the aircraft
  - preference: -3 for a preferred gate, +5 for any other gate
    (only when a preference list is given)

Ties go to the gate registered first.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Sequence

from gate_engine.models import AircraftSize, Flight, Gate, GateAssignment
from gate_engine.services.conflicts import has_conflict

logger = logging.getLogger(__name__)

TURNAROUND_BUFFER_MINUTES = 15

PENALTY_OVERSIZED_GATE = 10
PENALTY_PREFERRED_MISS = 5
REWARD_PREFERRED_GATE = -3


def booking_window(
    flight: Flight, buffer_minutes: int = TURNAROUND_BUFFER_MINUTES
) -> tuple[datetime, datetime]:
    return (
        flight.scheduled_arrival,
        flight.scheduled_departure + timedelta(minutes=buffer_minutes),
    )


def score_gate(gate: Gate, aircraft_size: AircraftSize, preferred: Sequence[str]) -> int:
    score = 0
    size_diff = gate.size.rank - aircraft_size.rank
    if size_diff > 0:
        score += PENALTY_OVERSIZED_GATE * size_diff
    if preferred:
        score += REWARD_PREFERRED_GATE if gate.gate_id in preferred else PENALTY_PREFERRED_MISS
    return score


def rank_candidates(
    flight: Flight,
    gates: Sequence[Gate],
    assignments: Sequence[GateAssignment],
    preferred: Sequence[str] = (),
    buffer_minutes: int = TURNAROUND_BUFFER_MINUTES,
) -> list[tuple[Gate, int]]:
    """Compatible, conflict-free gates ordered best first.

    sorted() is stable, so equal scores keep registration order.
    """
    size = flight.aircraft_size
    start, end = booking_window(flight, buffer_minutes)
    candidates = [
        (g, score_gate(g, size, preferred))
        for g in gates
        if g.is_available
        and g.can_accommodate(size)
        and not has_conflict(g.gate_id, start, end, assignments)
    ]
    return sorted(candidates, key=lambda c: c[1])


def build_assignment(
    flight: Flight, gate: Gate, buffer_minutes: int = TURNAROUND_BUFFER_MINUTES
) -> GateAssignment:
    start, end = booking_window(flight, buffer_minutes)
    return GateAssignment(
        flight=replace(flight),
        gate=replace(gate),
        assigned_from=start,
        assigned_until=end,
    )
