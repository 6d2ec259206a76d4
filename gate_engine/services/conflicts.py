"""Time-conflict detection over the live assignment list."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from gate_engine.models import GateAssignment


def has_conflict(
    gate_id: str,
    start: datetime,
    end: datetime,
    assignments: Iterable[GateAssignment],
    *,
    exclude: GateAssignment | None = None,
) -> bool:
    """True if any booking on *gate_id* overlaps the half-open window [start, end).

    Windows that only touch (one ends exactly when the other starts) do not
    conflict. *exclude* is skipped by identity.
    """
    return any(
        a is not exclude and a.gate.gate_id == gate_id and a.overlaps(start, end)
        for a in assignments
    )
