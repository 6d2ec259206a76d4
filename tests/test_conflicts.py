from __future__ import annotations

from gate_engine.models import AircraftSize, Gate, GateAssignment
from gate_engine.services.conflicts import has_conflict


def _booking(make_flight, at, gate_id, start, end):
    return GateAssignment(
        flight=make_flight("X"),
        gate=Gate(gate_id=gate_id, terminal="T", size=AircraftSize.MEDIUM),
        assigned_from=at(*start),
        assigned_until=at(*end),
    )


def test_overlap_conflicts(make_flight, at):
    existing = [_booking(make_flight, at, "A1", (10, 0), (12, 15))]
    assert has_conflict("A1", at(11), at(13), existing)
    assert has_conflict("A1", at(9), at(10, 1), existing)
    assert has_conflict("A1", at(10, 30), at(11), existing)


def test_touching_windows_do_not_conflict(make_flight, at):
    existing = [_booking(make_flight, at, "A1", (10, 0), (12, 15))]
    assert not has_conflict("A1", at(12, 15), at(14), existing)
    assert not has_conflict("A1", at(8), at(10), existing)


def test_other_gates_are_ignored(make_flight, at):
    existing = [_booking(make_flight, at, "A1", (10, 0), (12, 0))]
    assert not has_conflict("A2", at(10), at(12), existing)
    assert not has_conflict("A1", at(10), at(12), [])


def test_excluded_booking_is_skipped(make_flight, at):
    own = _booking(make_flight, at, "A1", (10, 0), (12, 0))
    other = _booking(make_flight, at, "A1", (13, 0), (14, 0))
    assert not has_conflict("A1", at(10, 30), at(12, 30), [own, other], exclude=own)
    assert has_conflict("A1", at(10, 30), at(13, 30), [own, other], exclude=own)
