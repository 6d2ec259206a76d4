from __future__ import annotations

import threading
from dataclasses import replace

from gate_engine.models import AircraftSize, DisruptionEvent, DisruptionType, FlightStatus

M = AircraftSize.MEDIUM
L = AircraftSize.LARGE
S = AircraftSize.SMALL


def _no_double_booking(engine) -> bool:
    live = engine.get_assignments()
    for i, a in enumerate(live):
        for b in live[i + 1:]:
            if a.gate.gate_id == b.gate.gate_id and a.overlaps(b.assigned_from, b.assigned_until):
                return False
    return True


def test_allocates_right_sized_gate(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("A2", "T5", L))
    result = engine.allocate_gate(make_flight("F1", "A320"), "LHR")
    assert result.success
    assert result.assignment.gate.gate_id == "A1"
    assert "Allocated F1 -> A1" in result.message


def test_rejects_undersized_gate(make_engine, make_flight):
    engine = make_engine(("A1", "T5", S))
    result = engine.allocate_gate(make_flight("F1", "A320"), "LHR")
    assert not result.success
    assert result.assignment is None
    assert "No compatible gate" in result.message
    assert engine.get_assignments() == []


def test_detects_time_conflicts(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    assert engine.allocate_gate(make_flight("F1", arr=10, dep=12), "LHR").success
    assert not engine.allocate_gate(make_flight("F2", arr=11, dep=13), "LHR").success
    assert len(engine.get_assignments()) == 1


def test_abutting_window_is_not_a_conflict(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    engine.allocate_gate(make_flight("F1", arr=10, dep=12), "LHR")
    # F1 holds A1 until 12:15
    result = engine.allocate_gate(make_flight("F2", arr=(12, 15), dep=14), "LHR")
    assert result.success
    assert result.assignment.gate.gate_id == "A1"


def test_cancellation_frees_gate(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    engine.allocate_gate(make_flight("F1", arr=10, dep=12), "LHR")
    engine.handle_disruption(DisruptionEvent(DisruptionType.CANCELLATION, affected_flight_id="F1"))
    assert engine.get_assignments() == []
    assert engine.allocate_gate(make_flight("F2", arr=11, dep=13), "LHR").success


def test_prefers_requested_gate(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("B1", "T5", M))
    result = engine.allocate_gate(make_flight("F1"), "LHR", ["B1"])
    assert result.assignment.gate.gate_id == "B1"


def test_preference_does_not_override_large_oversize(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("L1", "T5", L))
    # L1: 10 - 3 = 7, A1: 0 + 5 = 5
    result = engine.allocate_gate(make_flight("F1"), "LHR", ["L1"])
    assert result.assignment.gate.gate_id == "A1"


def test_unavailable_gates_are_skipped(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("A2", "T5", M))
    engine.gates[0].is_available = False
    assert engine.allocate_gate(make_flight("F1"), "LHR").assignment.gate.gate_id == "A2"


def test_allocation_never_touches_flight_or_gate(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    flight = make_flight("F1")
    before = replace(flight)
    engine.allocate_gate(flight, "LHR")
    assert flight == before
    assert engine.gates[0].is_available


def test_gate_hosts_sequential_bookings(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    for i, hour in enumerate((6, 9, 12, 15)):
        assert engine.allocate_gate(make_flight(f"F{i}", arr=hour, dep=hour + 2), "LHR").success
    assert engine.stats().occupied_gates == 4
    assert _no_double_booking(engine)


def test_no_double_booking_under_load(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("A2", "T5", L), ("B1", "T2", S), ("B2", "T2", M))
    aircraft = ["A320", "B777", "E190", "A321"]
    for i in range(40):
        start = 5 + (i * 7) % 14
        engine.allocate_gate(
            make_flight(f"F{i}", aircraft[i % 4], arr=start, dep=start + 1 + i % 3), "LHR",
        )
    assert _no_double_booking(engine)


def test_concurrent_allocations_cannot_double_book(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    barrier = threading.Barrier(16)
    results = []

    def worker(i: int) -> None:
        flight = make_flight(f"F{i}", arr=10, dep=12)
        barrier.wait()
        results.append(engine.allocate_gate(flight, "LHR"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(r.success for r in results) == 1
    assert len(engine.get_assignments()) == 1


def test_terminal_filter(make_engine, make_flight):
    engine = make_engine(("T5-A1", "T5", M), ("T2-A1", "T2", M))
    engine.allocate_gate(make_flight("F1"), "LHR", ["T5-A1"])
    engine.allocate_gate(make_flight("F2"), "LHR", ["T2-A1"])
    assert [a.flight.flight_id for a in engine.get_assignments("T2")] == ["F2"]
    assert [a.flight.flight_id for a in engine.get_assignments("T5")] == ["F1"]
    assert engine.get_assignments("t5") == []
    assert len(engine.get_assignments()) == 2


def test_returned_assignments_are_snapshots(make_engine, make_flight, at):
    engine = make_engine(("A1", "T5", M))
    engine.allocate_gate(make_flight("F1"), "LHR")
    copy = engine.get_assignments()[0]
    copy.assigned_from = at(1)
    assert engine.get_assignments()[0].assigned_from == at(10)


def test_nested_flight_and_gate_are_copied(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M))
    booked = engine.allocate_gate(make_flight("F1"), "LHR").assignment
    booked.flight.status = FlightStatus.CANCELLED
    booked.gate.terminal = "XX"

    listed = engine.get_assignments()[0]
    listed.gate.gate_id = "ZZ"
    listed.flight.flight_id = "F9"

    live = engine.get_assignments()[0]
    assert live.flight.status is FlightStatus.SCHEDULED
    assert live.flight.flight_id == "F1"
    assert live.gate.terminal == "T5"
    assert live.gate.gate_id == "A1"
    assert not engine.allocate_gate(make_flight("F2"), "LHR").success


def test_stats(make_engine, make_flight):
    engine = make_engine(("A1", "T5", M), ("A2", "T5", M), ("B1", "T2", L))
    engine.allocate_gate(make_flight("F1"), "LHR")
    engine.allocate_gate(make_flight("F2"), "LHR")
    engine.handle_disruption(DisruptionEvent(DisruptionType.GATE_UNAVAILABLE, description="B1"))
    engine.handle_disruption(DisruptionEvent(DisruptionType.WEATHER, affected_flight_id="F1"))
    stats = engine.stats()
    assert stats.total_gates == 3
    assert stats.available_gates == 2
    assert stats.occupied_gates == 2
    assert stats.total_disruptions == 2


def test_register_gate_does_not_deduplicate(make_engine):
    engine = make_engine(("A1", "T5", M), ("A1", "T5", M))
    assert engine.stats().total_gates == 2
    assert engine.find_gate("A1") is engine.gates[0]
    assert engine.find_gate("Z9") is None
