"""Seed data and the end-to-end console simulation."""

from __future__ import annotations

from datetime import datetime

import pytz

from gate_engine.models import (
    AircraftSize,
    DisruptionEvent,
    DisruptionType,
    Flight,
    Gate,
)
from gate_engine.services.engine import AllocationEngine

BA_PREFERRED = ["T5-A1", "T5-A2", "T5-B1", "T5-B2", "T5-B3"]
OTHER_PREFERRED = ["T2-A1", "T2-B1", "T2-B2"]

_RULE = "=" * 69


def seed_gates() -> list[Gate]:
    layout = [
        ("T5-A1", "T5", AircraftSize.LARGE),
        ("T5-A2", "T5", AircraftSize.LARGE),
        ("T5-B1", "T5", AircraftSize.MEDIUM),
        ("T5-B2", "T5", AircraftSize.MEDIUM),
        ("T5-B3", "T5", AircraftSize.MEDIUM),
        ("T5-C1", "T5", AircraftSize.SMALL),
        ("T5-C2", "T5", AircraftSize.SMALL),
        ("T2-A1", "T2", AircraftSize.LARGE),
        ("T2-B1", "T2", AircraftSize.MEDIUM),
        ("T2-B2", "T2", AircraftSize.MEDIUM),
    ]
    return [Gate(gate_id=g, terminal=t, size=s) for g, t, s in layout]


def seed_flights(day: datetime | None = None) -> list[Flight]:
    day = day or datetime(2026, 3, 15, tzinfo=pytz.utc)

    def at(h: int, m: int) -> datetime:
        return day.replace(hour=h, minute=m, second=0, microsecond=0)

    schedule = [
        ("BA-117", "British Airways", "JFK", "B777", (6, 30), (9, 15)),
        ("BA-303", "British Airways", "CDG", "A320", (7, 0), (8, 45)),
        ("BA-609", "British Airways", "EDI", "E190", (7, 15), (8, 30)),
        ("BA-215", "British Airways", "DXB", "A350", (7, 45), (10, 30)),
        ("BA-456", "British Airways", "MAD", "A320", (8, 0), (10, 0)),
        ("LH-901", "Lufthansa", "FRA", "A320", (8, 15), (10, 15)),
        ("AF-1680", "Air France", "CDG", "A320", (8, 30), (10, 30)),
        ("BA-178", "British Airways", "SIN", "B787", (9, 0), (12, 0)),
    ]
    return [
        Flight(
            flight_id=fid,
            airline=airline,
            origin=origin,
            destination="LHR",
            aircraft_type=ac,
            scheduled_arrival=at(*arr),
            scheduled_departure=at(*dep),
        )
        for fid, airline, origin, ac, arr, dep in schedule
    ]


def preferred_gates(flight: Flight) -> list[str]:
    return BA_PREFERRED if flight.airline == "British Airways" else OTHER_PREFERRED


def demo_disruptions() -> list[tuple[str, DisruptionEvent]]:
    return [
        ("BA-303 from CDG delayed 45 minutes (fog)", DisruptionEvent(
            disruption_type=DisruptionType.DELAY,
            affected_flight_id="BA-303",
            description="Fog at CDG",
            delay_minutes=45,
        )),
        ("LH-901 from FRA cancelled (technical fault)", DisruptionEvent(
            disruption_type=DisruptionType.CANCELLATION,
            affected_flight_id="LH-901",
            description="Hydraulic fault",
        )),
        ("Gate T5-A1 out of service (jetbridge fault)", DisruptionEvent(
            disruption_type=DisruptionType.GATE_UNAVAILABLE,
            description="T5-A1",
        )),
    ]


def run_demo(airport: str = "LHR", turnaround_buffer_minutes: int = 15) -> AllocationEngine:
    print()
    print(_RULE)
    print("  Gate Allocation Engine -- Simulation Demo")
    print("  Aviation Gate Allocation & Disruption Optimisation")
    print(_RULE)

    engine = AllocationEngine(turnaround_buffer_minutes)

    print("\n--- Phase 1: Registering Airport Gates ---\n")
    for gate in seed_gates():
        print(f"  [+] {gate}")
        engine.add_gate(gate)

    print("\n--- Phase 2: Morning Schedule -- Gate Allocation ---\n")
    for flight in seed_flights():
        r = engine.allocate_gate(flight, airport, preferred_gates(flight))
        if r.assignment is not None:
            a = r.assignment
            print(
                f"  [OK] {flight.flight_id} -> Gate {a.gate.gate_id} "
                f"({a.assigned_from:%H:%M} - {a.assigned_until:%H:%M})"
            )
        else:
            print(f"  [!!] {flight.flight_id} -- {r.message}")

    print(f"\n  Stats: {engine.stats()}\n")

    print("--- Phase 3: Disruption Events ---\n")
    for headline, event in demo_disruptions():
        print(f"  [!] {headline}")
        r = engine.handle_disruption(event)
        print(f"      -> {r.summary}")
        for a in r.reassignments:
            print(f"      -> Reassigned: {a}")
        print()

    print("--- Phase 4: Final Gate Assignments ---\n")
    for a in engine.get_assignments():
        print(
            f"  [>] {a.flight.flight_id} -> Gate {a.gate.gate_id} "
            f"[{a.assigned_from:%H:%M} - {a.assigned_until:%H:%M}] ({a.flight.status})"
        )

    print(f"\n  Stats: {engine.stats()}")
    print("\n--- Simulation Complete ---\n")
    return engine
