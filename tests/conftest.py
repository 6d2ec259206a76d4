from __future__ import annotations

from datetime import datetime

import pytest
import pytz

from gate_engine.models import AircraftSize, Flight, FlightStatus, Gate
from gate_engine.services.engine import AllocationEngine
from gate_engine.utils.cache import invalidate_all

DAY = datetime(2026, 3, 1, tzinfo=pytz.utc)


@pytest.fixture(autouse=True)
def _fresh_cache():
    invalidate_all()
    yield
    invalidate_all()


@pytest.fixture
def at():
    def _at(hour: int, minute: int = 0) -> datetime:
        return DAY.replace(hour=hour, minute=minute)
    return _at


@pytest.fixture
def make_flight(at):
    def _make(
        flight_id: str,
        aircraft: str = "A320",
        arr: tuple[int, int] | int = 10,
        dep: tuple[int, int] | int = 12,
        destination: str = "LHR",
    ) -> Flight:
        arr_hm = arr if isinstance(arr, tuple) else (arr, 0)
        dep_hm = dep if isinstance(dep, tuple) else (dep, 0)
        return Flight(
            flight_id=flight_id,
            airline="Test",
            origin="JFK",
            destination=destination,
            aircraft_type=aircraft,
            scheduled_arrival=at(*arr_hm),
            scheduled_departure=at(*dep_hm),
            status=FlightStatus.SCHEDULED,
        )
    return _make


@pytest.fixture
def make_engine():
    def _make(*gates: tuple[str, str, AircraftSize]) -> AllocationEngine:
        engine = AllocationEngine()
        for gate_id, terminal, size in gates:
            engine.add_gate(Gate(gate_id=gate_id, terminal=terminal, size=size))
        return engine
    return _make
