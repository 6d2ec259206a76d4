"""Domain models — pure dataclasses, no framework dependencies."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

import pytz

from gate_engine.aircraft import AircraftSize, classify_aircraft


class FlightStatus(str, Enum):
    SCHEDULED = "Scheduled"
    BOARDING = "Boarding"
    DEPARTED = "Departed"
    EN_ROUTE = "EnRoute"
    ARRIVED = "Arrived"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"
    DIVERTED = "Diverted"

    def __str__(self) -> str:
        return self.value


class DisruptionType(str, Enum):
    DELAY = "Delay"
    CANCELLATION = "Cancellation"
    DIVERSION = "Diversion"
    GATE_UNAVAILABLE = "GateUnavailable"
    WEATHER = "Weather"
    MECHANICAL = "Mechanical"

    def __str__(self) -> str:
        return self.value


def utcnow() -> datetime:
    return datetime.now(tz=pytz.utc)


@dataclass
class Flight:
    flight_id: str
    airline: str
    origin: str
    destination: str
    aircraft_type: str             # free-form designator, e.g. "A320", "B777"
    scheduled_arrival: datetime    # always tz-aware UTC
    scheduled_departure: datetime  # always tz-aware UTC
    status: FlightStatus = FlightStatus.SCHEDULED

    @property
    def aircraft_size(self) -> AircraftSize:
        return classify_aircraft(self.aircraft_type)

    def __str__(self) -> str:
        return (
            f"{self.flight_id} ({self.aircraft_type}) {self.origin} → {self.destination} "
            f"[{self.status}] arr {self.scheduled_arrival:%H:%M} dep {self.scheduled_departure:%H:%M}"
        )


@dataclass
class Gate:
    gate_id: str
    terminal: str
    size: AircraftSize
    is_available: bool = True

    def can_accommodate(self, aircraft_size: AircraftSize) -> bool:
        return self.size.rank >= aircraft_size.rank

    def __str__(self) -> str:
        state = "AVAIL" if self.is_available else "CLOSED"
        return f"{self.gate_id} [{self.terminal}] {self.size} {state}"


@dataclass
class GateAssignment:
    flight: Flight       # snapshot taken at assignment time
    gate: Gate           # snapshot taken at assignment time
    assigned_from: datetime
    assigned_until: datetime   # exclusive
    assignment_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.assigned_from < end and self.assigned_until > start

    def snapshot(self) -> GateAssignment:
        """Copy that shares no mutable state with this assignment."""
        return replace(self, flight=replace(self.flight), gate=replace(self.gate))

    def __str__(self) -> str:
        return (
            f"Gate {self.gate.gate_id} <- {self.flight.flight_id} "
            f"({self.assigned_from:%H:%M} - {self.assigned_until:%H:%M})"
        )


@dataclass
class DisruptionEvent:
    disruption_type: DisruptionType
    affected_flight_id: str = ""
    description: str = ""      # carries the gate id for GateUnavailable
    delay_minutes: int = 0     # meaningful only for Delay
    reported_at: datetime = field(default_factory=utcnow)
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def target_gate_id(self) -> str:
        return self.description

    def __str__(self) -> str:
        return (
            f"[{self.disruption_type}] {self.affected_flight_id} - "
            f"{self.description} ({self.reported_at:%H:%M:%S})"
        )


@dataclass
class AllocationResult:
    success: bool
    message: str
    assignment: GateAssignment | None = None


@dataclass
class DisruptionResult:
    summary: str
    reassignments: list[GateAssignment] = field(default_factory=list)
    acknowledged: bool = True


@dataclass
class EngineStats:
    total_gates: int
    available_gates: int
    occupied_gates: int
    total_disruptions: int

    def __str__(self) -> str:
        return (
            f"Gates: {self.available_gates}/{self.total_gates} available | "
            f"Assignments: {self.occupied_gates} | Disruptions: {self.total_disruptions}"
        )
