from __future__ import annotations

from datetime import datetime, timedelta

import pytest
import pytz

from gate_engine.api.codec import (
    MAX_DELAY_MINUTES,
    InvalidRequestError,
    decode_allocate_request,
    decode_assignment,
    decode_disruption,
    decode_enum,
    decode_flight,
    decode_gate,
    encode_allocation_result,
    encode_assignment,
    ts_to_dt,
)
from gate_engine.models import (
    AircraftSize,
    AllocationResult,
    DisruptionType,
    FlightStatus,
    Gate,
    GateAssignment,
)

ARR = 1_772_359_200  # 2026-03-01 10:00:00 UTC


def _flight_payload(**overrides):
    payload = {
        "flight_id": "BA-117",
        "airline": "British Airways",
        "origin": "JFK",
        "destination": "LHR",
        "aircraft_type": "B777",
        "scheduled_arrival_utc": ARR,
        "scheduled_departure_utc": ARR + 7200,
        "status": "Scheduled",
    }
    payload.update(overrides)
    return payload


def test_epoch_seconds_are_utc():
    assert ts_to_dt(ARR) == datetime(2026, 3, 1, 10, tzinfo=pytz.utc)
    assert ts_to_dt(str(ARR)) == datetime(2026, 3, 1, 10, tzinfo=pytz.utc)


@pytest.mark.parametrize("bad", [None, "soon", True, 10**20, {"s": 1}])
def test_unusable_timestamps_fall_back_to_now(bad):
    assert abs(ts_to_dt(bad) - datetime.now(tz=pytz.utc)) < timedelta(seconds=5)


@pytest.mark.parametrize("raw,expected", [
    ("GateUnavailable", DisruptionType.GATE_UNAVAILABLE),
    ("GATE_UNAVAILABLE", DisruptionType.GATE_UNAVAILABLE),
    ("gate-unavailable", DisruptionType.GATE_UNAVAILABLE),
    ("cancellation", DisruptionType.CANCELLATION),
    ("Tornado", DisruptionType.DELAY),
    (None, DisruptionType.DELAY),
    (7, DisruptionType.DELAY),
])
def test_disruption_type_decoding(raw, expected):
    assert decode_enum(DisruptionType, raw, DisruptionType.DELAY) is expected


def test_flight_status_and_size_defaults():
    assert decode_enum(FlightStatus, "en_route", FlightStatus.SCHEDULED) is FlightStatus.EN_ROUTE
    assert decode_enum(FlightStatus, "Landed", FlightStatus.SCHEDULED) is FlightStatus.SCHEDULED
    assert decode_enum(AircraftSize, "LARGE", AircraftSize.MEDIUM) is AircraftSize.LARGE
    assert decode_enum(AircraftSize, 0, AircraftSize.MEDIUM) is AircraftSize.SMALL
    assert decode_enum(AircraftSize, "huge", AircraftSize.MEDIUM) is AircraftSize.MEDIUM


def test_decode_flight():
    flight = decode_flight(_flight_payload(status="bogus"))
    assert flight.flight_id == "BA-117"
    assert flight.scheduled_departure - flight.scheduled_arrival == timedelta(hours=2)
    assert flight.status is FlightStatus.SCHEDULED


@pytest.mark.parametrize("payload", [None, {}, [], _flight_payload(flight_id="")])
def test_decode_flight_rejects_missing_payload(payload):
    with pytest.raises(InvalidRequestError):
        decode_flight(payload)


def test_decode_gate():
    gate = decode_gate({"gate_id": "T5-A1", "terminal": "T5", "size": "Large"})
    assert gate == Gate(gate_id="T5-A1", terminal="T5", size=AircraftSize.LARGE)
    with pytest.raises(InvalidRequestError):
        decode_gate({"terminal": "T5"})


def test_decode_allocate_request():
    flight, airport, preferred = decode_allocate_request({
        "flight": _flight_payload(),
        "airport_iata": "LHR",
        "preferred_gates": ["T5-A1", "T5-A2"],
    })
    assert flight.flight_id == "BA-117"
    assert airport == "LHR"
    assert preferred == ["T5-A1", "T5-A2"]

    with pytest.raises(InvalidRequestError, match="Flight required"):
        decode_allocate_request({"airport_iata": "LHR"})
    with pytest.raises(InvalidRequestError):
        decode_allocate_request({"flight": _flight_payload(), "preferred_gates": "T5-A1"})


def test_decode_disruption_with_flight():
    event = decode_disruption({
        "type": "Delay",
        "affected_flight": _flight_payload(),
        "description": "Fog",
        "delay_minutes": 45,
    })
    assert event.disruption_type is DisruptionType.DELAY
    assert event.affected_flight_id == "BA-117"
    assert event.delay_minutes == 45


def test_decode_gate_loss_without_flight():
    event = decode_disruption({"type": "GATE_UNAVAILABLE", "description": "T5-A1"})
    assert event.disruption_type is DisruptionType.GATE_UNAVAILABLE
    assert event.target_gate_id == "T5-A1"
    assert event.affected_flight_id == ""


@pytest.mark.parametrize("payload", [
    {"type": "GateUnavailable"},
    {"type": "Delay", "description": "T5-A1"},
    {"type": "Cancellation", "affected_flight": {}},
    {},
])
def test_decode_disruption_rejects_untargeted_events(payload):
    with pytest.raises(InvalidRequestError):
        decode_disruption(payload)


def test_decode_disruption_rejects_bad_delay():
    with pytest.raises(InvalidRequestError):
        decode_disruption({"affected_flight_id": "F1", "delay_minutes": "lots"})



@pytest.mark.parametrize("minutes", [10**10, -(10**10), MAX_DELAY_MINUTES + 1])
def test_decode_disruption_rejects_out_of_range_delay(minutes):
    with pytest.raises(InvalidRequestError):
        decode_disruption({"affected_flight_id": "F1", "delay_minutes": minutes})


def test_decode_disruption_accepts_longest_delay():
    event = decode_disruption({"affected_flight_id": "F1", "delay_minutes": MAX_DELAY_MINUTES})
    assert event.delay_minutes == MAX_DELAY_MINUTES


def test_assignment_encoding(make_flight, at):
    gate = Gate(gate_id="A1", terminal="T5", size=AircraftSize.MEDIUM)
    assignment = GateAssignment(
        flight=make_flight("F1"), gate=gate, assigned_from=at(10), assigned_until=at(12, 15),
    )
    data = encode_assignment(assignment)
    assert data["assignment_id"] == str(assignment.assignment_id)
    assert data["assigned_from_utc"] == ARR
    assert data["assigned_until_utc"] == ARR + 8100
    assert data["gate"] == {"gate_id": "A1", "terminal": "T5", "size": "Medium", "is_available": True}
    assert decode_assignment(data) == assignment


def test_failed_allocation_encoding():
    data = encode_allocation_result(AllocationResult(success=False, message="No compatible gate"))
    assert data == {"success": False, "assignment": None, "message": "No compatible gate"}
