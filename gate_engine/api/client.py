"""Async client for the HTTP transport."""

from __future__ import annotations

from typing import Sequence

from gate_engine.api.codec import (
    decode_assignment,
    decode_gate,
    decode_stats,
    encode_disruption,
    encode_flight,
    encode_gate,
)
from gate_engine.models import (
    AllocationResult,
    DisruptionEvent,
    DisruptionResult,
    EngineStats,
    Flight,
    Gate,
    GateAssignment,
)
from gate_engine.utils.http import request_json


class GateClient:
    def __init__(self, base_url: str, *, retries: int = 3, backoff: float = 2.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.retries = retries
        self.backoff = backoff

    async def _call(self, method: str, path: str, **kwargs):
        return await request_json(
            method, f"{self.base_url}{path}",
            retries=self.retries, backoff=self.backoff, **kwargs,
        )

    async def register_gate(self, gate: Gate) -> Gate:
        data = await self._call("POST", "/gates", json=encode_gate(gate))
        return decode_gate(data)

    async def allocate_gate(
        self, flight: Flight, airport: str, preferred: Sequence[str] = ()
    ) -> AllocationResult:
        data = await self._call("POST", "/allocations", json={
            "flight": encode_flight(flight),
            "airport_iata": airport,
            "preferred_gates": list(preferred),
        })
        assignment = data.get("assignment")
        return AllocationResult(
            success=bool(data["success"]),
            message=data.get("message", ""),
            assignment=decode_assignment(assignment) if assignment else None,
        )

    async def report_disruption(self, event: DisruptionEvent) -> DisruptionResult:
        payload = encode_disruption(event)
        data = await self._call("POST", "/disruptions", json=payload)
        return DisruptionResult(
            acknowledged=bool(data["acknowledged"]),
            reassignments=[decode_assignment(a) for a in data.get("reassignments", [])],
            summary=data.get("summary", ""),
        )

    async def get_assignments(self, terminal: str | None = None) -> list[GateAssignment]:
        params = {"terminal": terminal} if terminal else None
        data = await self._call("GET", "/assignments", params=params)
        return [decode_assignment(a) for a in data.get("assignments", [])]

    async def stats(self) -> EngineStats:
        return decode_stats(await self._call("GET", "/stats"))
