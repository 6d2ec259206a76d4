"""Aircraft designator → gate size classification."""

from __future__ import annotations

from enum import IntEnum

from gate_engine.utils.cache import memoized


class AircraftSize(IntEnum):
    # Ranks are load-bearing: compatibility and oversize penalty compare them
    SMALL = 0
    MEDIUM = 1
    LARGE = 2

    @property
    def rank(self) -> int:
        return int(self.value)

    def __str__(self) -> str:
        return self.name.title()


# Wide-bodies that need a Large gate
LARGE_AIRCRAFT_TYPES = frozenset({"A350", "A380", "B777", "B787", "B747", "A330", "A340"})
# Regional jets and turboprops that fit a Small gate
SMALL_AIRCRAFT_TYPES = frozenset({"E190", "E195", "ATR72", "ATR42", "CRJ900", "CRJ700"})


@memoized("aircraft_size")
def classify_aircraft(aircraft_type: str) -> AircraftSize:
    """Map a designator to a gate size class.

    Matching is case-insensitive and exact. Anything not listed is treated
    as a typical narrow-body (Medium); unknown input is valid input.
    """
    t = aircraft_type.upper()
    if t in LARGE_AIRCRAFT_TYPES:
        return AircraftSize.LARGE
    if t in SMALL_AIRCRAFT_TYPES:
        return AircraftSize.SMALL
    return AircraftSize.MEDIUM
