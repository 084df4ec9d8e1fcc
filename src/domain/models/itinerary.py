from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .catalog import Pattern, Trip


class Direction(IntEnum):
    OUTBOUND = 0
    INBOUND = 1

    @property
    def default_label(self) -> str:
        return "Ida" if self is Direction.OUTBOUND else "Volta"


def direction_label(code: int) -> str:
    """Generic label for a direction code; anything but 0 reads as inbound."""

    if code == Direction.OUTBOUND:
        return Direction.OUTBOUND.default_label
    return Direction.INBOUND.default_label


@dataclass(frozen=True, slots=True)
class ScheduledTrip:
    trip: Trip
    pattern: Pattern
    start_time: str  # HH:MM:SS


@dataclass(frozen=True, slots=True)
class ResolvedItinerary:
    """Trips running for one direction on the date actually used.

    `service_date` is None when no date with service exists at all.
    """

    requested_date: str
    service_date: str | None = None
    is_fallback: bool = False
    entries: tuple[ScheduledTrip, ...] = ()

    @property
    def has_service(self) -> bool:
        return bool(self.entries)
