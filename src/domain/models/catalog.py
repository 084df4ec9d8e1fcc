from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Line:
    """Public transit line as listed by the catalog."""

    id: str
    short_name: str
    long_name: str = ""
    color: str | None = None  # e.g. '#ED1944'
    text_color: str | None = None
    pattern_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StopVisit:
    stop_id: str
    name: str
    lat: str | None  # as sent by the catalog, e.g. "38.70"
    lon: str | None
    stop_sequence: int

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    """One stop of a trip. Arrival time is HH:MM:SS and may exceed 24h."""

    arrival_time: str
    stop_id: str
    stop_sequence: int


@dataclass(frozen=True, slots=True)
class Trip:
    id: str
    dates: frozenset[str] = frozenset()  # YYYYMMDD
    schedule: tuple[ScheduleEntry, ...] = ()

    @property
    def start_time(self) -> str | None:
        if not self.schedule:
            return None
        return self.schedule[0].arrival_time

    def runs_on(self, service_date: str) -> bool:
        return service_date in self.dates


@dataclass(frozen=True, slots=True)
class Pattern:
    """A routing variant of a line for one direction."""

    id: str
    line_id: str
    direction: int
    route_id: str | None = None
    short_name: str | None = None  # headsign
    shape_id: str | None = None
    path: tuple[StopVisit, ...] = ()
    trips: tuple[Trip, ...] = ()

    @property
    def display_name(self) -> str:
        return self.short_name or self.id


@dataclass(frozen=True, slots=True)
class Shape:
    """Pattern geometry as GeoJSON-ordered (lon, lat) pairs."""

    id: str
    coordinates: tuple[tuple[float, float], ...] = ()
