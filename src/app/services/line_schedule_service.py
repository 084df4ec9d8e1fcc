from __future__ import annotations

from dataclasses import dataclass

from src.app.ports.output import ITransitCatalog
from src.domain.algorithms.directions import (
    available_directions,
    destination_label,
    patterns_for_direction,
)
from src.domain.algorithms.gpx import DEFAULT_CREATOR, build_gpx, gpx_filename
from src.domain.algorithms.service_calendar import resolve_itinerary
from src.domain.algorithms.trip_ordering import order_itinerary
from src.domain.exceptions import LineNotFound, PatternNotFound, ShapeNotFound
from src.domain.models import Line, Pattern, ResolvedItinerary, Selection


@dataclass(frozen=True, slots=True)
class DirectionSummary:
    direction: int
    label: str
    pattern_count: int


@dataclass(slots=True)
class LineScheduleService:
    """Use cases behind the line/schedule/track views.

    Catalog reads are async; everything derived from a `Selection` is pure
    and returns new values instead of mutating the snapshot.
    """

    catalog: ITransitCatalog
    gpx_creator: str = DEFAULT_CREATOR
    max_unfiltered_lines: int = 50

    async def search_lines(self, query: str | None = None) -> tuple[Line, ...]:
        lines = await self.catalog.list_lines()
        needle = (query or "").strip().lower()
        if not needle:
            return lines[: self.max_unfiltered_lines]
        return tuple(
            line
            for line in lines
            if needle in line.short_name.lower() or needle in line.long_name.lower()
        )

    async def find_line(self, key: str) -> Line:
        for line in await self.catalog.list_lines():
            if line.short_name == key or line.id == key:
                return line
        raise LineNotFound(f"Unknown line: {key}")

    async def load_line(self, selection: Selection, line: Line) -> Selection:
        patterns = await self.catalog.get_patterns(line.pattern_ids)
        return selection.with_line(line, patterns)

    async def select_line(self, selection: Selection, key: str) -> Selection:
        return await self.load_line(selection, await self.find_line(key))

    def directions(self, selection: Selection) -> tuple[DirectionSummary, ...]:
        return tuple(
            DirectionSummary(
                direction=d,
                label=destination_label(selection.patterns, d),
                pattern_count=len(patterns_for_direction(selection.patterns, d)),
            )
            for d in available_directions(selection.patterns)
        )

    def patterns(self, selection: Selection) -> tuple[Pattern, ...]:
        return patterns_for_direction(selection.patterns, selection.direction)

    def itinerary(self, selection: Selection) -> ResolvedItinerary:
        resolved = resolve_itinerary(self.patterns(selection), selection.service_date)
        return order_itinerary(resolved)

    async def select_pattern(
        self, selection: Selection, pattern_id: str, *, trip_id: str | None = None
    ) -> Selection:
        pattern = selection.find_pattern(pattern_id)
        if pattern is None:
            raise PatternNotFound(f"Pattern {pattern_id} is not part of this line")

        if trip_id is not None and all(t.id != trip_id for t in pattern.trips):
            trip_id = None

        # Geometry is only fetched once a pattern is actually chosen.
        shape = None
        if pattern.shape_id:
            shape = await self.catalog.get_shape(pattern.shape_id)

        return selection.with_pattern(pattern, shape=shape, trip_id=trip_id)

    async def restore(
        self,
        *,
        service_date: str,
        line_key: str | None = None,
        active_pattern_id: str | None = None,
    ) -> Selection:
        """Rebuild a selection from `line` / `active_pattern_id` parameters."""

        selection = Selection(service_date=service_date)
        if not line_key:
            return selection

        selection = await self.select_line(selection, line_key)
        if not active_pattern_id:
            return selection

        pattern = selection.find_pattern(active_pattern_id)
        if pattern is None:
            return selection

        first_trip = pattern.trips[0].id if pattern.trips else None
        return await self.select_pattern(selection, pattern.id, trip_id=first_trip)

    def export_gpx(
        self, selection: Selection, *, include_stops: bool = False
    ) -> tuple[str, str]:
        """Return `(filename, document)` for the selected pattern."""

        if selection.pattern is None:
            raise PatternNotFound("No pattern selected")
        if selection.shape is None:
            raise ShapeNotFound(f"No shape available for {selection.pattern.id}")

        document = build_gpx(
            selection.pattern,
            selection.shape,
            include_stops=include_stops,
            creator=self.gpx_creator,
        )
        return gpx_filename(selection.pattern, selection.line), document
