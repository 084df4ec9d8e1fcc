from __future__ import annotations

from dataclasses import dataclass, replace

from .catalog import Line, Pattern, Shape


@dataclass(frozen=True, slots=True)
class Selection:
    """Immutable snapshot of what the user is looking at.

    Every change produces a new snapshot; derived views (directions,
    itinerary, GPX) are recomputed from it on demand.
    """

    service_date: str  # YYYYMMDD
    line: Line | None = None
    patterns: tuple[Pattern, ...] = ()
    direction: int = 0
    pattern: Pattern | None = None
    trip_id: str | None = None
    shape: Shape | None = None

    def with_line(self, line: Line, patterns: tuple[Pattern, ...]) -> Selection:
        # A new line drops everything derived from the previous one.
        return replace(
            self,
            line=line,
            patterns=patterns,
            direction=0,
            pattern=None,
            trip_id=None,
            shape=None,
        )

    def with_direction(self, direction: int) -> Selection:
        return replace(self, direction=int(direction))

    def with_date(self, service_date: str) -> Selection:
        return replace(self, service_date=service_date)

    def with_pattern(
        self, pattern: Pattern, *, shape: Shape | None, trip_id: str | None = None
    ) -> Selection:
        return replace(
            self,
            pattern=pattern,
            direction=pattern.direction,
            trip_id=trip_id,
            shape=shape,
        )

    def find_pattern(self, pattern_id: str) -> Pattern | None:
        return next((p for p in self.patterns if p.id == pattern_id), None)

    def query_params(self) -> dict[str, str]:
        """Navigation state as `line` / `active_pattern_id` query parameters."""

        params: dict[str, str] = {}
        if self.line is not None:
            params["line"] = self.line.short_name or self.line.id
        if self.pattern is not None:
            params["active_pattern_id"] = self.pattern.id
        return params
