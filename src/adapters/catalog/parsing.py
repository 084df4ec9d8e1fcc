from __future__ import annotations

from typing import Any, Mapping

from src.domain.models.catalog import (
    Line,
    Pattern,
    ScheduleEntry,
    Shape,
    StopVisit,
    Trip,
)


def _text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _coordinate(raw: Any) -> str | None:
    # Kept as sent; blanks mean "unknown".
    return _text(raw) or None


def _int(raw: Any, default: int = 0) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _mappings(raw: Any) -> list[Mapping[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, Mapping)]


def _is_list_or_missing(raw: Any) -> bool:
    return raw is None or isinstance(raw, list)


def parse_line(row: Mapping[str, Any]) -> Line | None:
    line_id = _text(row.get("id"))
    if not line_id:
        return None
    raw_patterns = row.get("patterns")
    return Line(
        id=line_id,
        short_name=_text(row.get("short_name")) or line_id,
        long_name=_text(row.get("long_name")),
        color=_text(row.get("color")) or None,
        text_color=_text(row.get("text_color")) or None,
        pattern_ids=tuple(
            _text(p)
            for p in (raw_patterns if isinstance(raw_patterns, list) else ())
            if _text(p)
        ),
    )


def _parse_stop_visit(row: Mapping[str, Any]) -> StopVisit | None:
    stop = row.get("stop")
    if not isinstance(stop, Mapping):
        return None
    stop_id = _text(stop.get("id"))
    if not stop_id:
        return None
    return StopVisit(
        stop_id=stop_id,
        name=_text(stop.get("name")) or stop_id,
        lat=_coordinate(stop.get("lat")),
        lon=_coordinate(stop.get("lon")),
        stop_sequence=_int(row.get("stop_sequence")),
    )


def _parse_trip(row: Mapping[str, Any]) -> Trip | None:
    trip_id = _text(row.get("id"))
    if not trip_id:
        return None

    schedule: list[ScheduleEntry] = []
    for entry in _mappings(row.get("schedule")):
        arrival = _text(entry.get("arrival_time"))
        if not arrival:
            continue
        schedule.append(
            ScheduleEntry(
                arrival_time=arrival,
                stop_id=_text(entry.get("stop_id")),
                stop_sequence=_int(entry.get("stop_sequence")),
            )
        )
    schedule.sort(key=lambda e: e.stop_sequence)

    raw_dates = row.get("dates")
    dates = raw_dates if isinstance(raw_dates, list) else ()

    return Trip(
        id=trip_id,
        dates=frozenset(_text(d) for d in dates if _text(d)),
        schedule=tuple(schedule),
    )


def parse_pattern(row: Mapping[str, Any]) -> Pattern | None:
    """Build a Pattern, or None when the payload is not shaped like one.

    Malformed stops and trips inside an otherwise valid pattern are skipped.
    """

    if not isinstance(row, Mapping):
        return None
    pattern_id = _text(row.get("id"))
    if not pattern_id:
        return None
    if not all(_is_list_or_missing(row.get(key)) for key in ("path", "trips")):
        return None

    path = [v for v in map(_parse_stop_visit, _mappings(row.get("path"))) if v]
    path.sort(key=lambda v: v.stop_sequence)
    trips = [t for t in map(_parse_trip, _mappings(row.get("trips"))) if t]

    return Pattern(
        id=pattern_id,
        line_id=_text(row.get("line_id")),
        direction=_int(row.get("direction")),
        route_id=_text(row.get("route_id")) or None,
        short_name=_text(row.get("short_name")) or None,
        shape_id=_text(row.get("shape_id")) or None,
        path=tuple(path),
        trips=tuple(trips),
    )


def parse_shape(shape_id: str, payload: Mapping[str, Any]) -> Shape | None:
    geojson = payload.get("geojson")
    geometry = geojson.get("geometry") if isinstance(geojson, Mapping) else None
    if not isinstance(geometry, Mapping):
        return None
    raw_coords = geometry.get("coordinates")
    if not isinstance(raw_coords, list):
        return None

    coords: list[tuple[float, float]] = []
    for pair in raw_coords:
        try:
            lon, lat = pair[0], pair[1]
        except (TypeError, IndexError, KeyError):
            continue
        coords.append((lon, lat))

    return Shape(id=shape_id, coordinates=tuple(coords))
