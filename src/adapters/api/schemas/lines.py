from __future__ import annotations

from pydantic import BaseModel


class LineSchema(BaseModel):
    id: str
    short_name: str
    long_name: str = ""
    color: str | None = None
    text_color: str | None = None
    pattern_ids: list[str] = []


class DirectionSchema(BaseModel):
    direction: int
    label: str
    pattern_count: int


class LineDirectionsSchema(BaseModel):
    line: LineSchema
    directions: list[DirectionSchema]


class StopVisitSchema(BaseModel):
    stop_id: str
    name: str
    lat: str | None = None
    lon: str | None = None
    stop_sequence: int


class PatternSummarySchema(BaseModel):
    id: str
    line_id: str
    direction: int
    headsign: str
    shape_id: str | None = None
    trip_count: int


class PatternDetailSchema(PatternSummarySchema):
    stops: list[StopVisitSchema]
    # GeoJSON order: [lon, lat]
    coordinates: list[tuple[float, float]] | None = None


class ScheduledTripSchema(BaseModel):
    trip_id: str
    pattern_id: str
    headsign: str
    start_time: str


class ScheduleSchema(BaseModel):
    line_id: str
    direction: int
    requested_date: str
    service_date: str | None = None
    service_date_display: str | None = None  # YYYY-MM-DD
    is_fallback: bool = False
    has_service: bool
    trips: list[ScheduledTripSchema]


class SelectionSchema(BaseModel):
    service_date: str
    line: LineSchema | None = None
    direction: int
    active_pattern_id: str | None = None
    trip_id: str | None = None
    has_shape: bool = False
    query_params: dict[str, str]
