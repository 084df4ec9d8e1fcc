from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from src.adapters.api.dependencies import get_line_schedule_service
from src.adapters.api.schemas.lines import (
    DirectionSchema,
    LineDirectionsSchema,
    LineSchema,
    PatternDetailSchema,
    PatternSummarySchema,
    ScheduledTripSchema,
    ScheduleSchema,
    SelectionSchema,
    StopVisitSchema,
)
from src.app.services.line_schedule_service import LineScheduleService
from src.app.services.selection_session import SelectionSession
from src.domain.algorithms.gpx import GPX_MEDIA_TYPE
from src.domain.algorithms.service_calendar import (
    format_service_date,
    parse_service_date,
)
from src.domain.exceptions import CatalogError
from src.domain.models import Line, Pattern, Selection, direction_label

router = APIRouter(prefix="/lines", tags=["lines"])
selection_router = APIRouter(tags=["selection"])


def _service_date(value: date | None) -> str:
    return parse_service_date(value or datetime.now().date())


def _line_to_schema(line: Line) -> LineSchema:
    return LineSchema(
        id=line.id,
        short_name=line.short_name,
        long_name=line.long_name,
        color=line.color,
        text_color=line.text_color,
        pattern_ids=list(line.pattern_ids),
    )


def _pattern_to_summary(pattern: Pattern) -> PatternSummarySchema:
    return PatternSummarySchema(
        id=pattern.id,
        line_id=pattern.line_id,
        direction=pattern.direction,
        headsign=pattern.short_name or direction_label(pattern.direction),
        shape_id=pattern.shape_id,
        trip_count=len(pattern.trips),
    )


async def _load(
    service: LineScheduleService, line_key: str, service_date: str
) -> tuple[Line, Selection]:
    try:
        line = await service.find_line(line_key)
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    selection = await service.load_line(Selection(service_date=service_date), line)
    return line, selection


async def _load_pattern(
    service: LineScheduleService, line_key: str, pattern_id: str
) -> tuple[Pattern, Selection]:
    _, selection = await _load(service, line_key, _service_date(None))
    pattern = selection.find_pattern(pattern_id)
    if pattern is None:
        raise HTTPException(status_code=404, detail=f"Unknown pattern: {pattern_id}")

    return pattern, await service.select_pattern(selection, pattern.id)


@router.get("", response_model=list[LineSchema])
async def search_lines(
    q: str | None = Query(default=None),
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> list[LineSchema]:
    return [_line_to_schema(line) for line in await service.search_lines(q)]


@router.get("/{line_key}/directions", response_model=LineDirectionsSchema)
async def get_directions(
    line_key: str,
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> LineDirectionsSchema:
    line, selection = await _load(service, line_key, _service_date(None))
    return LineDirectionsSchema(
        line=_line_to_schema(line),
        directions=[
            DirectionSchema(
                direction=d.direction, label=d.label, pattern_count=d.pattern_count
            )
            for d in service.directions(selection)
        ],
    )


@router.get("/{line_key}/schedule", response_model=ScheduleSchema)
async def get_schedule(
    line_key: str,
    direction: int = Query(default=0, ge=0, le=1),
    service_date: date | None = Query(default=None, alias="date"),
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> ScheduleSchema:
    line, selection = await _load(service, line_key, _service_date(service_date))
    selection = selection.with_direction(direction)
    itinerary = service.itinerary(selection)

    return ScheduleSchema(
        line_id=line.id,
        direction=selection.direction,
        requested_date=itinerary.requested_date,
        service_date=itinerary.service_date,
        service_date_display=(
            format_service_date(itinerary.service_date)
            if itinerary.service_date
            else None
        ),
        is_fallback=itinerary.is_fallback,
        has_service=itinerary.has_service,
        trips=[
            ScheduledTripSchema(
                trip_id=entry.trip.id,
                pattern_id=entry.pattern.id,
                headsign=entry.pattern.short_name
                or direction_label(entry.pattern.direction),
                start_time=entry.start_time,
            )
            for entry in itinerary.entries
        ],
    )


@router.get("/{line_key}/patterns", response_model=list[PatternSummarySchema])
async def list_patterns(
    line_key: str,
    direction: int = Query(default=0, ge=0, le=1),
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> list[PatternSummarySchema]:
    _, selection = await _load(service, line_key, _service_date(None))
    selection = selection.with_direction(direction)
    return [_pattern_to_summary(p) for p in service.patterns(selection)]


@router.get("/{line_key}/patterns/{pattern_id}", response_model=PatternDetailSchema)
async def get_pattern(
    line_key: str,
    pattern_id: str,
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> PatternDetailSchema:
    pattern, selection = await _load_pattern(service, line_key, pattern_id)

    summary = _pattern_to_summary(pattern)
    return PatternDetailSchema(
        **summary.model_dump(),
        stops=[
            StopVisitSchema(
                stop_id=v.stop_id,
                name=v.name,
                lat=v.lat,
                lon=v.lon,
                stop_sequence=v.stop_sequence,
            )
            for v in pattern.path
        ],
        coordinates=(
            list(selection.shape.coordinates)
            if selection.shape is not None
            else None
        ),
    )


@router.get("/{line_key}/patterns/{pattern_id}/gpx")
async def download_gpx(
    line_key: str,
    pattern_id: str,
    include_stops: bool = Query(default=False),
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> Response:
    _, selection = await _load_pattern(service, line_key, pattern_id)
    try:
        filename, document = service.export_gpx(
            selection, include_stops=include_stops
        )
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return Response(
        content=document,
        media_type=GPX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@selection_router.get("/selection", response_model=SelectionSchema)
async def restore_selection(
    line: str | None = Query(default=None),
    active_pattern_id: str | None = Query(default=None),
    service_date: date | None = Query(default=None, alias="date"),
    service: LineScheduleService = Depends(get_line_schedule_service),
) -> SelectionSchema:
    session = SelectionSession(
        current=Selection(service_date=_service_date(service_date))
    )

    async def restore(current: Selection) -> Selection:
        return await service.restore(
            service_date=current.service_date,
            line_key=line,
            active_pattern_id=active_pattern_id,
        )

    try:
        await session.apply(restore)
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    selection = session.current
    return SelectionSchema(
        service_date=selection.service_date,
        line=_line_to_schema(selection.line) if selection.line else None,
        direction=selection.direction,
        active_pattern_id=selection.pattern.id if selection.pattern else None,
        trip_id=selection.trip_id,
        has_shape=selection.shape is not None,
        query_params=selection.query_params(),
    )
