from __future__ import annotations

from datetime import date
from typing import Iterable

from src.domain.models.catalog import Pattern
from src.domain.models.itinerary import ResolvedItinerary, ScheduledTrip


def parse_service_date(value: date | str) -> str:
    """Normalize a date or ISO 'YYYY-MM-DD' string into 'YYYYMMDD'."""

    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    return value.strip().replace("-", "")


def format_service_date(service_date: str) -> str:
    """'20240105' -> '2024-01-05'."""

    if len(service_date) != 8:
        return service_date
    return f"{service_date[:4]}-{service_date[4:6]}-{service_date[6:]}"


def available_service_dates(patterns: Iterable[Pattern]) -> frozenset[str]:
    dates: set[str] = set()
    for pattern in patterns:
        for trip in pattern.trips:
            dates.update(trip.dates)
    return frozenset(dates)


def trips_on_date(
    patterns: Iterable[Pattern], service_date: str
) -> tuple[ScheduledTrip, ...]:
    """Trips running on a date, in pattern/trip collection order.

    Trips without a schedule have no start time and are left out.
    """

    out: list[ScheduledTrip] = []
    for pattern in patterns:
        for trip in pattern.trips:
            if not trip.runs_on(service_date):
                continue
            start_time = trip.start_time
            if start_time is None:
                continue
            out.append(ScheduledTrip(trip=trip, pattern=pattern, start_time=start_time))
    return tuple(out)


def closest_service_date(requested: str, available: Iterable[str]) -> str | None:
    """Latest available date not after the request, else the earliest one.

    Dates are fixed-width YYYYMMDD strings, so string order is date order.
    """

    ordered = sorted(set(available))
    if not ordered:
        return None

    past_or_equal = [d for d in ordered if d <= requested]
    if past_or_equal:
        return past_or_equal[-1]
    return ordered[0]


def resolve_itinerary(
    patterns: Iterable[Pattern], requested_date: str
) -> ResolvedItinerary:
    """Trips of the given (direction-filtered) patterns for a requested date.

    Falls back to `closest_service_date` when nothing runs on the request.
    The entries keep collection order; see `trip_ordering` for sorting.
    """

    patterns = tuple(patterns)

    entries = trips_on_date(patterns, requested_date)
    if entries:
        return ResolvedItinerary(
            requested_date=requested_date,
            service_date=requested_date,
            entries=entries,
        )

    fallback_date = closest_service_date(
        requested_date, available_service_dates(patterns)
    )
    # Also covers a requested date whose trips all lack a schedule.
    if fallback_date is None or fallback_date == requested_date:
        return ResolvedItinerary(requested_date=requested_date)

    return ResolvedItinerary(
        requested_date=requested_date,
        service_date=fallback_date,
        is_fallback=True,
        entries=trips_on_date(patterns, fallback_date),
    )
