from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from src.domain.models.itinerary import ResolvedItinerary, ScheduledTrip


def order_by_start_time(
    entries: Iterable[ScheduledTrip],
) -> tuple[ScheduledTrip, ...]:
    """Sort by HH:MM:SS start time as plain strings.

    Extended-hour times (e.g. '25:10:00') sort after same-day times. The sort
    is stable, so equal start times keep their input order.
    """

    return tuple(sorted(entries, key=lambda entry: entry.start_time))


def order_itinerary(itinerary: ResolvedItinerary) -> ResolvedItinerary:
    return replace(itinerary, entries=order_by_start_time(itinerary.entries))
