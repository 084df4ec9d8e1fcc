from .catalog import Line, Pattern, ScheduleEntry, Shape, StopVisit, Trip
from .itinerary import Direction, ResolvedItinerary, ScheduledTrip, direction_label
from .selection import Selection

__all__ = [
    "Direction",
    "Line",
    "Pattern",
    "ResolvedItinerary",
    "ScheduleEntry",
    "ScheduledTrip",
    "Selection",
    "Shape",
    "StopVisit",
    "Trip",
    "direction_label",
]
