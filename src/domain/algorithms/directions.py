from __future__ import annotations

from typing import Iterable

from src.domain.models.catalog import Pattern
from src.domain.models.itinerary import direction_label


def patterns_for_direction(
    patterns: Iterable[Pattern], direction: int
) -> tuple[Pattern, ...]:
    return tuple(p for p in patterns if p.direction == direction)


def available_directions(patterns: Iterable[Pattern]) -> tuple[int, ...]:
    return tuple(sorted({p.direction for p in patterns}))


def destination_label(patterns: Iterable[Pattern], direction: int) -> str:
    """Infer the destination shown for a direction.

    Each pattern votes for the name of its last stop (highest stop sequence),
    weighted by its trip count. Patterns without trips still weigh 1. The
    heaviest name wins; ties go to the name seen first.
    """

    fallback = direction_label(direction)
    weights: dict[str, int] = {}

    for pattern in patterns_for_direction(patterns, direction):
        if not pattern.path:
            continue
        last_stop = max(pattern.path, key=lambda visit: visit.stop_sequence)
        weight = len(pattern.trips) or 1
        weights[last_stop.name] = weights.get(last_stop.name, 0) + weight

    best_name = fallback
    best_weight = -1
    for name, weight in weights.items():
        if weight > best_weight:
            best_name = name
            best_weight = weight

    return best_name
