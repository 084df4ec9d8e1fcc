from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from src.domain.models.catalog import Line, Pattern, Shape


class ITransitCatalog(ABC):
    """Port for reading lines, patterns and shapes from a transit catalog.

    Implementations degrade failures to empty results instead of raising.
    """

    @abstractmethod
    async def list_lines(self) -> tuple[Line, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_patterns(self, pattern_ids: Iterable[str]) -> tuple[Pattern, ...]:
        """Return the patterns that resolved, in request order."""

    @abstractmethod
    async def get_shape(self, shape_id: str) -> Shape | None:
        raise NotImplementedError
