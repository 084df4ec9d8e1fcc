from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from src.domain.models import Selection


@dataclass(slots=True)
class SelectionSession:
    """Holds the current selection and drops results of superseded changes.

    Callers take a token with `begin()` before awaiting catalog data and hand
    it back to `commit()`. Only the most recently started change may commit.
    """

    current: Selection
    _generation: int = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def commit(self, token: int, selection: Selection) -> bool:
        if token != self._generation:
            return False
        self.current = selection
        return True

    async def apply(
        self, change: Callable[[Selection], Awaitable[Selection]]
    ) -> bool:
        """Run `change` against the current snapshot and commit if still fresh."""

        token = self.begin()
        updated = await change(self.current)
        return self.commit(token, updated)
