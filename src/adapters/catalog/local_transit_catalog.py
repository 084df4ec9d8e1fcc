from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from src.app.ports.output import ITransitCatalog
from src.domain.models.catalog import Line, Pattern, Shape

from .parsing import parse_line, parse_pattern, parse_shape

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalTransitCatalog(ITransitCatalog):
    """Reads catalog JSON dumps from a directory.

    Layout mirrors the API paths:
      - lines.json
      - patterns/<pattern_id>.json
      - shapes/<shape_id>.json

    Env vars:
      - CATALOG_PATH: directory holding the dumps
    """

    base_path: str | Path | None = None

    def _base(self) -> Path:
        value = self.base_path or os.getenv("CATALOG_PATH") or "data/catalog"
        return Path(value)

    def _read_json(self, path: Path) -> Any | None:
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as fp:
                return json.load(fp)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read catalog file %s: %s", path, exc)
            return None

    async def list_lines(self) -> tuple[Line, ...]:
        payload = self._read_json(self._base() / "lines.json")
        if not isinstance(payload, list):
            return ()
        rows = [row for row in payload if isinstance(row, dict)]
        return tuple(line for line in map(parse_line, rows) if line is not None)

    async def get_patterns(self, pattern_ids: Iterable[str]) -> tuple[Pattern, ...]:
        out: list[Pattern] = []
        for pid in pattern_ids:
            if not pid:
                continue
            payload = self._read_json(self._base() / "patterns" / f"{pid}.json")
            pattern = parse_pattern(payload) if isinstance(payload, dict) else None
            if pattern is not None:
                out.append(pattern)
        return tuple(out)

    async def get_shape(self, shape_id: str) -> Shape | None:
        if not shape_id:
            return None
        payload = self._read_json(self._base() / "shapes" / f"{shape_id}.json")
        if not isinstance(payload, dict):
            return None
        return parse_shape(shape_id, payload)
