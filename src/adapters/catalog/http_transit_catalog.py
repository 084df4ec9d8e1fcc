from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Iterable

import httpx

from src.app.ports.output import ITransitCatalog
from src.domain.models.catalog import Line, Pattern, Shape

from .parsing import parse_line, parse_pattern, parse_shape

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.carrismetropolitana.pt"


@dataclass(slots=True)
class HttpTransitCatalog(ITransitCatalog):
    """Reads lines, patterns and shapes from the catalog REST API.

    Env vars:
      - CATALOG_API_URL: API base URL (default: Carris Metropolitana)
      - CATALOG_TIMEOUT_S: request timeout (default 10)
      - CATALOG_CACHE_TTL_S: in-process TTL for the lines list (default 300)

    Notes:
      - Any transport or HTTP error is logged and reported as "no data".
      - Patterns and shapes are not cached; they belong to one selection.
    """

    base_url: str | None = None
    timeout_s: float = 10.0
    cache_ttl_s: float = 300.0
    transport: httpx.AsyncBaseTransport | None = None

    # In-process cache
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _cached_at_monotonic: float = 0.0
    _cached_lines: tuple[Line, ...] = ()

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("CATALOG_API_URL") or DEFAULT_API_URL
        if os.getenv("CATALOG_TIMEOUT_S"):
            self.timeout_s = float(os.environ["CATALOG_TIMEOUT_S"])
        if os.getenv("CATALOG_CACHE_TTL_S"):
            self.cache_ttl_s = float(os.environ["CATALOG_CACHE_TTL_S"])

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=(self.base_url or DEFAULT_API_URL).rstrip("/"),
            timeout=self.timeout_s,
            transport=self.transport,
        )

    async def _get_json(self, client: httpx.AsyncClient, path: str) -> Any | None:
        try:
            resp = await client.get(path)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Catalog request failed for %s: %s", path, exc)
            return None

    async def list_lines(self) -> tuple[Line, ...]:
        async with self._lock:
            now_mono = time.monotonic()
            if (
                self._cached_lines
                and (now_mono - self._cached_at_monotonic) < self.cache_ttl_s
            ):
                return self._cached_lines

            async with self._client() as client:
                payload = await self._get_json(client, "/lines")

            if not isinstance(payload, list):
                return ()

            rows = [row for row in payload if isinstance(row, dict)]
            lines = tuple(line for line in map(parse_line, rows) if line is not None)

            self._cached_at_monotonic = time.monotonic()
            self._cached_lines = lines
            return lines

    async def get_patterns(self, pattern_ids: Iterable[str]) -> tuple[Pattern, ...]:
        ids = [pid for pid in pattern_ids if pid]
        if not ids:
            return ()

        async with self._client() as client:
            payloads = await asyncio.gather(
                *(self._get_json(client, f"/patterns/{pid}") for pid in ids)
            )

        out: list[Pattern] = []
        for pid, payload in zip(ids, payloads):
            pattern = parse_pattern(payload) if isinstance(payload, dict) else None
            if pattern is None:
                logger.info("Dropping unresolved pattern %s", pid)
                continue
            out.append(pattern)
        return tuple(out)

    async def get_shape(self, shape_id: str) -> Shape | None:
        if not shape_id:
            return None

        async with self._client() as client:
            payload = await self._get_json(client, f"/shapes/{shape_id}")

        if not isinstance(payload, dict):
            return None
        return parse_shape(shape_id, payload)
