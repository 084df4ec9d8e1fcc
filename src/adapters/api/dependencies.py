from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.catalog import HttpTransitCatalog, LocalTransitCatalog
from src.app.ports.output import ITransitCatalog
from src.app.services.line_schedule_service import LineScheduleService


@lru_cache(maxsize=1)
def get_transit_catalog() -> ITransitCatalog:
    # One instance per process so the lines cache is shared across requests.
    if os.getenv("CATALOG_PATH"):
        return LocalTransitCatalog()
    return HttpTransitCatalog()


def get_line_schedule_service() -> LineScheduleService:
    service = LineScheduleService(catalog=get_transit_catalog())

    # Allow tuning via env without changing code.
    if os.getenv("GPX_CREATOR"):
        service.gpx_creator = os.environ["GPX_CREATOR"]
    if os.getenv("MAX_UNFILTERED_LINES"):
        service.max_unfiltered_lines = int(os.environ["MAX_UNFILTERED_LINES"])

    return service
