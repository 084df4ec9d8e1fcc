from __future__ import annotations

from dataclasses import dataclass

import httpx
import pytest

from src.adapters.api.dependencies import get_line_schedule_service
from src.app.services.line_schedule_service import LineScheduleService
from src.domain.models import Line, Pattern, ScheduleEntry, Shape, StopVisit, Trip
from src.main import app


@dataclass(slots=True)
class FakeTransitCatalog:
    lines: tuple[Line, ...]
    patterns: dict[str, Pattern]
    shapes: dict[str, Shape]

    async def list_lines(self) -> tuple[Line, ...]:
        return self.lines

    async def get_patterns(self, pattern_ids) -> tuple[Pattern, ...]:
        return tuple(self.patterns[p] for p in pattern_ids if p in self.patterns)

    async def get_shape(self, shape_id: str) -> Shape | None:
        return self.shapes.get(shape_id)


def _fake_service() -> LineScheduleService:
    def trip(trip_id: str, start: str, *dates: str) -> Trip:
        entry = ScheduleEntry(arrival_time=start, stop_id="a", stop_sequence=1)
        return Trip(id=trip_id, dates=frozenset(dates), schedule=(entry,))

    outbound = Pattern(
        id="1001_0_1",
        line_id="1001",
        direction=0,
        short_name="Reboleira",
        shape_id="S1",
        path=(
            StopVisit(
                stop_id="a", name="Alfragide", lat="38.73", lon="-9.2", stop_sequence=1
            ),
            StopVisit(
                stop_id="b", name="Reboleira", lat="38.75", lon="-9.22", stop_sequence=2
            ),
        ),
        trips=(
            trip("t2", "08:30:00", "20240101"),
            trip("t1", "06:45:00", "20240101", "20240105"),
        ),
    )
    inbound = Pattern(id="1001_1_1", line_id="1001", direction=1, shape_id="S2")
    catalog = FakeTransitCatalog(
        lines=(
            Line(
                id="1001",
                short_name="1001",
                long_name="Alfragide - Reboleira",
                color="#C61D23",
                pattern_ids=("1001_0_1", "1001_1_1"),
            ),
        ),
        patterns={p.id: p for p in (outbound, inbound)},
        shapes={"S1": Shape(id="S1", coordinates=((-9.1, 38.7), (-9.2, 38.8)))},
    )
    return LineScheduleService(catalog=catalog, gpx_creator="TestApp")


async def _get(path: str, **params) -> httpx.Response:
    app.dependency_overrides[get_line_schedule_service] = _fake_service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get(path, params=params)

    app.dependency_overrides.clear()
    return resp


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_lines() -> None:
    resp = await _get("/lines", q="reboleira")

    assert resp.status_code == 200
    assert [line["id"] for line in resp.json()] == ["1001"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_directions_for_line() -> None:
    resp = await _get("/lines/1001/directions")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["line"]["color"] == "#C61D23"
    assert payload["directions"] == [
        {"direction": 0, "label": "Reboleira", "pattern_count": 1},
        {"direction": 1, "label": "Volta", "pattern_count": 1},
    ]


@pytest.mark.unit
@pytest.mark.anyio
async def test_schedule_sorted_for_exact_date() -> None:
    resp = await _get("/lines/1001/schedule", direction=0, date="2024-01-01")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["is_fallback"] is False
    assert payload["service_date"] == "20240101"
    assert [t["trip_id"] for t in payload["trips"]] == ["t1", "t2"]
    assert payload["trips"][0]["start_time"] == "06:45:00"


@pytest.mark.unit
@pytest.mark.anyio
async def test_schedule_reports_fallback_date() -> None:
    resp = await _get("/lines/1001/schedule", direction=0, date="2024-01-03")

    payload = resp.json()
    assert payload["is_fallback"] is True
    assert payload["requested_date"] == "20240103"
    assert payload["service_date"] == "20240101"
    assert payload["service_date_display"] == "2024-01-01"


@pytest.mark.unit
@pytest.mark.anyio
async def test_schedule_without_service_is_not_an_error() -> None:
    resp = await _get("/lines/1001/schedule", direction=1, date="2024-01-01")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["has_service"] is False
    assert payload["trips"] == []


@pytest.mark.unit
@pytest.mark.anyio
async def test_unknown_line_is_404() -> None:
    resp = await _get("/lines/9999/directions")

    assert resp.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_pattern_detail_includes_shape() -> None:
    resp = await _get("/lines/1001/patterns/1001_0_1")

    assert resp.status_code == 200
    payload = resp.json()
    assert [s["stop_id"] for s in payload["stops"]] == ["a", "b"]
    assert payload["coordinates"] == [[-9.1, 38.7], [-9.2, 38.8]]


@pytest.mark.unit
@pytest.mark.anyio
async def test_gpx_download() -> None:
    resp = await _get("/lines/1001/patterns/1001_0_1/gpx", include_stops="true")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/gpx+xml")
    assert 'filename="1001_1001_0_1.gpx"' in resp.headers["content-disposition"]
    assert resp.text.count("<wpt ") == 2
    assert 'creator="TestApp"' in resp.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_gpx_download_without_shape_is_404() -> None:
    resp = await _get("/lines/1001/patterns/1001_1_1/gpx")

    assert resp.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_selection_round_trip() -> None:
    resp = await _get(
        "/selection", line="1001", active_pattern_id="1001_0_1", date="2024-01-01"
    )

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["query_params"] == {
        "line": "1001",
        "active_pattern_id": "1001_0_1",
    }
    assert payload["trip_id"] == "t2"
    assert payload["has_shape"] is True


@pytest.mark.unit
@pytest.mark.anyio
async def test_selection_without_params_and_unknown_line() -> None:
    empty = await _get("/selection", date="2024-01-01")
    missing = await _get("/selection", line="9999")

    assert empty.status_code == 200
    assert empty.json()["line"] is None
    assert empty.json()["query_params"] == {}
    assert missing.status_code == 404


@dataclass(slots=True)
class BrokenTransitCatalog:
    async def list_lines(self) -> tuple[Line, ...]:
        raise RuntimeError("catalog exploded")

    async def get_patterns(self, pattern_ids) -> tuple[Pattern, ...]:
        return ()

    async def get_shape(self, shape_id: str) -> Shape | None:
        return None


async def _get_broken(path: str) -> httpx.Response:
    app.dependency_overrides[get_line_schedule_service] = lambda: LineScheduleService(
        catalog=BrokenTransitCatalog()
    )

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get(path)

    app.dependency_overrides.clear()
    return resp


@pytest.mark.unit
@pytest.mark.anyio
async def test_unexpected_errors_are_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LINETRACK_REVEAL_ERRORS", raising=False)
    hidden = await _get_broken("/lines")

    monkeypatch.setenv("LINETRACK_REVEAL_ERRORS", "true")
    revealed = await _get_broken("/lines")

    assert hidden.status_code == 500
    assert hidden.json() == {"detail": "Internal Server Error"}
    assert revealed.status_code == 500
    assert revealed.json() == {"detail": "RuntimeError: catalog exploded"}
