"""
HTTP tests for the calendar API.

Each test runs against a fresh sqlite file; the app is driven
in-process through ``httpx.ASGITransport``.
"""
from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from event_calendar_api.app.main import create_app
from event_calendar_api.app.services.calendar_service import CalendarService

MEETING = {
    "title": "Stage setup",
    "start_time": "2026-10-19T09:00:00Z",
    "end_time": "2026-10-19T10:00:00Z",
}


@pytest.fixture
def app(temp_db):
    return create_app()


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_info_exposes_grid_constants(app) -> None:
    async with _client(app) as client:
        response = await client.get("/api/v1/info/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"]
    assert data["calendar"]["hour_height"] == 64
    assert data["calendar"]["snap_minutes"] == 15


@pytest.mark.asyncio
async def test_default_calendar_exists(app) -> None:
    async with _client(app) as client:
        response = await client.get("/api/v1/calendars/")

    calendars = response.json()
    assert [c["is_default"] for c in calendars] == [True]
    assert await CalendarService.get_default_calendar_id() == calendars[0]["id"]


@pytest.mark.asyncio
async def test_calendar_crud(app) -> None:
    async with _client(app) as client:
        created = await client.post("/api/v1/calendars/", json={"name": "Logistics", "color": "#22c55e"})
        assert created.status_code == 201
        calendar_id = created.json()["id"]

        hidden = await client.put(f"/api/v1/calendars/{calendar_id}", json={"is_visible": False})
        assert hidden.status_code == 200
        assert hidden.json()["is_visible"] is False
        assert hidden.json()["color"] == "#22c55e"

        assert (await client.post("/api/v1/calendars/", json={"name": "Bad", "color": "red"})).status_code == 422
        assert (await client.put("/api/v1/calendars/999", json={"name": "x"})).status_code == 404

        assert (await client.delete(f"/api/v1/calendars/{calendar_id}")).status_code == 204
        assert (await client.delete(f"/api/v1/calendars/{calendar_id}")).status_code == 404


@pytest.mark.asyncio
async def test_entry_crud(app) -> None:
    async with _client(app) as client:
        created = await client.post("/api/v1/entries/", json=MEETING)
        assert created.status_code == 201
        entry = created.json()
        assert entry["calendar_id"] is not None

        listed = await client.get(
            "/api/v1/entries/", params={"start": "2026-10-19T00:00:00", "end": "2026-10-26T00:00:00"}
        )
        assert [e["id"] for e in listed.json()] == [entry["id"]]

        outside = await client.get(
            "/api/v1/entries/", params={"start": "2026-10-20T00:00:00", "end": "2026-10-21T00:00:00"}
        )
        assert outside.json() == []

        renamed = await client.put(f"/api/v1/entries/{entry['id']}", json={"title": "Sound check"})
        assert renamed.json()["title"] == "Sound check"
        assert renamed.json()["start_time"].startswith("2026-10-19T09:00:00")

        inverted = await client.put(
            f"/api/v1/entries/{entry['id']}", json={"end_time": "2026-10-19T08:00:00Z"}
        )
        assert inverted.status_code == 422

        assert (await client.delete(f"/api/v1/entries/{entry['id']}")).status_code == 204
        assert (await client.get(f"/api/v1/entries/{entry['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_entry_validation(app) -> None:
    async with _client(app) as client:
        inverted = {**MEETING, "end_time": "2026-10-19T08:00:00Z"}
        assert (await client.post("/api/v1/entries/", json=inverted)).status_code == 422

        unknown_calendar = {**MEETING, "calendar_id": 999}
        assert (await client.post("/api/v1/entries/", json=unknown_calendar)).status_code == 404

        bad_range = await client.get("/api/v1/entries/", params={"start": "yesterday", "end": "today"})
        assert bad_range.status_code == 422


@pytest.mark.asyncio
async def test_week_view(app) -> None:
    async with _client(app) as client:
        await client.post("/api/v1/entries/", json=MEETING)
        response = await client.get("/api/v1/views/week", params={"anchor": "2026-10-21"})

    assert response.status_code == 200
    layout = response.json()
    assert layout["days"][0] == "2026-10-19"
    assert len(layout["hours"]) == 24
    rect = layout["timed"][0]
    assert rect["top"] == 576
    assert rect["height"] == 64
    assert rect["entry"]["title"] == "Stage setup"


@pytest.mark.asyncio
async def test_month_view_hides_hidden_calendars(app) -> None:
    async with _client(app) as client:
        calendar = (await client.post("/api/v1/calendars/", json={"name": "Private"})).json()
        await client.post("/api/v1/entries/", json=MEETING)
        await client.post("/api/v1/entries/", json={**MEETING, "title": "Secret", "calendar_id": calendar["id"]})
        await client.put(f"/api/v1/calendars/{calendar['id']}", json={"is_visible": False})

        response = await client.get("/api/v1/views/month", params={"anchor": "2026-10-19"})

    layout = response.json()
    assert layout["view"] == "month"
    assert len(layout["weeks"]) == 5
    titles = [chip["entry"]["title"] for week in layout["weeks"] for cell in week for chip in cell["chips"]]
    assert titles == ["Stage setup"]


@pytest.mark.asyncio
async def test_navigation(app) -> None:
    async with _client(app) as client:
        response = await client.get(
            "/api/v1/views/week/navigate", params={"anchor": "2026-10-21", "direction": "next"}
        )
        unknown = await client.get("/api/v1/views/year", params={"anchor": "2026-10-21"})

    data = response.json()
    assert data["anchor"] == "2026-10-28"
    assert data["header"] == "Oct 26 - Nov 1, 2026"
    assert data["period_start"].startswith("2026-10-26T00:00:00")
    assert unknown.status_code == 422


@pytest.mark.asyncio
async def test_replay_move_persists(app) -> None:
    async with _client(app) as client:
        entry = (await client.post("/api/v1/entries/", json=MEETING)).json()
        response = await client.post(
            "/api/v1/gestures/replay",
            json={
                "view": "week",
                "anchor": "2026-10-19",
                "events": [
                    {"type": "down", "target": "entry", "entry_id": entry["id"], "day_index": 0, "y": 590},
                    {"type": "move", "day_index": 2, "y": 610},
                    {"type": "up"},
                ],
            },
        )
        stored = (await client.get(f"/api/v1/entries/{entry['id']}")).json()

    assert response.status_code == 200
    result = response.json()
    assert result["state"] == "idle"
    assert result["transitions"] == ["moving"]
    assert [c["kind"] for c in result["commits"]] == ["move"]
    assert stored["start_time"].startswith("2026-10-21T09:15:00")
    assert stored["end_time"].startswith("2026-10-21T10:15:00")


@pytest.mark.asyncio
async def test_replay_dry_run_and_create(app) -> None:
    async with _client(app) as client:
        dry = await client.post(
            "/api/v1/gestures/replay",
            json={
                "anchor": "2026-10-19",
                "dry_run": True,
                "events": [
                    {"type": "down", "target": "cell", "day_index": 1, "y": 100},
                    {"type": "move", "day_index": 1, "y": 40},
                ],
            },
        )
        assert dry.json()["state"] == "creating"
        assert dry.json()["preview"]["top"] == 48
        assert dry.json()["commits"] == []

        created = await client.post(
            "/api/v1/gestures/replay",
            json={
                "anchor": "2026-10-19",
                "title": "Briefing",
                "events": [
                    {"type": "down", "target": "cell", "day_index": 1, "y": 600},
                    {"type": "up"},
                ],
            },
        )
        listed = await client.get(
            "/api/v1/entries/", params={"start": "2026-10-20T00:00:00", "end": "2026-10-21T00:00:00"}
        )

    commit = created.json()["commits"][0]
    assert commit["kind"] == "create"
    assert commit["persisted"]["title"] == "Briefing"
    assert [e["title"] for e in listed.json()] == ["Briefing"]
    assert listed.json()[0]["start_time"].startswith("2026-10-20T09:30:00")


@pytest.mark.asyncio
async def test_replay_rejects_incomplete_events(app) -> None:
    async with _client(app) as client:
        response = await client.post(
            "/api/v1/gestures/replay",
            json={"anchor": "2026-10-19", "events": [{"type": "down", "target": "handle", "entry_id": 1}]},
        )

    assert response.status_code == 422
