"""HTTP Routes — end-to-end through the FastAPI app with SQLite and the fake dataset.

Tests cover:
    - Health and readiness probes
    - Daily grid: fresh generation, then served from cache
    - Admin gate: 401 without a key, 401 with a wrong key
    - Template lifecycle: create → publish → daily grid is curated → 409 on a
      second publish for the same date → unpublish
    - Validation preview; MALFORMED_GRID and VALIDATION_ERROR responses with
      located field details; domain errors logged with their grid context
    - Cell solutions and guess checks
    - Suggestions and cache housekeeping endpoints
"""

import logging

from dailygrid.api.dependencies import admin_identity
from tests.services.grids import (
    ADMIN_HEADERS, ONE_IMPOSSIBLE_COLS, ONE_IMPOSSIBLE_ROWS, SAFE_COLS, SAFE_ROWS,
    as_payload,
)

GRID_DATE = "2026-10-20"


def _template_body(title: str = "Wimbledon Day", scheduled_date: str | None = GRID_DATE):
    return {
        "title": title,
        "difficulty": "easy",
        "row_attributes": as_payload(SAFE_ROWS),
        "col_attributes": as_payload(SAFE_COLS),
        "scheduled_date": scheduled_date,
    }


async def _create(client, **kwargs) -> dict:
    resp = await client.post(
        "/api/v1/admin/templates", json=_template_body(**kwargs), headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201
    return resp.json()


# ─── Health ─────────────────────────────────────────────────────

async def test_health(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_readiness(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["database"] == "healthy"


# ─── Daily grid ─────────────────────────────────────────────────

async def test_daily_grid_generated_then_cached(client):
    first = await client.get("/api/v1/daily-grid", params={"date": "2026-10-16"})
    assert first.status_code == 200
    body = first.json()
    assert body["source"] == "fresh-generated"
    assert body["date"] == "2026-10-16"
    assert len(body["rows"]) == 3 and len(body["columns"]) == 3
    assert "title" not in body

    second = await client.get("/api/v1/daily-grid", params={"date": "2026-10-16"})
    cached = second.json()
    assert cached["source"] == "cached-generated"
    assert cached["rows"] == body["rows"]
    assert cached["columns"] == body["columns"]


async def test_daily_grid_bad_date_is_validation_error(client):
    resp = await client.get("/api/v1/daily-grid", params={"date": "not-a-date"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    detail = resp.json()["error"]["details"][0]
    assert detail["location"] == "query"
    assert detail["field"] == "date"


# ─── Admin gate ─────────────────────────────────────────────────

async def test_admin_routes_require_key(client):
    resp = await client.get("/api/v1/admin/templates")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "ADMIN_ACCESS_REQUIRED"


async def test_admin_routes_reject_wrong_key(client):
    resp = await client.get(
        "/api/v1/admin/cache/stats", headers={"X-Admin-Key": "nope"},
    )
    assert resp.status_code == 401


# ─── Templates ──────────────────────────────────────────────────

async def test_template_lifecycle(client):
    created = await _create(client)
    template = created["template"]
    assert template["published"] is False
    assert template["created_by"] == admin_identity("test-admin-key")
    assert "test-admin-key" not in template["created_by"]
    assert created["validation"]["summary"]["valid_cells"] == 9

    resp = await client.post(
        f"/api/v1/admin/templates/{template['id']}/publish", headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["template"]["published"] is True

    grid = (await client.get("/api/v1/daily-grid", params={"date": GRID_DATE})).json()
    assert grid["source"] == "fresh-curated"
    assert grid["title"] == "Wimbledon Day"
    assert grid["template_id"] == template["id"]

    other = (await _create(client, title="Clay Day"))["template"]
    conflict = await client.post(
        f"/api/v1/admin/templates/{other['id']}/publish", headers=ADMIN_HEADERS,
    )
    assert conflict.status_code == 409
    error = conflict.json()["error"]
    assert error["code"] == "TEMPLATE_CONFLICT"
    assert error["conflict"]["template_id"] == template["id"]

    locked = await client.delete(
        f"/api/v1/admin/templates/{template['id']}", headers=ADMIN_HEADERS,
    )
    assert locked.status_code == 400
    assert locked.json()["error"]["code"] == "TEMPLATE_IMMUTABLE"

    resp = await client.delete(
        f"/api/v1/admin/templates/{template['id']}/publish", headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["template"]["published"] is False


async def test_conflict_is_logged_with_grid_context(client, caplog):
    first = (await _create(client))["template"]
    second = (await _create(client, title="Clay Day"))["template"]
    await client.post(
        f"/api/v1/admin/templates/{first['id']}/publish", headers=ADMIN_HEADERS,
    )

    with caplog.at_level(logging.WARNING, logger="dailygrid.api.error_handlers"):
        await client.post(
            f"/api/v1/admin/templates/{second['id']}/publish",
            headers=ADMIN_HEADERS,
        )

    [record] = [
        r for r in caplog.records
        if getattr(r, "error_code", None) == "TEMPLATE_CONFLICT"
    ]
    assert record.levelno == logging.WARNING
    assert record.grid_date == GRID_DATE
    assert record.template_id == second["id"]


async def test_list_and_filter_templates(client):
    await _create(client, title="A", scheduled_date=None)
    await _create(client, title="B", scheduled_date=None)

    resp = await client.get(
        "/api/v1/admin/templates",
        params={"status": "draft", "limit": 1},
        headers=ADMIN_HEADERS,
    )
    body = resp.json()
    assert resp.status_code == 200
    assert len(body["templates"]) == 1
    assert body["pagination"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}

    published = await client.get(
        "/api/v1/admin/templates", params={"status": "published"}, headers=ADMIN_HEADERS,
    )
    assert published.json()["templates"] == []


async def test_update_and_delete_draft(client):
    template = (await _create(client, scheduled_date=None))["template"]

    resp = await client.patch(
        f"/api/v1/admin/templates/{template['id']}",
        json={"title": "Renamed", "scheduled_date": "2026-11-01"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["template"]["title"] == "Renamed"
    assert resp.json()["template"]["scheduled_date"] == "2026-11-01"
    assert resp.json()["validation"] is None

    resp = await client.delete(
        f"/api/v1/admin/templates/{template['id']}", headers=ADMIN_HEADERS,
    )
    assert resp.json() == {"deleted": True, "id": template["id"]}

    missing = await client.get(
        f"/api/v1/admin/templates/{template['id']}", headers=ADMIN_HEADERS,
    )
    assert missing.status_code == 404


async def test_publish_blocked_by_impossible_cell(client):
    body = _template_body()
    body["row_attributes"] = as_payload(ONE_IMPOSSIBLE_ROWS)
    body["col_attributes"] = as_payload(ONE_IMPOSSIBLE_COLS)
    created = await client.post(
        "/api/v1/admin/templates", json=body, headers=ADMIN_HEADERS,
    )
    assert created.json()["validation"]["summary"]["impossible_cells"] == 1

    resp = await client.post(
        f"/api/v1/admin/templates/{created.json()['template']['id']}/publish",
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["error"]["code"] == "TEMPLATE_STATE"


async def test_validate_preview(client):
    resp = await client.post(
        "/api/v1/admin/templates/validate",
        json={
            "row_attributes": as_payload(ONE_IMPOSSIBLE_ROWS),
            "col_attributes": as_payload(ONE_IMPOSSIBLE_COLS),
        },
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["cells"]) == 9
    impossible = [c for c in body["cells"] if c["status"] == "impossible"]
    assert [(c["row"], c["col"]) for c in impossible] == [(2, 0)]


async def test_two_countries_on_one_axis_is_malformed(client):
    body = _template_body()
    body["row_attributes"] = [
        {"type": "country", "value": "USA", "label": "USA"},
        {"type": "country", "value": "ESP", "label": "Spain"},
        {"type": "style", "value": "left", "label": "Left-Handed"},
    ]
    resp = await client.post(
        "/api/v1/admin/templates", json=body, headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MALFORMED_GRID"


async def test_short_axis_is_validation_error(client):
    body = _template_body()
    body["col_attributes"] = body["col_attributes"][:2]
    resp = await client.post(
        "/api/v1/admin/templates", json=body, headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    detail = resp.json()["error"]["details"][0]
    assert detail["location"] == "body"
    assert detail["field"] == "col_attributes"
    assert detail["axis"] == "columns"


# ─── Cells ──────────────────────────────────────────────────────

async def test_cell_solutions(client):
    resp = await client.post("/api/v1/cells/solutions", json={
        "row_attribute": {"type": "style", "value": "left", "label": "Left-Handed"},
        "col_attribute": {"type": "tournament", "value": "Wimbledon", "label": "Wimbledon"},
    })
    assert resp.status_code == 200
    assert resp.json()["count"] == 4


async def test_guess_validation(client):
    resp = await client.post("/api/v1/guesses/validate", json={
        "player_name": "player 2",
        "row_attribute": {"type": "country", "value": "USA", "label": "USA"},
        "col_attribute": {"type": "ranking", "value": "world_no1", "label": "World #1"},
    })
    body = resp.json()
    assert resp.status_code == 200
    assert body["valid"] is True
    assert body["player"]["name"] == "Player 2"


# ─── Admin tools ────────────────────────────────────────────────

async def test_suggestions(client):
    resp = await client.get(
        "/api/v1/admin/suggestions", params={"seed": 42, "count": 2},
        headers=ADMIN_HEADERS,
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["primary"]["seed"] == 42
    assert [a["seed"] for a in body["alternatives"]] == [10_042, 20_042]


async def test_cache_stats_and_sweep(client):
    await client.get("/api/v1/daily-grid", params={"date": "2026-10-16"})

    stats = await client.get("/api/v1/admin/cache/stats", headers=ADMIN_HEADERS)
    assert stats.status_code == 200
    assert stats.json()["total_cached"] == 1
    assert stats.json()["sources"][0]["source_kind"] == "generated"

    sweep = await client.post("/api/v1/admin/cache/sweep", headers=ADMIN_HEADERS)
    assert sweep.status_code == 200
    assert sweep.json()["deleted"] == 0
