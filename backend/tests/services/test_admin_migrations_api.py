"""Admin routes — migration status/actions over HTTP, admin key, tool usage counts.

Invariants:
    - With an admin key configured, requests without the matching X-Admin-Key get 401
    - Failed batches come back as 200 with result.success=false
    - Bad rollback requests (no count, no target) are 400
"""

import pytest

from app.config import Settings, get_settings
from app.main import app
from app.models.tool_usage import ToolUsage

from tests.services.sample_migrations import FIXED_BATCH_ID, NAMES

BASE = "/api/v1/admin"


@pytest.fixture
def admin_key(client):
    app.dependency_overrides[get_settings] = lambda: Settings(admin_api_key="s3cret")
    return {"X-Admin-Key": "s3cret"}


# --- Admin key ----------------------------------------------------------------


async def test_open_when_no_key_configured(client):
    assert (await client.get(f"{BASE}/migrations")).status_code == 200


async def test_missing_key_rejected(client, admin_key):
    resp = await client.get(f"{BASE}/migrations")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "ADMIN_AUTH_REQUIRED"


async def test_wrong_key_rejected(client, admin_key):
    resp = await client.get(f"{BASE}/migrations", headers={"X-Admin-Key": "guess"})
    assert resp.status_code == 401


async def test_non_ascii_key_rejected(client, admin_key):
    resp = await client.get(
        f"{BASE}/migrations", headers={"X-Admin-Key": "café".encode("latin-1")},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "ADMIN_AUTH_REQUIRED"


async def test_correct_key_accepted(client, admin_key):
    resp = await client.get(f"{BASE}/migrations", headers=admin_key)
    assert resp.status_code == 200


# --- GET ----------------------------------------------------------------------


async def test_status_action(client):
    data = (await client.get(f"{BASE}/migrations")).json()["data"]
    assert data["stats"]["pending"] == 3
    assert [m["name"] for m in data["migrations"]] == NAMES
    assert data["last_batch_id"] is None


async def test_files_action(client):
    data = (await client.get(f"{BASE}/migrations", params={"action": "files"})).json()["data"]
    assert [f["name"] for f in data["files"]] == NAMES
    assert data["files"][0]["timestamp"] == "20260101000001"


async def test_stats_action_after_run(client, runner):
    await runner.run_migrations()
    data = (await client.get(f"{BASE}/migrations", params={"action": "stats"})).json()["data"]
    assert data["stats"]["executed"] == 3
    assert data["batch_ids"] == [FIXED_BATCH_ID]


async def test_report_action(client):
    data = (await client.get(f"{BASE}/migrations", params={"action": "report"})).json()["data"]
    assert data["environment"] == "development"
    assert data["health"]["status"] == "healthy"


async def test_unknown_action_rejected(client):
    resp = await client.get(f"{BASE}/migrations", params={"action": "explode"})
    assert resp.status_code == 400


# --- POST ---------------------------------------------------------------------


async def test_dry_run_message(client):
    resp = await client.post(f"{BASE}/migrations", json={
        "action": "migrate", "options": {"dry_run": True},
    })
    result = resp.json()["result"]
    assert result["skipped"] == NAMES
    assert result["message"] == "Dry run completed. 3 migration(s) would be executed."


async def test_migrate_then_status(client):
    resp = await client.post(f"{BASE}/migrations", json={"action": "migrate"})
    result = resp.json()["result"]
    assert result["success"] is True
    assert result["batch_id"] == FIXED_BATCH_ID
    assert result["message"] == "Successfully executed 3 migration(s)."

    data = (await client.get(f"{BASE}/migrations")).json()["data"]
    assert data["last_batch_id"] == FIXED_BATCH_ID


async def test_failed_migrate_is_reported_not_raised(client, migrations_dir):
    (migrations_dir / NAMES[1]).write_text("CREATE TABLE orders (;")
    resp = await client.post(f"{BASE}/migrations", json={"action": "migrate"})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["success"] is False
    assert result["message"] == "Migration failed. 1 executed, 1 failed."


async def test_migrate_unknown_target_is_400(client):
    resp = await client.post(f"{BASE}/migrations", json={
        "action": "migrate", "options": {"target": "nope.sql"},
    })
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MIGRATION_TARGET_NOT_FOUND"


async def test_rollback(client, runner):
    await runner.run_migrations()
    resp = await client.post(f"{BASE}/migrations", json={
        "action": "rollback", "options": {"count": 1},
    })
    result = resp.json()["result"]
    assert result["rolled_back"] == [NAMES[2]]
    assert result["message"] == "Successfully rolled back 1 migration(s)."


async def test_rollback_without_count_or_target(client, runner):
    await runner.run_migrations()
    resp = await client.post(f"{BASE}/migrations", json={"action": "rollback"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ROLLBACK_TARGET_REQUIRED"


async def test_rollback_count_must_be_positive(client):
    resp = await client.post(f"{BASE}/migrations", json={
        "action": "rollback", "options": {"count": 0},
    })
    assert resp.status_code == 400


async def test_refresh(client):
    body = (await client.post(f"{BASE}/migrations", json={"action": "refresh"})).json()
    assert body["result"]["message"] == "Migration status refreshed successfully."
    assert body["data"]["stats"]["total"] == 3


# --- Tool usage ---------------------------------------------------------------


async def test_tool_usage_counts(client, test_db):
    test_db.add_all([
        ToolUsage(tool_slug="profit-margin", user_type="guest"),
        ToolUsage(tool_slug="profit-margin", user_type="guest"),
        ToolUsage(tool_slug="profit-margin", user_type="registered"),
        ToolUsage(tool_slug="color-converter", user_type="guest"),
    ])
    await test_db.commit()

    data = (await client.get(f"{BASE}/tool-usage")).json()
    assert data["total"] == 4
    assert data["by_tool"] == {"color-converter": 1, "profit-margin": 3}
    assert {"tool_slug": "profit-margin", "user_type": "guest", "count": 2} in data["rows"]
