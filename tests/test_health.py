import pytest

from forge_escrow.routers import health

pytestmark = pytest.mark.anyio


async def test_health_reports_ok(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["db_ok"] is True
    assert body["env"] == "test"
    assert body["program_id"]


async def test_health_reports_degraded_when_db_is_down(client, monkeypatch):
    def _broken_engine():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(health, "get_engine", _broken_engine)

    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["db_status"] == "error"
