from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app


client = TestClient(app)


def test_preserves_incoming_request_id_header():
    incoming_id = "req-from-gateway-42"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_and_duration():
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert float(resp.headers["X-Request-Duration-ms"]) >= 0


def test_request_id_included_in_error_body():
    headers = {"X-Request-ID": "bad-body-1", "X-API-Key": "bypass-secret-123"}
    resp = client.post("/api/check", json={}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["request_id"] == "bad-body-1"


def test_health_reports_rate_limit_mode(monkeypatch):
    monkeypatch.setattr(settings.app, "rate_limit_enabled", False)

    resp = client.get("/health")

    assert resp.json() == {"status": "ok", "rate_limit": "disabled"}


def test_logs_one_line_per_request(caplog):
    with caplog.at_level("INFO", logger="app.core.middleware"):
        client.get("/health", headers={"X-Request-ID": "log-me"})

    records = [r for r in caplog.records if r.getMessage() == "http.request"]
    assert len(records) == 1
    assert records[0].path == "/health"
    assert records[0].status_code == 200
    assert records[0].method == "GET"
