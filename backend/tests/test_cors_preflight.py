from __future__ import annotations

from fastapi.testclient import TestClient

from mediaops.core import config
from mediaops.main import create_app


def test_cors_preflight_allows_configured_origin(monkeypatch):
    origin = "http://localhost:5173"
    monkeypatch.setattr(config.settings, "cors_origin", f"{origin}/, https://ops.example.com", raising=False)

    client = TestClient(create_app())
    resp = client.options(
        "/api/debug/processing-logs",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert resp.status_code in (200, 204)
    assert resp.headers.get("access-control-allow-origin") == origin


def test_cors_preflight_rejects_unknown_origin(monkeypatch):
    monkeypatch.setattr(config.settings, "cors_origin", "https://ops.example.com", raising=False)

    client = TestClient(create_app())
    resp = client.options(
        "/health",
        headers={"Origin": "https://evil.example.com", "Access-Control-Request-Method": "GET"},
    )
    assert resp.headers.get("access-control-allow-origin") is None
