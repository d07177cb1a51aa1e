from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from mediaops.core.errors import NotFoundError, StoreError
from mediaops.crud import debug_logs as store
from mediaops.db.models import DebugLog, utcnow


def _add(session_factory, **fields) -> str:
    defaults = {"level": "error", "category": "upload", "message": "upload failed"}
    defaults.update(fields)
    with session_factory() as db:
        entry = DebugLog(**defaults)
        db.add(entry)
        db.commit()
        return entry.id


def _count(session_factory) -> int:
    with session_factory() as db:
        return db.execute(select(func.count(DebugLog.id))).scalar_one()


def test_resolve_marks_entry(client, session_factory):
    log_id = _add(session_factory)
    resp = client.post(f"/api/debug/processing-logs/{log_id}/resolve")
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "id": log_id,
        "resolved": True,
        "message": "Debug entry marked as resolved",
    }
    with session_factory() as db:
        entry = db.get(DebugLog, log_id)
        assert entry.resolved is True
        assert entry.resolved_at is not None


def test_resolve_missing_entry_returns_404_without_mutation(client, session_factory):
    _add(session_factory)
    before = _count(session_factory)

    resp = client.post("/api/debug/processing-logs/abc123/resolve")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Debug log entry not found"}

    assert _count(session_factory) == before
    with session_factory() as db:
        assert db.execute(select(DebugLog).where(DebugLog.resolved.is_(True))).first() is None


def test_resolve_twice_is_idempotent(client, session_factory):
    log_id = _add(session_factory)
    assert client.post(f"/api/debug/processing-logs/{log_id}/resolve").status_code == 200
    with session_factory() as db:
        first_resolved_at = db.get(DebugLog, log_id).resolved_at

    resp = client.post(f"/api/debug/processing-logs/{log_id}/resolve")
    assert resp.status_code == 200
    assert resp.json()["resolved"] is True
    with session_factory() as db:
        assert db.get(DebugLog, log_id).resolved_at == first_resolved_at


def test_resolve_blank_id_is_rejected(client):
    resp = client.post("/api/debug/processing-logs/%20/resolve")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Debug log ID is required"}


def test_resolve_store_failure_returns_500(client, monkeypatch):
    def broken(db, log_id):
        raise StoreError("Failed to resolve debug log entry: OperationalError")

    monkeypatch.setattr(store, "mark_resolved", broken)
    resp = client.post("/api/debug/processing-logs/any-id/resolve")
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Failed to resolve debug log entry: OperationalError",
    }


def test_mark_resolved_wraps_database_errors(session_factory):
    db = session_factory()
    DebugLog.__table__.drop(bind=db.get_bind())
    try:
        with pytest.raises(StoreError):
            store.mark_resolved(db, "whatever")
    finally:
        DebugLog.__table__.create(bind=db.get_bind())
        db.close()


def test_mark_resolved_unknown_id_raises_not_found(session_factory):
    with session_factory() as db:
        with pytest.raises(NotFoundError):
            store.mark_resolved(db, "nope")


def test_create_and_list_entries(client):
    created = client.post(
        "/api/debug/processing-logs",
        json={
            "level": "warning",
            "category": "transcription",
            "message": "speaker labels missing",
            "video_id": "vid-1",
            "details": {"job": "tx-42"},
        },
    )
    assert created.status_code == 201
    assert created.json()["success"] is True

    client.post(
        "/api/debug/processing-logs",
        json={"level": "error", "category": "mux", "message": "asset creation failed"},
    )

    resp = client.get("/api/debug/processing-logs")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert body["summary"] == {"errors": 1, "warnings": 1, "unresolved": 1}
    assert body["entries"][0]["message"] == "asset creation failed"
    assert body["entries"][1]["details"] == {"job": "tx-42"}


def test_create_rejects_unknown_level(client):
    resp = client.post(
        "/api/debug/processing-logs",
        json={"level": "fatal", "category": "mux", "message": "x"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_list_skips_entries_older_than_a_week(client, session_factory):
    _add(session_factory, message="fresh")
    _add(session_factory, message="stale", timestamp=utcnow() - timedelta(days=8))
    messages = [e["message"] for e in client.get("/api/debug/processing-logs").json()["entries"]]
    assert messages == ["fresh"]


def test_cleanup_applies_retention_rules(client, session_factory):
    now = utcnow()
    _add(session_factory, level="error", resolved=True, timestamp=now - timedelta(days=31))
    _add(session_factory, level="info", timestamp=now - timedelta(days=8))
    _add(session_factory, level="warning", timestamp=now - timedelta(days=91))
    keep_error = _add(session_factory, level="error", timestamp=now - timedelta(days=40))
    keep_info = _add(session_factory, level="debug", timestamp=now - timedelta(days=1))

    resp = client.post("/api/debug/processing-logs/cleanup")
    assert resp.status_code == 200
    body = resp.json()
    assert body["deleted_counts"] == {
        "resolved_entries": 1,
        "debug_entries": 1,
        "old_errors": 1,
        "total": 3,
    }
    assert body["remaining"] == {"total": 2, "errors": 1, "warnings": 0, "unresolved_errors": 1}
    with session_factory() as db:
        remaining = set(db.execute(select(DebugLog.id)).scalars())
    assert remaining == {keep_error, keep_info}


def test_database_health(client, session_factory):
    _add(session_factory)
    body = client.get("/api/database/health").json()
    assert body["status"] == "ok"
    assert body["dialect"] == "sqlite"
    assert body["debug_logs"]["unresolved_errors"] == 1


def test_stats_wraps_database_errors(session_factory):
    db = session_factory()
    DebugLog.__table__.drop(bind=db.get_bind())
    try:
        with pytest.raises(StoreError) as excinfo:
            store.stats(db)
        assert excinfo.value.message.startswith("Failed to count debug log entries")
    finally:
        DebugLog.__table__.create(bind=db.get_bind())
        db.close()


def test_cleanup_count_failure_keeps_error_contract(client, session_factory, monkeypatch):
    monkeypatch.setattr(
        store,
        "cleanup",
        lambda db: {"resolved_entries": 0, "debug_entries": 0, "old_errors": 0, "total": 0},
    )
    with session_factory() as db:
        DebugLog.__table__.drop(bind=db.get_bind())
    try:
        resp = client.post("/api/debug/processing-logs/cleanup")
    finally:
        with session_factory() as db:
            DebugLog.__table__.create(bind=db.get_bind())
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"].startswith("Failed to count debug log entries")
