# mediaops/crud/debug_logs.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import and_, case, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mediaops.core.errors import NotFoundError, StoreError
from mediaops.db.models import DebugLog, utcnow

RECENT_WINDOW = timedelta(days=7)
RECENT_LIMIT = 500

RESOLVED_RETENTION = timedelta(days=30)
VERBOSE_RETENTION = timedelta(days=7)
PROBLEM_RETENTION = timedelta(days=90)


def _store_failure(db: Session, exc: SQLAlchemyError, action: str) -> StoreError:
    db.rollback()
    return StoreError(f"Failed to {action}: {exc.__class__.__name__}")


def create_log(db: Session, **fields: Any) -> DebugLog:
    entry = DebugLog(**fields)
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as e:
        raise _store_failure(db, e, "write debug log entry") from e
    return entry


def list_recent(db: Session, now: datetime | None = None) -> list[DebugLog]:
    cutoff = (now or utcnow()) - RECENT_WINDOW
    try:
        return list(
            db.execute(
                select(DebugLog)
                .where(DebugLog.timestamp > cutoff)
                .order_by(DebugLog.timestamp.desc())
                .limit(RECENT_LIMIT)
            ).scalars()
        )
    except SQLAlchemyError as e:
        raise _store_failure(db, e, "read debug log entries") from e


def get_log(db: Session, log_id: str) -> DebugLog | None:
    return db.execute(select(DebugLog).where(DebugLog.id == log_id)).scalar_one_or_none()


def mark_resolved(db: Session, log_id: str) -> dict[str, Any]:
    """
    Flag an entry as handled. Resolving an already resolved entry is a no-op,
    so `resolved_at` keeps the time of the first resolution.
    """
    try:
        entry = get_log(db, log_id)
        if entry is None:
            raise NotFoundError("Debug log entry not found")
        if not entry.resolved:
            entry.resolved = True
            entry.resolved_at = utcnow()
            db.commit()
        return {"id": entry.id, "resolved": bool(entry.resolved)}
    except SQLAlchemyError as e:
        raise _store_failure(db, e, "resolve debug log entry") from e


def stats(db: Session) -> dict[str, int]:
    try:
        row = db.execute(
            select(
                func.count(DebugLog.id),
                func.count(case((DebugLog.level == "error", 1))),
                func.count(case((DebugLog.level == "warning", 1))),
                func.count(case((and_(DebugLog.resolved.is_(False), DebugLog.level == "error"), 1))),
            )
        ).one()
    except SQLAlchemyError as e:
        raise _store_failure(db, e, "count debug log entries") from e
    return {
        "total": int(row[0] or 0),
        "errors": int(row[1] or 0),
        "warnings": int(row[2] or 0),
        "unresolved_errors": int(row[3] or 0),
    }


def cleanup(db: Session, now: datetime | None = None) -> dict[str, int]:
    ts = now or utcnow()
    try:
        resolved = db.execute(
            delete(DebugLog).where(
                DebugLog.resolved.is_(True),
                DebugLog.timestamp < ts - RESOLVED_RETENTION,
            )
        ).rowcount or 0
        verbose = db.execute(
            delete(DebugLog).where(
                DebugLog.level.in_(("debug", "info")),
                DebugLog.timestamp < ts - VERBOSE_RETENTION,
            )
        ).rowcount or 0
        problems = db.execute(
            delete(DebugLog).where(
                DebugLog.level.in_(("error", "warning")),
                DebugLog.timestamp < ts - PROBLEM_RETENTION,
            )
        ).rowcount or 0
        db.commit()
    except SQLAlchemyError as e:
        raise _store_failure(db, e, "clean up debug log entries") from e
    return {
        "resolved_entries": resolved,
        "debug_entries": verbose,
        "old_errors": problems,
        "total": resolved + verbose + problems,
    }
