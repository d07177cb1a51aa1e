from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediaops.core.errors import ValidationError
from mediaops.crud import debug_logs as store
from mediaops.db.session import get_db
from mediaops.schemas.api_contract import (
    CleanupResponse,
    DebugLogCreate,
    DebugLogCreated,
    DebugLogListResponse,
    ResolveResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/debug/processing-logs", response_model=DebugLogListResponse)
def list_processing_logs(db: Session = Depends(get_db)) -> DebugLogListResponse:
    entries = store.list_recent(db)
    logger.info("debug logs fetched count=%d", len(entries))
    return {
        "success": True,
        "entries": entries,
        "total": len(entries),
        "summary": {
            "errors": sum(1 for e in entries if e.level == "error"),
            "warnings": sum(1 for e in entries if e.level == "warning"),
            "unresolved": sum(1 for e in entries if e.level == "error" and not e.resolved),
        },
    }


@router.post("/debug/processing-logs", response_model=DebugLogCreated, status_code=201)
def create_processing_log(payload: DebugLogCreate, db: Session = Depends(get_db)) -> DebugLogCreated:
    entry = store.create_log(db, **payload.model_dump())
    logger.info("debug log written level=%s category=%s id=%s", entry.level, entry.category, entry.id)
    return {"success": True, "id": entry.id, "timestamp": entry.timestamp}


@router.post("/debug/processing-logs/cleanup", response_model=CleanupResponse)
def cleanup_processing_logs(db: Session = Depends(get_db)) -> CleanupResponse:
    deleted = store.cleanup(db)
    remaining = store.stats(db)
    logger.info("debug logs cleaned up deleted=%d", deleted["total"])
    return {
        "success": True,
        "message": f"Cleaned up {deleted['total']} old debug entries",
        "deleted_counts": deleted,
        "remaining": remaining,
    }


@router.post("/debug/processing-logs/{log_id}/resolve", response_model=ResolveResponse)
def resolve_processing_log(log_id: str, db: Session = Depends(get_db)) -> dict:
    log_id = (log_id or "").strip()
    if not log_id:
        raise ValidationError("Debug log ID is required")

    result = store.mark_resolved(db, log_id)
    logger.info("debug entry marked as resolved id=%s", result["id"])
    return {
        "success": True,
        "id": result["id"],
        "resolved": result["resolved"],
        "message": "Debug entry marked as resolved",
    }
