from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mediaops.core.errors import StoreError
from mediaops.crud import debug_logs as store
from mediaops.db.session import get_db
from mediaops.schemas.api_contract import DatabaseHealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/database/health", response_model=DatabaseHealthResponse)
def database_health(db: Session = Depends(get_db)) -> DatabaseHealthResponse:
    now = datetime.now(timezone.utc).isoformat()
    dialect = db.get_bind().dialect.name
    try:
        db.execute(text("SELECT 1"))
        counts = store.stats(db)
    except (SQLAlchemyError, StoreError) as e:
        reason = e.message if isinstance(e, StoreError) else e.__class__.__name__
        logger.warning("database health check failed: %s", reason)
        return {"timestamp": now, "status": "error", "dialect": dialect, "error": reason}
    return {"timestamp": now, "status": "ok", "dialect": dialect, "debug_logs": counts}
