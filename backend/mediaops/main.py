from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediaops.api.routes.database import router as database_router
from mediaops.api.routes.debug_logs import router as debug_logs_router
from mediaops.api.routes.health import diagnostics_router, router as health_router
from mediaops.api.routes.media import router as media_router
from mediaops.core.config import settings
from mediaops.core.errors import AppError, InternalError, app_error_handler, err
from mediaops.core.logging_utils import configure_logging
from mediaops.middleware.security import RequestIdMiddleware, SecurityHeadersMiddleware

request_logger = logging.getLogger("mediaops.request")

_STATUS_CODES = {400: "BAD_REQUEST", 404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    sanitized: list[dict[str, Any]] = []
    for item in errors:
        entry = dict(item)
        ctx = entry.get("ctx")
        if isinstance(ctx, dict):
            safe_ctx: dict[str, Any] = {}
            for key, value in ctx.items():
                try:
                    json.dumps(value)
                    safe_ctx[key] = value
                except TypeError:
                    safe_ctx[key] = repr(value)
            entry["ctx"] = safe_ctx
        sanitized.append(entry)
    return sanitized


def normalize_http_exception_detail(detail: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(detail, dict):
        return None
    code, message = detail.get("code"), detail.get("message")
    if isinstance(code, str) and isinstance(message, str):
        return detail
    return None


def _parse_origins(raw: str) -> list[str]:
    cleaned = (o.strip().rstrip("/") for o in (raw or "").split(","))
    return [o for o in cleaned if o]


def create_app() -> FastAPI:
    """
    Application factory.
    - Health and diagnostics for the AWS media stack.
    - Debug-log triage for the processing pipeline.
    """
    configure_logging()

    app = FastAPI(title="mediaops", version="0.1.0", openapi_url="/api/openapi.json")
    app.add_middleware(SecurityHeadersMiddleware)

    # ---- Request tracing ----
    @app.middleware("http")
    async def request_trace(request: Request, call_next):
        t0 = time.time()
        try:
            return await call_next(request)
        finally:
            request_logger.info(
                json.dumps(
                    {
                        "event": "request_done",
                        "request_id": getattr(request.state, "request_id", None),
                        "method": request.method,
                        "path": request.url.path,
                        "ms_total": int((time.time() - t0) * 1000),
                    },
                    ensure_ascii=False,
                )
            )

    # ---- Exception handlers (unified error JSON) ----
    app.add_exception_handler(AppError, app_error_handler)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        rid = getattr(request.state, "request_id", "")
        normalized = normalize_http_exception_detail(exc.detail)
        if normalized is not None:
            return err(normalized["code"], normalized["message"], exc.status_code,
                       normalized.get("details"), request_id=rid)
        code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        return err(code, str(exc.detail), exc.status_code, request_id=rid)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = jsonable_encoder({"errors": _sanitize_validation_errors(exc.errors())})
        return err(
            "VALIDATION_ERROR",
            "Request validation failed.",
            422,
            details,
            request_id=getattr(request.state, "request_id", ""),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "")
        request_logger.error(
            json.dumps({"event": "unhandled_exception", "request_id": rid, "error": type(exc).__name__})
        )
        return err(InternalError.code, "Internal server error.", 500, request_id=rid)

    # ---- CORS ----
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(settings.cors_origin),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # outermost, so every layer below (handlers included) sees request.state.request_id
    app.add_middleware(RequestIdMiddleware)

    # ---- Routers ----
    api_prefix = "/api"
    app.include_router(health_router, tags=["health"])
    app.include_router(diagnostics_router, prefix=api_prefix, tags=["health"])
    app.include_router(database_router, prefix=api_prefix, tags=["health"])
    app.include_router(debug_logs_router, prefix=api_prefix, tags=["debug"])
    app.include_router(media_router, prefix=api_prefix, tags=["media"])

    return app


app = create_app()
