from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mediaops.core.config import settings
from mediaops.core.credentials import credential_issues
from mediaops.deps import get_health_aggregator, get_settings_env
from mediaops.schemas.api_contract import (
    AwsDiagnosticsResponse,
    HealthErrorResponse,
    HealthResponse,
)
from mediaops.services.health import HealthAggregator, HealthReport

logger = logging.getLogger(__name__)

router = APIRouter()
diagnostics_router = APIRouter()

_ENV_VARS = ("AWS_REGION", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "S3_BUCKET_NAME", "DATABASE_URL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _report_payload(report: HealthReport, aggregator: HealthAggregator) -> dict:
    cfg = aggregator.config
    return {
        "timestamp": report.timestamp.isoformat(),
        "status": report.overall.value,
        "services": report.services_dict(),
        "environment": settings.app_env,
        "region": cfg.region,
        "bucket": cfg.bucket,
        "has_credentials": bool(cfg.access_key_id and cfg.secret_access_key),
    }


def _crashed(exc: Exception) -> JSONResponse:
    logger.exception("health check crashed")
    return JSONResponse(
        status_code=500,
        content={"timestamp": _now_iso(), "status": "error", "error": str(exc) or type(exc).__name__},
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"model": HealthErrorResponse}},
)
def health(aggregator: HealthAggregator = Depends(get_health_aggregator)):
    try:
        report = aggregator.perform_full_health_check()
        return _report_payload(report, aggregator)
    except Exception as exc:
        return _crashed(exc)


@diagnostics_router.get(
    "/aws/health",
    response_model=AwsDiagnosticsResponse,
    responses={500: {"model": HealthErrorResponse}},
)
def aws_diagnostics(
    aggregator: HealthAggregator = Depends(get_health_aggregator),
    env: dict = Depends(get_settings_env),
):
    try:
        report = aggregator.perform_full_health_check()
        return {
            "success": True,
            "timestamp": _now_iso(),
            "environment": {name: bool(env.get(name)) for name in _ENV_VARS},
            "credential_issues": credential_issues(env),
            "aws_services": _report_payload(report, aggregator),
        }
    except Exception as exc:
        return _crashed(exc)
