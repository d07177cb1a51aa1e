from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StatusLiteral = Literal["ok", "degraded", "error"]
LogLevel = Literal["error", "warning", "info", "debug"]
LogCategory = Literal["upload", "processing", "transcription", "database", "mux", "api"]


class ServiceStatus(BaseModel):
    status: StatusLiteral
    detail: str | None = None


class HealthResponse(BaseModel):
    timestamp: str
    status: StatusLiteral = Field(..., description="Overall health status")
    services: dict[str, ServiceStatus]
    environment: str
    region: str
    bucket: str
    has_credentials: bool


class HealthErrorResponse(BaseModel):
    timestamp: str
    status: Literal["error"] = "error"
    error: str


class AwsDiagnosticsResponse(BaseModel):
    success: bool = True
    timestamp: str
    environment: dict[str, bool]
    credential_issues: list[str] = Field(default_factory=list)
    aws_services: HealthResponse


class DebugLogCounts(BaseModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0
    unresolved_errors: int = 0


class DatabaseHealthResponse(BaseModel):
    timestamp: str
    status: StatusLiteral
    dialect: str
    error: str | None = None
    debug_logs: DebugLogCounts | None = None


class ResolveResponse(BaseModel):
    success: bool = True
    id: str
    resolved: bool
    message: str = "Debug entry marked as resolved"


class DebugLogCreate(BaseModel):
    level: LogLevel
    category: LogCategory
    message: str = Field(..., min_length=1)
    video_id: Optional[str] = None
    video_title: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    stack_trace: Optional[str] = None


class DebugLogCreated(BaseModel):
    success: bool = True
    id: str
    timestamp: datetime


class DebugLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    timestamp: datetime
    level: str
    category: str
    message: str
    video_id: str | None = None
    video_title: str | None = None
    details: dict[str, Any] | None = None
    stack_trace: str | None = None
    resolved: bool


class DebugLogSummary(BaseModel):
    errors: int
    warnings: int
    unresolved: int


class DebugLogListResponse(BaseModel):
    success: bool = True
    entries: list[DebugLogEntry]
    total: int
    summary: DebugLogSummary


class DeletedCounts(BaseModel):
    resolved_entries: int
    debug_entries: int
    old_errors: int
    total: int


class CleanupResponse(BaseModel):
    success: bool = True
    message: str
    deleted_counts: DeletedCounts
    remaining: DebugLogCounts


class MediaUrlsResponse(BaseModel):
    bucket: str
    region: str
    key: str
    direct_url: str
    cdn_url: str | None = None
