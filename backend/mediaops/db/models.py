import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text

from mediaops.db.base import Base

# =========================
# Helpers / Constants
# =========================

def gen_uuid() -> str:
    """Primary key generator (UUID as string)."""
    return str(uuid.uuid4())

def utcnow() -> datetime:
    # timezone-aware UTC
    return datetime.now(timezone.utc)


# =========================
# Models
# =========================

class DebugLog(Base):
    """
    One entry written by the media processing pipeline (upload, transcoding, transcription...).
    Operators triage entries and flip `resolved` once handled.
    """
    __tablename__ = "debug_logs"

    id = Column(String, primary_key=True, default=gen_uuid)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    level = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)

    video_id = Column(String, nullable=True)
    video_title = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)
    stack_trace = Column(Text, nullable=True)

    resolved = Column(Boolean, default=False, nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_debug_logs_timestamp", "timestamp"),
        Index("ix_debug_logs_level", "level"),
        Index("ix_debug_logs_resolved", "resolved"),
    )
