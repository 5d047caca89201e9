"""Audit log model."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    """Actions recorded in the audit log."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EDITED = "EDITED"
    QUEUED = "QUEUED"
    MANUAL_ENTRY = "MANUAL_ENTRY"
    INGESTED = "INGESTED"
    NEEDS_MANUAL = "NEEDS_MANUAL"
    URL_INGESTED = "URL_INGESTED"


class AuditLogEntry(BaseModel):
    """Audit log row."""

    id: Optional[int] = Field(None, description="Primary key")
    article_id: Optional[int] = Field(None, description="Article the action applied to")
    action: AuditAction = Field(..., description="Action taken")
    actor_email: str = Field(..., description="Who performed the action")
    timestamp: Optional[datetime] = Field(None, description="When it happened")
    details: Dict[str, Any] = Field(default_factory=dict, description="Action details")
