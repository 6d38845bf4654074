"""Pydantic schemas for compliance alerts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from securebond.db.enums import AlertSeverity, AlertType


class AlertCreate(BaseModel):
    client_id: UUID | None = None
    alert_type: AlertType = AlertType.SYSTEM
    severity: AlertSeverity = AlertSeverity.MEDIUM
    message: str = Field(..., min_length=1, max_length=2000)


class AlertRead(BaseModel):
    id: UUID
    client_id: UUID | None
    client_name: str | None = None
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    occurrence_count: int
    last_seen_at: datetime
    acknowledged: bool
    acknowledged_by_user_id: UUID | None
    acknowledged_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AlertSummary(BaseModel):
    """Unacknowledged alert counts by severity."""
    total: int
    critical: int
    high: int
    medium: int
    low: int
