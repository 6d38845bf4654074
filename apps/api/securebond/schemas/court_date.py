"""Pydantic schemas for court dates and reminders."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from securebond.db.enums import AttendanceStatus, CourtDateSource, CourtType, ReminderType


class CourtDateCreate(BaseModel):
    client_id: UUID
    court_date: datetime
    court_type: CourtType = CourtType.HEARING
    court_location: str | None = Field(None, max_length=255)
    case_number: str | None = Field(None, max_length=100)
    charges: str | None = Field(None, max_length=2000)
    notes: str | None = Field(None, max_length=2000)
    source: CourtDateSource = CourtDateSource.MANUAL


class CourtDateUpdate(BaseModel):
    court_date: datetime | None = None
    court_type: CourtType | None = None
    court_location: str | None = Field(None, max_length=255)
    case_number: str | None = Field(None, max_length=100)
    charges: str | None = Field(None, max_length=2000)
    notes: str | None = Field(None, max_length=2000)


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus
    notes: str | None = Field(None, max_length=2000)


class CourtDateRead(BaseModel):
    id: UUID
    client_id: UUID
    client_name: str | None = None
    court_date: datetime
    court_type: CourtType
    court_location: str | None
    case_number: str | None
    charges: str | None
    notes: str | None
    completed: bool
    attendance_status: AttendanceStatus
    admin_approved: bool
    approved_at: datetime | None
    client_acknowledged: bool
    acknowledged_at: datetime | None
    source: CourtDateSource
    source_verified: bool
    created_at: datetime
    days_until: int | None = None

    model_config = {"from_attributes": True}


class ReminderRead(BaseModel):
    id: UUID
    court_date_id: UUID
    reminder_type: ReminderType
    scheduled_for: datetime
    sent: bool
    sent_at: datetime | None
    confirmed: bool
    confirmed_at: datetime | None
    notification_id: UUID | None

    model_config = {"from_attributes": True}
