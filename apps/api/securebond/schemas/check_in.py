"""Pydantic schemas for check-ins."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from securebond.db.enums import CheckInSource


class CheckInCreate(BaseModel):
    """
    Check-in submission.

    Latitude and longitude are all-or-nothing; with coordinates the
    jurisdiction check runs, without them within_jurisdiction stays null.
    """
    client_id: UUID | None = None
    location: str | None = Field(None, max_length=255)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    accuracy: float | None = Field(None, ge=0)
    source: CheckInSource | None = None
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_coordinates(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class CheckInRead(BaseModel):
    id: UUID
    client_id: UUID
    check_in_time: datetime
    location: str | None
    latitude: float | None
    longitude: float | None
    accuracy: float | None
    within_jurisdiction: bool | None
    source: CheckInSource
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
