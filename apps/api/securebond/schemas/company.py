"""Pydantic schemas for company configuration."""

from datetime import datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator


class CompanyConfigurationUpdate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    license_number: str | None = Field(None, max_length=100)
    state: str | None = Field(None, min_length=2, max_length=2)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=10)
    phone: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=5000)
    logo_url: str | None = Field(None, max_length=2000)
    timezone: str = Field("Pacific/Honolulu", max_length=50)
    business_type: str = Field("bail_bonds", max_length=50)
    operating_hours: dict[str, Any] | None = None
    custom_settings: dict[str, Any] | None = None
    jurisdiction_min_latitude: float | None = Field(None, ge=-90, le=90)
    jurisdiction_max_latitude: float | None = Field(None, ge=-90, le=90)
    jurisdiction_min_longitude: float | None = Field(None, ge=-180, le=180)
    jurisdiction_max_longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone '{value}'")
        return value

    @field_validator("state")
    @classmethod
    def upper_state(cls, value: str | None) -> str | None:
        return value.upper() if value else value

    @model_validator(mode="after")
    def check_bounds(self):
        bounds = (
            self.jurisdiction_min_latitude,
            self.jurisdiction_max_latitude,
            self.jurisdiction_min_longitude,
            self.jurisdiction_max_longitude,
        )
        provided = [b is not None for b in bounds]
        if any(provided) and not all(provided):
            raise ValueError("jurisdiction bounds must be provided together")
        if all(provided):
            if self.jurisdiction_min_latitude >= self.jurisdiction_max_latitude:
                raise ValueError("jurisdiction_min_latitude must be less than jurisdiction_max_latitude")
            if self.jurisdiction_min_longitude >= self.jurisdiction_max_longitude:
                raise ValueError("jurisdiction_min_longitude must be less than jurisdiction_max_longitude")
        return self


class CompanyConfigurationRead(CompanyConfigurationUpdate):
    id: UUID
    updated_at: datetime

    model_config = {"from_attributes": True}


class PublicCompanyInfo(BaseModel):
    """Branding subset served to the unauthenticated landing page."""
    company_name: str
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    logo_url: str | None = None
    operating_hours: dict[str, Any] | None = None

    model_config = {"from_attributes": True}
