"""Pydantic schemas for the public contact form."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from securebond.db.enums import UrgencyLevel


class ContactInquiryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=5, max_length=32)
    email: EmailStr | None = None
    case_details: str = Field(..., min_length=1, max_length=5000)
    urgency_level: UrgencyLevel = UrgencyLevel.NORMAL


class ContactInquiryRead(BaseModel):
    id: Any = None
    name: str
    phone: str
    email: str | None = None
    case_details: str
    urgency_level: UrgencyLevel
    created_at: datetime | None = None
