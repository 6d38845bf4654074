"""Pydantic schemas for staff account management."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from securebond.db.enums import Role, STAFF_ROLES


def _staff_role(role: Role | None) -> Role | None:
    if role is not None and role not in STAFF_ROLES:
        raise ValueError("role must be admin or maintenance")
    return role


class StaffCreate(BaseModel):
    """New admin or maintenance account. A password is generated when omitted."""
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.MAINTENANCE
    password: str | None = Field(None, min_length=8, max_length=200)

    @field_validator("role")
    @classmethod
    def check_role(cls, v: Role | None) -> Role | None:
        return _staff_role(v)


class StaffUpdate(BaseModel):
    """Partial update; null means unchanged."""
    display_name: str | None = Field(None, min_length=1, max_length=255)
    role: Role | None = None
    is_active: bool | None = None

    @field_validator("role")
    @classmethod
    def check_role(cls, v: Role | None) -> Role | None:
        return _staff_role(v)


class StaffRead(BaseModel):
    id: UUID
    email: str
    display_name: str
    role: Role
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class StaffCreateResponse(StaffRead):
    # Only set when the server generated the password
    temporary_password: str | None = None
