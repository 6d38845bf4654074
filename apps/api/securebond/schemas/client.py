"""Pydantic schemas for clients."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from securebond.db.enums import ClientLocationStatus


class ClientCreate(BaseModel):
    """Request to create a client. client_number is generated when omitted."""
    full_name: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., min_length=5, max_length=32)
    email: EmailStr | None = None
    client_number: str | None = Field(None, min_length=3, max_length=32, pattern=r"^[A-Za-z0-9-]+$")
    address: str | None = Field(None, max_length=1000)
    date_of_birth: date | None = None
    emergency_contact: str | None = Field(None, max_length=255)
    emergency_phone: str | None = Field(None, max_length=32)
    is_active: bool = True


class ClientUpdate(BaseModel):
    """Request to update a client (partial)."""
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone_number: str | None = Field(None, min_length=5, max_length=32)
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=1000)
    date_of_birth: date | None = None
    emergency_contact: str | None = Field(None, max_length=255)
    emergency_phone: str | None = Field(None, max_length=32)
    is_active: bool | None = None


class ClientRead(BaseModel):
    id: UUID
    client_number: str
    full_name: str
    phone_number: str
    email: str | None
    address: str | None
    date_of_birth: date | None
    emergency_contact: str | None
    emergency_phone: str | None
    is_active: bool
    last_check_in_at: datetime | None
    missed_check_ins: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClientCreateResponse(ClientRead):
    """Creation/reset response. The temporary password is shown only once."""
    temporary_password: str


class ClientListResponse(BaseModel):
    items: list[ClientRead]
    total: int
    page: int
    per_page: int
    pages: int


class PasswordResetResponse(BaseModel):
    client_id: UUID
    client_number: str
    temporary_password: str


class ClientLocation(BaseModel):
    """Latest known position and compliance status of a client."""
    client_id: UUID
    client_number: str
    full_name: str
    latitude: float | None
    longitude: float | None
    last_check_in_at: datetime | None
    missed_check_ins: int
    within_jurisdiction: bool | None
    status: ClientLocationStatus


class BulkUploadError(BaseModel):
    row: int
    field: str | None = None
    message: str


class BulkUploadResult(BaseModel):
    success: bool
    processed: int
    created: int
    updated: int
    errors: list[BulkUploadError]
