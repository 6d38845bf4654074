"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from securebond.db.enums import PrincipalType, Role


class UserSession(BaseModel):
    """
    Full session context for authenticated requests.

    This is returned by get_current_session dependency
    and contains all information needed for authorization.
    client_id is set only for client sessions.
    """
    principal_id: UUID
    principal_type: PrincipalType
    role: Role  # Validated enum
    display_name: str
    client_id: UUID | None = None


class StaffLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=200)


class ClientLoginRequest(BaseModel):
    client_number: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1, max_length=200)


class ClientPhoneLoginRequest(BaseModel):
    phone_number: str = Field(..., min_length=5, max_length=32)
    password: str = Field(..., min_length=1, max_length=200)


class MeResponse(BaseModel):
    """Response schema for GET /api/auth/me."""
    principal_id: UUID
    principal_type: PrincipalType
    role: Role
    display_name: str
    client_id: UUID | None = None
    client_number: str | None = None
    email: str | None = None
