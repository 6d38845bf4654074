"""Pydantic schemas for bonds."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from securebond.db.enums import BondStatus, BondType


class BondCreate(BaseModel):
    client_id: UUID
    bond_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    total_owed: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    down_payment: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    premium_rate: Decimal | None = Field(None, ge=0, le=1)
    bond_type: BondType = BondType.SURETY
    court_location: str | None = Field(None, max_length=255)
    case_number: str | None = Field(None, max_length=100)
    charges: str | None = Field(None, max_length=2000)
    cosigner_name: str | None = Field(None, max_length=255)
    cosigner_phone: str | None = Field(None, max_length=32)
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_down_payment(self):
        if self.down_payment > self.total_owed:
            raise ValueError("down_payment cannot exceed total_owed")
        return self


class BondUpdate(BaseModel):
    status: BondStatus | None = None
    court_location: str | None = Field(None, max_length=255)
    case_number: str | None = Field(None, max_length=100)
    charges: str | None = Field(None, max_length=2000)
    cosigner_name: str | None = Field(None, max_length=255)
    cosigner_phone: str | None = Field(None, max_length=32)
    notes: str | None = Field(None, max_length=2000)


class BondRead(BaseModel):
    id: UUID
    client_id: UUID
    client_name: str | None = None
    bond_number: str
    bond_amount: Decimal
    total_owed: Decimal
    down_payment: Decimal
    remaining_balance: Decimal
    premium_rate: Decimal | None
    bond_type: BondType
    status: BondStatus
    court_location: str | None
    case_number: str | None
    charges: str | None
    cosigner_name: str | None
    cosigner_phone: str | None
    notes: str | None
    issued_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}
