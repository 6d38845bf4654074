"""Pydantic schemas for payments."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from securebond.db.enums import PaymentMethod


class PaymentCreate(BaseModel):
    """Clients record their own payments; admins pass client_id."""
    client_id: UUID | None = None
    bond_id: UUID | None = None
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    payment_date: date | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    receipt_image_url: str | None = Field(None, max_length=2000)
    notes: str | None = Field(None, max_length=2000)


class PaymentRead(BaseModel):
    id: UUID
    client_id: UUID
    bond_id: UUID | None
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod
    receipt_image_url: str | None
    notes: str | None
    confirmed: bool
    confirmed_by_user_id: UUID | None
    confirmed_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
