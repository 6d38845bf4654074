"""Pydantic schemas for expenses."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    category: str | None = Field(None, max_length=100)
    expense_date: date | None = None


class ExpenseRead(BaseModel):
    id: UUID
    description: str
    amount: Decimal
    category: str | None
    expense_date: date
    created_by_user_id: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}
