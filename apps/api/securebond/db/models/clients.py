"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from securebond.db.base import Base
from securebond.db.enums import BondStatus, BondType, CheckInSource, PaymentMethod
from securebond.db.types import utc_now

if TYPE_CHECKING:
    from securebond.db.models import Alert, CourtDate


class Client(Base):
    """
    A bonded defendant under supervision.

    Doubles as the login principal for the client portal
    (client_number or phone + password).
    """

    __tablename__ = "clients"
    __table_args__ = (
        Index("idx_clients_phone", "phone_number"),
        Index("idx_clients_email", "email"),
        CheckConstraint("missed_check_ins >= 0", name="ck_clients_missed_check_ins"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    emergency_contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Compliance tracking
    last_check_in_at: Mapped[datetime | None] = mapped_column(nullable=True)
    missed_check_ins: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Set by the missed check-in sweep so one overdue window counts once
    missed_check_in_flagged_at: Mapped[datetime | None] = mapped_column(nullable=True)

    token_version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    # Relationships (cascade deletes dependent records)
    bonds: Mapped[list["Bond"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    check_ins: Mapped[list["CheckIn"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    court_dates: Mapped[list["CourtDate"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    alerts: Mapped[list["Alert"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )


class Bond(Base):
    """A bail bond written for a client."""

    __tablename__ = "bonds"
    __table_args__ = (
        Index("idx_bonds_client", "client_id"),
        Index("idx_bonds_status", "status"),
        CheckConstraint("remaining_balance >= 0", name="ck_bonds_remaining_balance"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    bond_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    bond_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_owed: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    down_payment: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    remaining_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    premium_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 4), nullable=True)
    court_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    case_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    charges: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=BondStatus.ACTIVE.value, nullable=False
    )
    bond_type: Mapped[str] = mapped_column(
        String(20), default=BondType.SURETY.value, nullable=False
    )
    cosigner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cosigner_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    issued_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    client: Mapped["Client"] = relationship(back_populates="bonds")
    payments: Mapped[list["Payment"]] = relationship(back_populates="bond")


class Payment(Base):
    """A payment received from (or on behalf of) a client."""

    __tablename__ = "payments"
    __table_args__ = (
        Index("idx_payments_client", "client_id", "payment_date"),
        Index("idx_payments_confirmed", "confirmed"),
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    bond_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("bonds.id", ondelete="SET NULL"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(20), default=PaymentMethod.CASH.value, nullable=False
    )
    receipt_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Admin confirmation
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    confirmed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    client: Mapped["Client"] = relationship(back_populates="payments")
    bond: Mapped["Bond"] = relationship(back_populates="payments")


class CheckIn(Base):
    """A client-submitted location/status record for compliance monitoring."""

    __tablename__ = "check_ins"
    __table_args__ = (
        Index("idx_check_ins_client_time", "client_id", "check_in_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    check_in_time: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)
    # Null when no coordinates were submitted
    within_jurisdiction: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    source: Mapped[str] = mapped_column(
        String(20), default=CheckInSource.MANUAL.value, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    client: Mapped["Client"] = relationship(back_populates="check_ins")


class Expense(Base):
    """Business expense, used for net profit in analytics."""

    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
