"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from securebond.db.base import Base
from securebond.db.enums import AttendanceStatus, CourtDateSource, CourtType
from securebond.db.types import utc_now

if TYPE_CHECKING:
    from securebond.db.models import Client


class CourtDate(Base):
    """
    A scheduled court appearance for a client.

    Reminders are only scheduled once admin_approved is true.
    """

    __tablename__ = "court_dates"
    __table_args__ = (
        Index("idx_court_dates_client", "client_id", "court_date"),
        Index("idx_court_dates_pending", "admin_approved", "court_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    court_date: Mapped[datetime] = mapped_column(nullable=False)
    court_type: Mapped[str] = mapped_column(
        String(30), default=CourtType.HEARING.value, nullable=False
    )
    court_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    case_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    charges: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    attendance_status: Mapped[str] = mapped_column(
        String(20), default=AttendanceStatus.PENDING.value, nullable=False
    )

    # Approval workflow
    admin_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    approved_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Client confirmation
    client_acknowledged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    acknowledged_at: Mapped[datetime | None] = mapped_column(nullable=True)

    source: Mapped[str] = mapped_column(
        String(20), default=CourtDateSource.MANUAL.value, nullable=False
    )
    source_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    client: Mapped["Client"] = relationship(back_populates="court_dates")
    reminders: Mapped[list["CourtDateReminder"]] = relationship(
        back_populates="court_date",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CourtDateReminder.scheduled_for",
    )


class CourtDateReminder(Base):
    """One scheduled reminder (7/3/1/0 days out) for a court date."""

    __tablename__ = "court_date_reminders"
    __table_args__ = (
        Index("idx_reminders_due", "sent", "scheduled_for"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    court_date_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("court_dates.id", ondelete="CASCADE"), nullable=False
    )
    reminder_type: Mapped[str] = mapped_column(String(20), nullable=False)
    scheduled_for: Mapped[datetime] = mapped_column(nullable=False)
    sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(nullable=True)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    notification_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("notifications.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    court_date: Mapped["CourtDate"] = relationship(back_populates="reminders")
