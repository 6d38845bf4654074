"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from securebond.db.base import Base, JSONType
from securebond.db.enums import NotificationPriority
from securebond.db.types import utc_now


class Notification(Base):
    """
    In-app notification for a staff user or a client.

    Dedupe key: {type}:{entity_id}:{recipient_id} - prevents duplicates
    within a one-hour window.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notif_recipient_unread", "recipient_type", "recipient_id", "read", "created_at"),
        Index("idx_notif_dedupe", "dedupe_key", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)
    recipient_id: Mapped[uuid.UUID] = mapped_column(nullable=False)

    type: Mapped[str] = mapped_column(String(40), nullable=False)
    priority: Mapped[str] = mapped_column(
        String(20), default=NotificationPriority.MEDIUM.value, nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    action_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # "metadata" is reserved on declarative classes
    extra: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    dedupe_key: Mapped[str | None] = mapped_column(String(255), nullable=True)

    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


class NotificationPreferences(Base):
    """
    Per-recipient notification preferences.

    Missing row = defaults (everything in-app ON, email ON, quiet hours OFF).
    """

    __tablename__ = "notification_preferences"
    __table_args__ = (
        UniqueConstraint("recipient_type", "recipient_id", name="uq_notif_prefs_recipient"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)
    recipient_id: Mapped[uuid.UUID] = mapped_column(nullable=False)

    # In-app toggles
    court_reminders: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    payment_due: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    compliance_alerts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    bond_expiring: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Email toggles (stored for the delivery channel, not sent by the API)
    email_court_reminders: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_payment_due: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_compliance_alerts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_bond_expiring: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Lead times (days)
    court_reminder_days: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    payment_reminder_days: Mapped[int] = mapped_column(Integer, default=7, nullable=False)
    bond_expiring_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)

    # Quiet hours, local company time ("HH:MM")
    quiet_hours_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    quiet_hours_start: Mapped[str] = mapped_column(String(5), default="22:00", nullable=False)
    quiet_hours_end: Mapped[str] = mapped_column(String(5), default="08:00", nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )
