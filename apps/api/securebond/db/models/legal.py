"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from securebond.db.base import Base, JSONType
from securebond.db.types import utc_now


class PrivacyAcknowledgment(Base):
    """Record that a principal accepted a privacy policy version."""

    __tablename__ = "privacy_acknowledgments"
    __table_args__ = (
        Index("idx_privacy_ack_principal", "principal_type", "principal_id", "version"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    principal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    principal_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    # Categories the principal consented to, e.g. ["location", "contact"]
    data_types: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    acknowledged_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


class TermsAcknowledgment(Base):
    """Record that a principal accepted a terms of service version."""

    __tablename__ = "terms_acknowledgments"
    __table_args__ = (
        Index("idx_terms_ack_principal", "principal_type", "principal_id", "version"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    principal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    principal_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    acknowledged_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
