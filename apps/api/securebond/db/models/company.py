"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from securebond.db.base import Base, JSONType
from securebond.db.types import utc_now


class CompanyConfiguration(Base):
    """
    Agency profile and operating settings (single row).

    Jurisdiction bounds, when all four are set, override the
    JURISDICTION_* defaults from settings.
    """

    __tablename__ = "company_configurations"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    license_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    timezone: Mapped[str] = mapped_column(String(50), default="Pacific/Honolulu", nullable=False)
    business_type: Mapped[str] = mapped_column(String(50), default="bail_bonds", nullable=False)
    operating_hours: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    custom_settings: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    # Jurisdiction bounding box
    jurisdiction_min_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    jurisdiction_max_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    jurisdiction_min_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    jurisdiction_max_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )
