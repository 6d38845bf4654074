"""Company configuration service (single-row agency settings)."""

import logging
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.db.enums import CHECK_IN_FREQUENCY_DAYS, CheckInFrequency
from securebond.db.models import CompanyConfiguration

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_SETTINGS: dict[str, Any] = {
    "court_reminder_days": 3,
    "check_in_frequency": CheckInFrequency.WEEKLY.value,
    "gps_tracking_enabled": True,
}


def get_configuration(db: Session) -> CompanyConfiguration | None:
    return db.query(CompanyConfiguration).order_by(CompanyConfiguration.updated_at.desc()).first()


def upsert_configuration(db: Session, data: dict[str, Any]) -> CompanyConfiguration:
    """Create the configuration row or overwrite the existing one."""
    config = get_configuration(db)
    if not config:
        config = CompanyConfiguration()
        db.add(config)

    for key, value in data.items():
        if hasattr(config, key):
            setattr(config, key, value)

    db.commit()
    db.refresh(config)
    logger.info("Company configuration saved")
    return config


def get_timezone(db: Session) -> ZoneInfo:
    """Company time zone, falling back to DEFAULT_TIMEZONE."""
    config = get_configuration(db)
    return ZoneInfo(config.timezone if config and config.timezone else settings.DEFAULT_TIMEZONE)


def get_custom_setting(db: Session, key: str) -> Any:
    config = get_configuration(db)
    custom = (config.custom_settings if config else None) or {}
    return custom.get(key, DEFAULT_CUSTOM_SETTINGS.get(key))


def get_check_in_interval_days(db: Session) -> int:
    """Days a client may go without checking in before it counts as missed."""
    value = get_custom_setting(db, "check_in_frequency")
    try:
        return CHECK_IN_FREQUENCY_DAYS[CheckInFrequency(value)]
    except ValueError:
        logger.warning("Unknown check_in_frequency '%s', using weekly", value)
        return CHECK_IN_FREQUENCY_DAYS[CheckInFrequency.WEEKLY]


def seed_default_configuration(db: Session) -> CompanyConfiguration:
    """Insert the default agency profile if none exists."""
    existing = get_configuration(db)
    if existing:
        return existing
    return upsert_configuration(
        db,
        {
            "company_name": "Aloha Bail Bonds LLC",
            "state": "HI",
            "city": "Honolulu",
            "timezone": settings.DEFAULT_TIMEZONE,
            "business_type": "bail_bonds",
            "operating_hours": {"monday_friday": "08:00-18:00", "emergency": "24/7"},
            "custom_settings": dict(DEFAULT_CUSTOM_SETTINGS),
        },
    )
