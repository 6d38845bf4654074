"""Compliance alert enums."""

from enum import Enum


class AlertType(str, Enum):
    MISSED_CHECKIN = "missed_checkin"
    COURT_DATE = "court_date"
    PAYMENT_DUE = "payment_due"
    JURISDICTION_VIOLATION = "jurisdiction_violation"
    SYSTEM = "system"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
