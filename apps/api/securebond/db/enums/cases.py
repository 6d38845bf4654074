"""Enums for bonds, payments, check-ins and court dates."""

from enum import Enum


class BondStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FORFEITED = "forfeited"
    CANCELLED = "cancelled"
    SURRENDERED = "surrendered"


class BondType(str, Enum):
    SURETY = "surety"
    CASH = "cash"
    PROPERTY = "property"
    FEDERAL = "federal"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    MONEY_ORDER = "money_order"
    OTHER = "other"


class CheckInSource(str, Enum):
    """How a check-in position was obtained."""
    GPS = "gps"
    CELL_TOWER = "cell_tower"
    MANUAL = "manual"


class CourtType(str, Enum):
    HEARING = "hearing"
    TRIAL = "trial"
    ARRAIGNMENT = "arraignment"
    SENTENCING = "sentencing"
    STATUS_CONFERENCE = "status_conference"
    OTHER = "other"


class AttendanceStatus(str, Enum):
    PENDING = "pending"
    ATTENDED = "attended"
    MISSED = "missed"
    RESCHEDULED = "rescheduled"


class CourtDateSource(str, Enum):
    """
    Where a court date came from.

    Manual entries are approved on creation; scraped and imported
    entries wait for admin approval before reminders are scheduled.
    """
    MANUAL = "manual"
    SCRAPED = "scraped"
    IMPORTED = "imported"


class ReminderType(str, Enum):
    INITIAL = "initial"  # 7 days out
    FOLLOWUP_1 = "followup_1"  # 3 days out
    FOLLOWUP_2 = "followup_2"  # 1 day out
    FINAL = "final"  # Day of


class CheckInFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


CHECK_IN_FREQUENCY_DAYS = {
    CheckInFrequency.DAILY: 1,
    CheckInFrequency.WEEKLY: 7,
    CheckInFrequency.BIWEEKLY: 14,
    CheckInFrequency.MONTHLY: 30,
}


class ClientLocationStatus(str, Enum):
    COMPLIANT = "compliant"
    OVERDUE = "overdue"
    MISSING = "missing"


class UrgencyLevel(str, Enum):
    """Contact form urgency."""
    EMERGENCY = "emergency"
    URGENT = "urgent"
    NORMAL = "normal"
