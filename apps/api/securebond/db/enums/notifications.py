"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""
    COURT_REMINDER = "court_reminder"
    PAYMENT_DUE = "payment_due"
    CHECK_IN_MISSED = "check_in_missed"
    JURISDICTION_VIOLATION = "jurisdiction_violation"
    BOND_EXPIRING = "bond_expiring"
    SYSTEM_ALERT = "system_alert"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Preference toggle that gates each notification type (None = always delivered)
NOTIFICATION_PREFERENCE_KEYS = {
    NotificationType.COURT_REMINDER: "court_reminders",
    NotificationType.PAYMENT_DUE: "payment_due",
    NotificationType.CHECK_IN_MISSED: "compliance_alerts",
    NotificationType.JURISDICTION_VIOLATION: "compliance_alerts",
    NotificationType.BOND_EXPIRING: "bond_expiring",
    NotificationType.SYSTEM_ALERT: None,
}
