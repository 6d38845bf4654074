"""Enum definitions for application constants."""

from securebond.db.enums.alerts import AlertSeverity, AlertType
from securebond.db.enums.audit import AuditEventType
from securebond.db.enums.auth import PrincipalType, Role, STAFF_ROLES
from securebond.db.enums.cases import (
    AttendanceStatus,
    BondStatus,
    BondType,
    CHECK_IN_FREQUENCY_DAYS,
    CheckInFrequency,
    CheckInSource,
    ClientLocationStatus,
    CourtDateSource,
    CourtType,
    PaymentMethod,
    ReminderType,
    UrgencyLevel,
)
from securebond.db.enums.notifications import (
    NOTIFICATION_PREFERENCE_KEYS,
    NotificationPriority,
    NotificationType,
)
from securebond.db.enums.permissions import (
    ROLES_CAN_MANAGE_CASES,
    ROLES_CAN_MANAGE_SETTINGS,
    ROLES_CAN_MANAGE_STAFF,
    ROLES_CAN_VIEW_ALERTS,
    ROLES_CAN_VIEW_AUDIT,
    ROLES_CAN_VIEW_OPS,
    ROLES_CAN_VIEW_SETTINGS,
)

__all__ = [
    "AlertSeverity",
    "AlertType",
    "AttendanceStatus",
    "AuditEventType",
    "BondStatus",
    "BondType",
    "CHECK_IN_FREQUENCY_DAYS",
    "CheckInFrequency",
    "CheckInSource",
    "ClientLocationStatus",
    "CourtDateSource",
    "CourtType",
    "NOTIFICATION_PREFERENCE_KEYS",
    "NotificationPriority",
    "NotificationType",
    "PaymentMethod",
    "PrincipalType",
    "ROLES_CAN_MANAGE_CASES",
    "ROLES_CAN_MANAGE_SETTINGS",
    "ROLES_CAN_MANAGE_STAFF",
    "ROLES_CAN_VIEW_ALERTS",
    "ROLES_CAN_VIEW_AUDIT",
    "ROLES_CAN_VIEW_OPS",
    "ROLES_CAN_VIEW_SETTINGS",
    "ReminderType",
    "Role",
    "STAFF_ROLES",
    "UrgencyLevel",
]
