"""SQLAlchemy ORM models."""

from securebond.db.models.alerts import Alert
from securebond.db.models.audit import AuditLog
from securebond.db.models.auth import User
from securebond.db.models.clients import Bond, CheckIn, Client, Expense, Payment
from securebond.db.models.company import CompanyConfiguration
from securebond.db.models.court import CourtDate, CourtDateReminder
from securebond.db.models.legal import PrivacyAcknowledgment, TermsAcknowledgment
from securebond.db.models.notifications import Notification, NotificationPreferences

__all__ = [
    "Alert",
    "AuditLog",
    "Bond",
    "CheckIn",
    "Client",
    "CompanyConfiguration",
    "CourtDate",
    "CourtDateReminder",
    "Expense",
    "Notification",
    "NotificationPreferences",
    "Payment",
    "PrivacyAcknowledgment",
    "TermsAcknowledgment",
    "User",
]
