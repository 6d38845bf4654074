"""Service layer modules."""

# Import service modules (not individual functions) for cleaner access
from securebond.services import alert_service
from securebond.services import analytics_service
from securebond.services import audit_service
from securebond.services import bond_service
from securebond.services import check_in_service
from securebond.services import client_service
from securebond.services import company_service
from securebond.services import contact_service
from securebond.services import court_date_service
from securebond.services import expense_service
from securebond.services import geolocation_service
from securebond.services import http_service
from securebond.services import legal_service
from securebond.services import notification_service
from securebond.services import payment_service
from securebond.services import reminder_service
from securebond.services import report_service
from securebond.services import user_service

__all__ = [
    "alert_service",
    "analytics_service",
    "audit_service",
    "bond_service",
    "check_in_service",
    "client_service",
    "company_service",
    "contact_service",
    "court_date_service",
    "expense_service",
    "geolocation_service",
    "http_service",
    "legal_service",
    "notification_service",
    "payment_service",
    "reminder_service",
    "report_service",
    "user_service",
]
