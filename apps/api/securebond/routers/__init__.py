"""API routers."""

from securebond.routers.alerts import router as alerts_router
from securebond.routers.audit import router as audit_router
from securebond.routers.auth import router as auth_router
from securebond.routers.bonds import router as bonds_router
from securebond.routers.check_ins import router as check_ins_router
from securebond.routers.client_portal import router as client_portal_router
from securebond.routers.clients import router as clients_router
from securebond.routers.company import router as company_router
from securebond.routers.contact import router as contact_router
from securebond.routers.court_dates import router as court_dates_router
from securebond.routers.expenses import router as expenses_router
from securebond.routers.geolocation import router as geolocation_router
from securebond.routers.internal import router as internal_router
from securebond.routers.legal import router as legal_router
from securebond.routers.notifications import router as notifications_router
from securebond.routers.ops import router as ops_router
from securebond.routers.payments import router as payments_router
from securebond.routers.reports import router as reports_router
from securebond.routers.users import router as users_router

__all__ = [
    "alerts_router",
    "audit_router",
    "auth_router",
    "bonds_router",
    "check_ins_router",
    "client_portal_router",
    "clients_router",
    "company_router",
    "contact_router",
    "court_dates_router",
    "expenses_router",
    "geolocation_router",
    "internal_router",
    "legal_router",
    "notifications_router",
    "ops_router",
    "payments_router",
    "reports_router",
    "users_router",
]
