"""Reporting routers - dashboard stats, analytics and CSV exports."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_roles
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.schemas.auth import UserSession
from securebond.services import analytics_service, audit_service, report_service

router = APIRouter(prefix="/api", tags=["reporting"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


# =============================================================================
# Schemas
# =============================================================================

class DashboardStats(BaseModel):
    total_clients: int
    active_clients: int
    upcoming_court_dates: int
    pending_payments: int
    total_revenue: Decimal
    pending_amount: Decimal


class AnalyticsOverview(BaseModel):
    monthly_revenue: dict[str, Decimal]
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    client_growth: float
    compliance_rate: float


class TopLocation(BaseModel):
    location: str
    check_ins: int
    unique_clients: int
    client_names: list[str]


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/dashboard/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return analytics_service.get_dashboard_stats(db)


@router.get("/analytics/overview", response_model=AnalyticsOverview)
def get_analytics_overview(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Twelve months of confirmed revenue plus growth and compliance rates."""
    return analytics_service.get_overview(db)


@router.get("/analytics/top-locations", response_model=list[TopLocation])
def get_top_locations(
    limit: int = Query(5, ge=1, le=50),
    days: int | None = Query(None, ge=1, le=365),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return analytics_service.get_top_locations(db, limit=limit, days=days)


@router.get("/reports/{report}.csv")
def export_report(
    report: Literal["clients", "payments", "check-ins"],
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Download a CSV export. Every export is audited."""
    content, row_count = report_service.EXPORTERS[report](db)
    audit_service.log_for_session(
        db, session, AuditEventType.DATA_EXPORTED,
        target_type=report.replace("-", "_"),
        details={"rows": row_count, "format": "csv"},
        request=request,
    )
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report}-{stamp}.csv"'},
    )
