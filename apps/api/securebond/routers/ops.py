"""Ops router - request performance metrics and detailed health."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from securebond.core.config import settings
from securebond.core.deps import require_roles
from securebond.core.performance import performance_monitor
from securebond.core.rate_limit import redis_backed
from securebond.db.enums import ROLES_CAN_VIEW_OPS
from securebond.db.session import engine
from securebond.schemas.auth import UserSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ops"])


def check_database() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return False


@router.get("/api/performance/stats")
def get_performance_stats(
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_OPS))),
):
    """Rolling request statistics for this API process."""
    return performance_monitor.stats()


@router.get("/api/performance/metrics")
def get_performance_metrics(
    limit: int = Query(50, ge=1, le=1000),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_OPS))),
):
    """Most recent request metrics, newest last."""
    return [m.to_dict() for m in performance_monitor.recent(limit)]


@router.get("/api/health")
def detailed_health():
    """
    Per-service health.

    unhealthy (503): database unreachable
    degraded: an optional integration is not configured
    """
    database_ok = check_database()
    services = {
        "database": "up" if database_ok else "down",
        "geolocation": "configured" if settings.geolocation_configured else "not_configured",
        "contact_storage": "configured" if settings.supabase_configured else "not_configured",
        "rate_limit_storage": "redis" if redis_backed() else "memory",
    }
    if not database_ok:
        status = "unhealthy"
    elif not (settings.geolocation_configured and settings.supabase_configured):
        status = "degraded"
    else:
        status = "healthy"

    body = {
        "status": status,
        "services": services,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=503 if not database_ok else 200, content=body)
