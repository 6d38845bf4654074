"""Audit router - API endpoints for viewing audit logs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_roles
from securebond.db.enums import AuditEventType, PrincipalType, ROLES_CAN_VIEW_AUDIT
from securebond.db.models import Client, User
from securebond.schemas.auth import UserSession
from securebond.services import audit_service
from securebond.utils.pagination import PaginationParams, get_pagination, page_envelope, paginate_query

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


# ============================================================================
# Schemas
# ============================================================================

class AuditLogRead(BaseModel):
    """Audit log entry for API response."""
    id: UUID
    event_type: str
    actor_type: str
    actor_id: UUID | None
    actor_name: str | None
    target_type: str | None
    target_id: UUID | None
    details: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated audit log response."""
    items: list[AuditLogRead]
    total: int
    page: int
    per_page: int
    pages: int


def _actor_names(db: Session, logs) -> dict:
    user_ids = {log.actor_id for log in logs if log.actor_id and log.actor_type == PrincipalType.USER.value}
    client_ids = {log.actor_id for log in logs if log.actor_id and log.actor_type == PrincipalType.CLIENT.value}
    names = {}
    if user_ids:
        names.update({u.id: u.display_name for u in db.query(User).filter(User.id.in_(user_ids))})
    if client_ids:
        names.update({c.id: c.full_name for c in db.query(Client).filter(Client.id.in_(client_ids))})
    return names


# ============================================================================
# Endpoints
# ============================================================================

@router.get("", response_model=AuditLogListResponse)
def list_audit_logs(
    event_type: str | None = Query(None, description="Filter by event type"),
    actor_id: UUID | None = Query(None, description="Filter by actor"),
    target_type: str | None = Query(None, description="Filter by target type"),
    start_date: datetime | None = Query(None, description="Filter events after this date"),
    end_date: datetime | None = Query(None, description="Filter events before this date"),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_AUDIT))),
):
    """
    List audit log entries, newest first.

    Requires: admin or maintenance role
    """
    query = audit_service.list_audit_logs(
        db,
        event_type=event_type,
        actor_id=actor_id,
        target_type=target_type,
        start_date=start_date,
        end_date=end_date,
    )
    logs, total = paginate_query(query, pagination)
    names = _actor_names(db, logs)

    items = [
        AuditLogRead(
            id=log.id,
            event_type=log.event_type,
            actor_type=log.actor_type,
            actor_id=log.actor_id,
            actor_name=names.get(log.actor_id) if log.actor_id else None,
            target_type=log.target_type,
            target_id=log.target_id,
            details=log.details,
            ip_address=log.ip_address,
            user_agent=log.user_agent,
            created_at=log.created_at,
        )
        for log in logs
    ]
    return AuditLogListResponse(**page_envelope(items, total, pagination))


@router.get("/event-types")
def list_event_types(
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_AUDIT))),
) -> list[str]:
    """List available audit event types for filtering."""
    return [e.value for e in AuditEventType]
