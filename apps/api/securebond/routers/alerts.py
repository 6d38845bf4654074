"""Alerts router - compliance alerts for admins."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import AlertSeverity, AlertType, AuditEventType, ROLES_CAN_VIEW_ALERTS
from securebond.db.models import Alert
from securebond.schemas import AlertCreate, AlertRead, AlertSummary
from securebond.schemas.auth import UserSession
from securebond.services import alert_service, audit_service, client_service

router = APIRouter(prefix="/api/alerts", tags=["alerts"])

require_alert_access = require_roles(list(ROLES_CAN_VIEW_ALERTS))


def _to_read(alert: Alert) -> AlertRead:
    return AlertRead.model_validate(alert).model_copy(
        update={"client_name": alert.client.full_name if alert.client else None}
    )


@router.get("", response_model=list[AlertRead])
def list_alerts(
    acknowledged: bool | None = Query(False, description="Default: open alerts only"),
    severity: AlertSeverity | None = Query(None),
    alert_type: AlertType | None = Query(None),
    client_id: UUID | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_alert_access),
):
    query = alert_service.list_alerts(
        db,
        acknowledged=acknowledged,
        severity=severity,
        alert_type=alert_type,
        client_id=client_id,
    )
    return [_to_read(a) for a in query.offset(offset).limit(limit).all()]


@router.get("/unacknowledged", response_model=list[AlertRead])
def list_unacknowledged(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_alert_access),
):
    return [_to_read(a) for a in alert_service.list_alerts(db, acknowledged=False).all()]


@router.get("/summary", response_model=AlertSummary)
def get_summary(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_alert_access),
):
    """Open alert counts by severity."""
    return alert_service.get_alert_summary(db)


@router.post(
    "",
    response_model=AlertRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_alert(
    data: AlertCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_alert_access),
):
    """Manual alert raised by an admin."""
    if data.client_id and not client_service.get_client(db, data.client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    alert = alert_service.create_alert(
        db,
        alert_type=data.alert_type,
        severity=data.severity,
        message=data.message,
        client_id=data.client_id,
    )
    return _to_read(alert)


@router.patch(
    "/{alert_id}/acknowledge",
    response_model=AlertRead,
    dependencies=[Depends(require_csrf_header)],
)
def acknowledge_alert(
    alert_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_alert_access),
):
    alert = alert_service.get_alert(db, alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    alert = alert_service.acknowledge_alert(db, alert, session.principal_id)
    audit_service.log_for_session(
        db, session, AuditEventType.ALERT_ACKNOWLEDGED,
        target_type="alert", target_id=alert.id, request=request,
    )
    return _to_read(alert)
