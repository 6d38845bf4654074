"""Check-ins router - client compliance check-ins."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import (
    get_current_session,
    get_db,
    require_csrf_header,
    require_roles,
    resolve_client_scope,
)
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.schemas import CheckInCreate, CheckInRead
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, check_in_service, client_service

router = APIRouter(prefix="/api/check-ins", tags=["check-ins"])


@router.post(
    "",
    response_model=CheckInRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_check_in(
    data: CheckInCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Record a check-in.

    Clients check in for themselves; admins must pass client_id.
    Coordinates outside the jurisdiction raise an alert for the admins.
    """
    client_id = resolve_client_scope(session, data.client_id)
    client = client_service.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    check_in = check_in_service.record_check_in(db, client, data)
    audit_service.log_for_session(
        db, session, AuditEventType.CHECK_IN_RECORDED,
        target_type="check_in", target_id=check_in.id,
        details={"client_id": str(client.id), "within_jurisdiction": check_in.within_jurisdiction},
        request=request,
    )
    return check_in


@router.get("", response_model=list[CheckInRead])
def list_check_ins(
    client_id: UUID | None = Query(None),
    within_jurisdiction: bool | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
):
    query = check_in_service.list_check_ins(
        db, client_id=client_id, within_jurisdiction=within_jurisdiction
    )
    return query.offset(offset).limit(limit).all()
