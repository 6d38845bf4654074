"""
Court dates router - scheduling, approval, attendance and reminders.

Manual entries are approved on creation; imported entries wait in
/pending until an admin approves them, which schedules the reminders.
"""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import AttendanceStatus, AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.db.models import CourtDate
from securebond.schemas import (
    AttendanceUpdate,
    CourtDateCreate,
    CourtDateRead,
    CourtDateUpdate,
    ReminderRead,
)
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, court_date_service, reminder_service

router = APIRouter(prefix="/api/court-dates", tags=["court-dates"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


def to_court_date_read(court_date: CourtDate, now: datetime | None = None) -> CourtDateRead:
    """Response model enriched with the client's name and days until the hearing."""
    now = now or datetime.now(timezone.utc)
    return CourtDateRead.model_validate(court_date).model_copy(update={
        "client_name": court_date.client.full_name if court_date.client else None,
        "days_until": court_date_service.days_until(court_date.court_date, now),
    })


def _get_court_date_or_404(db: Session, court_date_id: UUID) -> CourtDate:
    court_date = court_date_service.get_court_date(db, court_date_id)
    if not court_date:
        raise HTTPException(status_code=404, detail="Court date not found")
    return court_date


# =============================================================================
# Listing
# =============================================================================

@router.get("", response_model=list[CourtDateRead])
def list_court_dates(
    client_id: UUID | None = Query(None),
    approved: bool | None = Query(None),
    attendance_status: AttendanceStatus | None = Query(None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    query = court_date_service.list_court_dates(
        db, client_id=client_id, approved=approved, attendance_status=attendance_status
    )
    return [to_court_date_read(cd) for cd in query.all()]


@router.get("/upcoming", response_model=list[CourtDateRead])
def list_upcoming(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Court dates within the next `days` days, soonest first."""
    return [to_court_date_read(cd) for cd in court_date_service.get_upcoming(db, days=days)]


@router.get("/overdue", response_model=list[CourtDateRead])
def list_overdue(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Past court dates whose attendance was never recorded, newest first."""
    return [to_court_date_read(cd) for cd in court_date_service.get_overdue(db)]


@router.get("/pending", response_model=list[CourtDateRead])
def list_pending_approval(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return [to_court_date_read(cd) for cd in court_date_service.get_pending_approval(db)]


@router.get("/reminders", response_model=list[ReminderRead])
def list_reminders(
    court_date_id: UUID | None = Query(None),
    sent: bool | None = Query(None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return reminder_service.list_reminders(db, court_date_id=court_date_id, sent=sent).all()


@router.patch(
    "/reminders/{reminder_id}/acknowledge",
    response_model=ReminderRead,
    dependencies=[Depends(require_csrf_header)],
)
def acknowledge_reminder(
    reminder_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    reminder = reminder_service.get_reminder(db, reminder_id)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder_service.acknowledge_reminder(db, reminder)


# =============================================================================
# CRUD
# =============================================================================

@router.post(
    "",
    response_model=CourtDateRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_court_date(
    data: CourtDateCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    try:
        court_date = court_date_service.create_court_date(db, data, user_id=session.principal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.COURT_DATE_CREATED,
        target_type="court_date", target_id=court_date.id,
        details={"client_id": str(court_date.client_id), "source": court_date.source},
        request=request,
    )
    return to_court_date_read(court_date)


@router.get("/{court_date_id}", response_model=CourtDateRead)
def get_court_date(
    court_date_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return to_court_date_read(_get_court_date_or_404(db, court_date_id))


@router.patch(
    "/{court_date_id}",
    response_model=CourtDateRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_court_date(
    court_date_id: UUID,
    data: CourtDateUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Edit a court date. Moving the hearing reschedules unsent reminders."""
    court_date = court_date_service.update_court_date(db, _get_court_date_or_404(db, court_date_id), data)
    audit_service.log_for_session(
        db, session, AuditEventType.COURT_DATE_UPDATED,
        target_type="court_date", target_id=court_date.id,
        details={"fields": sorted(data.model_dump(exclude_unset=True).keys())},
        request=request,
    )
    return to_court_date_read(court_date)


@router.delete(
    "/{court_date_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_court_date(
    court_date_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    court_date_service.delete_court_date(db, _get_court_date_or_404(db, court_date_id))
    audit_service.log_for_session(
        db, session, AuditEventType.COURT_DATE_DELETED,
        target_type="court_date", target_id=court_date_id, request=request,
    )


@router.patch(
    "/{court_date_id}/approve",
    response_model=CourtDateRead,
    dependencies=[Depends(require_csrf_header)],
)
def approve_court_date(
    court_date_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Approve an imported court date and schedule its reminders."""
    court_date = _get_court_date_or_404(db, court_date_id)
    already_approved = court_date.admin_approved
    court_date = court_date_service.approve_court_date(db, court_date, session.principal_id)
    if not already_approved:
        audit_service.log_for_session(
            db, session, AuditEventType.COURT_DATE_APPROVED,
            target_type="court_date", target_id=court_date.id, request=request,
        )
    return to_court_date_read(court_date)


@router.post(
    "/{court_date_id}/attendance",
    response_model=CourtDateRead,
    dependencies=[Depends(require_csrf_header)],
)
def record_attendance(
    court_date_id: UUID,
    data: AttendanceUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    court_date = court_date_service.record_attendance(
        db,
        _get_court_date_or_404(db, court_date_id),
        status=data.status,
        user_id=session.principal_id,
        notes=data.notes,
    )
    audit_service.log_for_session(
        db, session, AuditEventType.COURT_ATTENDANCE_RECORDED,
        target_type="court_date", target_id=court_date.id,
        details={"status": data.status.value}, request=request,
    )
    return to_court_date_read(court_date)
