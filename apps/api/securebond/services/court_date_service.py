"""
Court date service.

Court dates entered by staff are approved on creation; scraped or
imported dates wait in the approval queue. Approval and rescheduling
(re)build the reminder schedule.
"""

import logging
import math
from datetime import datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from securebond.db.enums import (
    AlertSeverity,
    AlertType,
    AttendanceStatus,
    CourtDateSource,
    NotificationPriority,
    NotificationType,
)
from securebond.db.models import Client, CourtDate
from securebond.schemas.court_date import CourtDateCreate, CourtDateUpdate
from securebond.services import (
    alert_service,
    company_service,
    notification_service,
    reminder_service,
)

logger = logging.getLogger(__name__)


def _as_utc(db: Session, value: datetime) -> datetime:
    """Naive datetimes are wall-clock times in the company time zone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=company_service.get_timezone(db))
    return value.astimezone(timezone.utc)


def create_court_date(
    db: Session,
    data: CourtDateCreate,
    user_id: UUID | None = None,
    now: datetime | None = None,
) -> CourtDate:
    """
    Create a court date.

    Manual entries are approved immediately and get reminders scheduled.

    Raises:
        ValueError: unknown client
    """
    if not db.get(Client, data.client_id):
        raise ValueError("Client not found")

    now = now or datetime.now(timezone.utc)
    is_manual = data.source == CourtDateSource.MANUAL
    court_date = CourtDate(
        client_id=data.client_id,
        court_date=_as_utc(db, data.court_date),
        court_type=data.court_type.value,
        court_location=data.court_location,
        case_number=data.case_number,
        charges=data.charges,
        notes=data.notes,
        source=data.source.value,
        source_verified=is_manual,
        admin_approved=is_manual,
        approved_by_user_id=user_id if is_manual else None,
        approved_at=now if is_manual else None,
        reminders=[],
    )
    db.add(court_date)
    db.flush()

    if is_manual:
        reminder_service.schedule_reminders(db, court_date, now=now, commit=False)

    db.commit()
    db.refresh(court_date)
    return court_date


def get_court_date(db: Session, court_date_id: UUID) -> CourtDate | None:
    return db.get(CourtDate, court_date_id)


def list_court_dates(
    db: Session,
    client_id: UUID | None = None,
    approved: bool | None = None,
    attendance_status: AttendanceStatus | None = None,
):
    query = db.query(CourtDate).options(joinedload(CourtDate.client))
    if client_id:
        query = query.filter(CourtDate.client_id == client_id)
    if approved is not None:
        query = query.filter(CourtDate.admin_approved == approved)
    if attendance_status:
        query = query.filter(CourtDate.attendance_status == attendance_status.value)
    return query.order_by(CourtDate.court_date)


def days_until(court_date: datetime, now: datetime) -> int:
    """Whole days until the hearing, rounded up."""
    return math.ceil((court_date - now).total_seconds() / 86400)


def get_upcoming(db: Session, days: int = 30, now: datetime | None = None) -> list[CourtDate]:
    """
    Uncompleted court dates within `days`, soonest first.

    Includes imported dates still awaiting approval so staff can see them.
    """
    now = now or datetime.now(timezone.utc)
    return db.query(CourtDate).options(joinedload(CourtDate.client)).filter(
        CourtDate.court_date >= now,
        CourtDate.court_date <= now + timedelta(days=days),
        CourtDate.completed.is_(False),
    ).order_by(CourtDate.court_date).all()


def get_overdue(db: Session, now: datetime | None = None) -> list[CourtDate]:
    """
    Court dates through the end of today (company time) with no recorded
    attendance, most recent first.
    """
    now = now or datetime.now(timezone.utc)
    tz = company_service.get_timezone(db)
    end_of_today = datetime.combine(now.astimezone(tz).date(), time.max, tzinfo=tz)
    return db.query(CourtDate).options(joinedload(CourtDate.client)).filter(
        CourtDate.court_date <= end_of_today.astimezone(timezone.utc),
        CourtDate.completed.is_(False),
        CourtDate.attendance_status == AttendanceStatus.PENDING.value,
    ).order_by(CourtDate.court_date.desc()).all()


def get_pending_approval(db: Session) -> list[CourtDate]:
    return db.query(CourtDate).options(joinedload(CourtDate.client)).filter(
        CourtDate.admin_approved.is_(False),
    ).order_by(CourtDate.court_date).all()


def approve_court_date(
    db: Session,
    court_date: CourtDate,
    user_id: UUID,
    now: datetime | None = None,
) -> CourtDate:
    """Approve and schedule reminders. Approving twice is a no-op."""
    if court_date.admin_approved:
        return court_date
    now = now or datetime.now(timezone.utc)
    court_date.admin_approved = True
    court_date.approved_by_user_id = user_id
    court_date.approved_at = now
    court_date.source_verified = True
    reminder_service.schedule_reminders(db, court_date, now=now, commit=False)
    db.commit()
    db.refresh(court_date)
    return court_date


def update_court_date(
    db: Session,
    court_date: CourtDate,
    data: CourtDateUpdate,
    now: datetime | None = None,
) -> CourtDate:
    """Apply edits; a new date/time replaces the unsent reminders."""
    updates = data.model_dump(exclude_unset=True)
    rescheduled = False
    for key, value in updates.items():
        if value is None and key in ("court_date", "court_type"):
            continue
        if key == "court_date":
            value = _as_utc(db, value)
            rescheduled = value != court_date.court_date
        elif key == "court_type":
            value = value.value
        setattr(court_date, key, value)

    if rescheduled:
        court_date.client_acknowledged = False
        court_date.acknowledged_at = None
        if court_date.attendance_status == AttendanceStatus.RESCHEDULED.value:
            court_date.attendance_status = AttendanceStatus.PENDING.value
        if court_date.admin_approved and not court_date.completed:
            reminder_service.schedule_reminders(db, court_date, now=now, commit=False)

    db.commit()
    db.refresh(court_date)
    return court_date


def record_attendance(
    db: Session,
    court_date: CourtDate,
    status: AttendanceStatus,
    user_id: UUID,
    notes: str | None = None,
) -> CourtDate:
    """
    Record the outcome of a hearing.

    attended: closes the client's open court alerts.
    missed: raises a critical failure-to-appear alert and notifies admins.
    attended/missed complete the court date and cancel pending reminders.
    """
    court_date.attendance_status = status.value
    if notes:
        court_date.notes = f"{court_date.notes}\n{notes}" if court_date.notes else notes

    if status in (AttendanceStatus.ATTENDED, AttendanceStatus.MISSED):
        court_date.completed = True
        reminder_service.cancel_unsent_reminders(db, court_date)

    client = court_date.client
    if status == AttendanceStatus.ATTENDED:
        alert_service.acknowledge_client_alerts(db, client.id, AlertType.COURT_DATE, user_id)
    elif status == AttendanceStatus.MISSED:
        tz = company_service.get_timezone(db)
        local = court_date.court_date.astimezone(tz)
        message = (
            f"{client.full_name} failed to appear for {court_date.court_type} "
            f"scheduled for {local.strftime('%Y-%m-%d %H:%M')}"
        )
        logger.warning("Failure to appear recorded for client %s", client.id)
        alert_service.create_or_update_alert(
            db,
            alert_type=AlertType.COURT_DATE,
            severity=AlertSeverity.CRITICAL,
            message=message,
            client_id=client.id,
            subject=str(court_date.id),
            commit=False,
        )
        notification_service.notify_admins(
            db,
            type=NotificationType.SYSTEM_ALERT,
            title="Failure to appear",
            message=message,
            priority=NotificationPriority.URGENT,
            action_url=f"/admin/clients/{client.id}",
            metadata={"court_date_id": str(court_date.id), "client_id": str(client.id)},
            commit=False,
        )

    db.commit()
    db.refresh(court_date)
    return court_date


def acknowledge_by_client(db: Session, court_date: CourtDate) -> CourtDate:
    if not court_date.client_acknowledged:
        court_date.client_acknowledged = True
        court_date.acknowledged_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(court_date)
    return court_date


def delete_court_date(db: Session, court_date: CourtDate) -> None:
    db.delete(court_date)
    db.commit()
