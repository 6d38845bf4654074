"""
Check-in service.

Records client check-ins, runs the jurisdiction check, and sweeps for
clients who have gone quiet longer than the configured check-in interval.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from securebond.db.enums import (
    AlertSeverity,
    AlertType,
    CheckInSource,
    NotificationPriority,
    NotificationType,
    PrincipalType,
)
from securebond.db.models import CheckIn, Client
from securebond.schemas.check_in import CheckInCreate
from securebond.services import (
    alert_service,
    company_service,
    geolocation_service,
    notification_service,
)

logger = logging.getLogger(__name__)


def record_check_in(
    db: Session,
    client: Client,
    data: CheckInCreate,
    now: datetime | None = None,
) -> CheckIn:
    """
    Store a check-in and update the client's compliance counters.

    With coordinates, a position outside the jurisdiction raises a
    jurisdiction_violation alert and notifies every admin.
    """
    now = now or datetime.now(timezone.utc)

    within = None
    if data.latitude is not None and data.longitude is not None:
        bounds = geolocation_service.get_jurisdiction_bounds(db)
        within = bounds.contains(data.latitude, data.longitude)

    source = data.source or (
        CheckInSource.GPS if data.latitude is not None else CheckInSource.MANUAL
    )
    check_in = CheckIn(
        client_id=client.id,
        check_in_time=now,
        location=data.location,
        latitude=data.latitude,
        longitude=data.longitude,
        accuracy=data.accuracy,
        within_jurisdiction=within,
        source=source.value,
        notes=data.notes,
    )
    db.add(check_in)

    client.last_check_in_at = now
    client.missed_check_ins = 0
    client.missed_check_in_flagged_at = None
    db.flush()

    if within is False:
        flag_jurisdiction_violation(db, client, data.latitude, data.longitude, commit=False)

    db.commit()
    db.refresh(check_in)
    return check_in


def flag_jurisdiction_violation(
    db: Session,
    client: Client,
    latitude: float,
    longitude: float,
    commit: bool = True,
) -> None:
    """Raise the violation alert and tell the admins."""
    message = (
        f"{client.full_name} checked in outside the jurisdiction "
        f"({latitude:.4f}, {longitude:.4f})"
    )
    logger.warning("Jurisdiction violation for client %s", client.id)
    alert_service.create_or_update_alert(
        db,
        alert_type=AlertType.JURISDICTION_VIOLATION,
        severity=AlertSeverity.HIGH,
        message=message,
        client_id=client.id,
        commit=False,
    )
    notification_service.notify_admins(
        db,
        type=NotificationType.JURISDICTION_VIOLATION,
        title="Jurisdiction violation",
        message=message,
        priority=NotificationPriority.URGENT,
        action_url=f"/admin/clients/{client.id}",
        metadata={"client_id": str(client.id), "latitude": latitude, "longitude": longitude},
        commit=False,
    )
    if commit:
        db.commit()


def list_check_ins(
    db: Session,
    client_id: UUID | None = None,
    within_jurisdiction: bool | None = None,
):
    """Check-in query, newest first (caller paginates)."""
    query = db.query(CheckIn)
    if client_id:
        query = query.filter(CheckIn.client_id == client_id)
    if within_jurisdiction is not None:
        query = query.filter(CheckIn.within_jurisdiction == within_jurisdiction)
    return query.order_by(CheckIn.check_in_time.desc())


def _missed_severity(missed: int) -> AlertSeverity:
    if missed >= 3:
        return AlertSeverity.CRITICAL
    if missed == 2:
        return AlertSeverity.HIGH
    return AlertSeverity.MEDIUM


def sweep_missed_check_ins(db: Session, now: datetime | None = None) -> dict[str, int]:
    """
    Count a missed check-in for every active client who is overdue.

    A client is overdue when neither a check-in nor a previous flag falls
    inside the last interval, so each interval is counted at most once.
    """
    now = now or datetime.now(timezone.utc)
    interval_days = company_service.get_check_in_interval_days(db)
    cutoff = now - timedelta(days=interval_days)

    last_seen = func.coalesce(Client.last_check_in_at, Client.created_at)
    overdue = db.query(Client).filter(
        Client.is_active.is_(True),
        last_seen < cutoff,
        or_(
            Client.missed_check_in_flagged_at.is_(None),
            Client.missed_check_in_flagged_at < cutoff,
        ),
    ).all()

    alerts = 0
    for client in overdue:
        client.missed_check_ins += 1
        client.missed_check_in_flagged_at = now
        severity = _missed_severity(client.missed_check_ins)
        message = (
            f"{client.full_name} has missed {client.missed_check_ins} "
            f"consecutive check-in{'s' if client.missed_check_ins != 1 else ''}"
        )
        alert_service.create_or_update_alert(
            db,
            alert_type=AlertType.MISSED_CHECKIN,
            severity=severity,
            message=message,
            client_id=client.id,
            commit=False,
        )
        alerts += 1
        notification_service.create_notification(
            db,
            recipient_type=PrincipalType.CLIENT,
            recipient_id=client.id,
            type=NotificationType.CHECK_IN_MISSED,
            title="Check-in overdue",
            message="You missed your scheduled check-in. Please check in as soon as possible.",
            priority=NotificationPriority.HIGH,
            action_url="/client/check-in",
            dedupe_key=f"check_in_missed:{client.id}:{client.missed_check_ins}",
            commit=False,
        )

    db.commit()
    logger.info("Missed check-in sweep flagged %s clients", len(overdue))
    return {"clients_flagged": len(overdue), "alerts_raised": alerts}
