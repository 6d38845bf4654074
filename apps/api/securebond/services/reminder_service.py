"""
Court date reminder scheduling and dispatch.

Each approved court date gets up to four reminders at 09:00 company time:
7, 3 and 1 day(s) before, and on the day itself. Dispatch turns due
reminders into in-app notifications for the client.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from securebond.db.enums import NotificationPriority, NotificationType, PrincipalType, ReminderType
from securebond.db.models import CourtDate, CourtDateReminder
from securebond.services import company_service, notification_service

logger = logging.getLogger(__name__)

REMINDER_TIME = time(9, 0)

# (type, days before court date, priority, title suffix)
REMINDER_SCHEDULE = (
    (ReminderType.INITIAL, 7, NotificationPriority.MEDIUM, "7 Days"),
    (ReminderType.FOLLOWUP_1, 3, NotificationPriority.MEDIUM, "3 Days"),
    (ReminderType.FOLLOWUP_2, 1, NotificationPriority.HIGH, "1 Day"),
    (ReminderType.FINAL, 0, NotificationPriority.URGENT, "Today"),
)
_SCHEDULE_BY_TYPE = {entry[0]: entry for entry in REMINDER_SCHEDULE}


def reminder_times(court_date: datetime, tz: ZoneInfo) -> list[tuple[ReminderType, datetime]]:
    """Reminder instants (UTC) for a court date, before any filtering."""
    local_day = court_date.astimezone(tz).date()
    times = []
    for reminder_type, days_before, _, _ in REMINDER_SCHEDULE:
        local = datetime.combine(local_day - timedelta(days=days_before), REMINDER_TIME, tzinfo=tz)
        times.append((reminder_type, local.astimezone(timezone.utc)))
    return times


def schedule_reminders(
    db: Session,
    court_date: CourtDate,
    now: datetime | None = None,
    commit: bool = True,
) -> list[CourtDateReminder]:
    """
    (Re)build the unsent reminders for a court date.

    Sent reminders are kept as history. Only instants still in the future
    and before the hearing itself are scheduled.
    """
    now = now or datetime.now(timezone.utc)
    tz = company_service.get_timezone(db)

    for reminder in list(court_date.reminders):
        if not reminder.sent:
            court_date.reminders.remove(reminder)
    already_sent = {r.reminder_type for r in court_date.reminders}

    created = []
    for reminder_type, scheduled_for in reminder_times(court_date.court_date, tz):
        if reminder_type.value in already_sent:
            continue
        if scheduled_for <= now or scheduled_for >= court_date.court_date:
            continue
        reminder = CourtDateReminder(
            reminder_type=reminder_type.value,
            scheduled_for=scheduled_for,
        )
        court_date.reminders.append(reminder)
        created.append(reminder)

    if commit:
        db.commit()
    else:
        db.flush()
    return created


def cancel_unsent_reminders(db: Session, court_date: CourtDate) -> int:
    """Drop pending reminders (court date completed or deleted). Caller commits."""
    pending = [r for r in court_date.reminders if not r.sent]
    for reminder in pending:
        court_date.reminders.remove(reminder)
    return len(pending)


def build_reminder_title(reminder_type: ReminderType) -> str:
    return f"Court Date Reminder - {_SCHEDULE_BY_TYPE[reminder_type][3]}"


def build_reminder_message(
    reminder_type: ReminderType,
    court_date: CourtDate,
    client_name: str,
    tz: ZoneInfo,
) -> str:
    headline = {
        ReminderType.INITIAL: f"Upcoming court date for {client_name} in 7 days",
        ReminderType.FOLLOWUP_1: f"Court date for {client_name} is in 3 days - please confirm attendance",
        ReminderType.FOLLOWUP_2: f"URGENT: Court date for {client_name} is tomorrow",
        ReminderType.FINAL: f"Court date for {client_name} is TODAY",
    }[reminder_type]
    local = court_date.court_date.astimezone(tz)
    location = court_date.court_location or "TBD"
    return (
        f"{headline}\n\n"
        f"Date: {local.strftime('%B %d, %Y').replace(' 0', ' ')}\n"
        f"Time: {local.strftime('%I:%M %p').lstrip('0')}\n"
        f"Location: {location}"
    )


def _send_reminder(db: Session, reminder: CourtDateReminder, tz: ZoneInfo, now: datetime) -> bool:
    """Create the client notification and mark the reminder sent."""
    court_date = reminder.court_date
    client = court_date.client
    reminder_type = ReminderType(reminder.reminder_type)
    priority = _SCHEDULE_BY_TYPE[reminder_type][2]

    notification = notification_service.create_notification(
        db,
        recipient_type=PrincipalType.CLIENT,
        recipient_id=client.id,
        type=NotificationType.COURT_REMINDER,
        title=build_reminder_title(reminder_type),
        message=build_reminder_message(reminder_type, court_date, client.full_name, tz),
        priority=priority,
        action_url="/client/court-dates",
        metadata={
            "court_date_id": str(court_date.id),
            "client_id": str(client.id),
            "reminder_type": reminder_type.value,
        },
        dedupe_key=f"court_reminder:{court_date.id}:{reminder_type.value}",
        expires_at=court_date.court_date + timedelta(days=1),
        commit=False,
    )
    reminder.sent = True
    reminder.sent_at = now
    reminder.notification_id = notification.id if notification else None
    return notification is not None


def _in_client_quiet_hours(db: Session, client_id: UUID, local_time: time) -> bool:
    preferences = notification_service.get_preferences(db, PrincipalType.CLIENT, client_id)
    return notification_service.in_quiet_hours(preferences, local_time)


def process_pending_reminders(db: Session, now: datetime | None = None) -> dict[str, int]:
    """
    Dispatch every reminder due at or before `now`.

    Reminders for unapproved or completed court dates are skipped and left
    unsent. Non-final reminders wait out the client's quiet hours. A failure
    on one reminder is logged and does not stop the batch.
    """
    now = now or datetime.now(timezone.utc)
    tz = company_service.get_timezone(db)

    due = db.query(CourtDateReminder).join(CourtDate).filter(
        CourtDateReminder.sent.is_(False),
        CourtDateReminder.scheduled_for <= now,
        CourtDate.admin_approved.is_(True),
        CourtDate.completed.is_(False),
    ).order_by(CourtDateReminder.scheduled_for).all()

    sent = 0
    suppressed = 0
    deferred = 0
    failed = 0
    local_now = now.astimezone(tz).time()
    for reminder in due:
        try:
            if reminder.reminder_type != ReminderType.FINAL.value and _in_client_quiet_hours(
                db, reminder.court_date.client_id, local_now
            ):
                deferred += 1
                continue
            if _send_reminder(db, reminder, tz, now):
                sent += 1
            else:
                suppressed += 1
            db.commit()
        except Exception:
            db.rollback()
            failed += 1
            logger.exception("Failed to send court reminder %s", reminder.id)

    logger.info(
        "Court reminders: %s sent, %s suppressed, %s deferred, %s failed",
        sent, suppressed, deferred, failed,
    )
    return {
        "due": len(due),
        "sent": sent,
        "suppressed": suppressed,
        "deferred": deferred,
        "failed": failed,
    }


def list_reminders(
    db: Session,
    court_date_id: UUID | None = None,
    sent: bool | None = None,
):
    query = db.query(CourtDateReminder)
    if court_date_id:
        query = query.filter(CourtDateReminder.court_date_id == court_date_id)
    if sent is not None:
        query = query.filter(CourtDateReminder.sent == sent)
    return query.order_by(CourtDateReminder.scheduled_for)


def get_reminder(db: Session, reminder_id: UUID) -> CourtDateReminder | None:
    return db.get(CourtDateReminder, reminder_id)


def acknowledge_reminder(db: Session, reminder: CourtDateReminder) -> CourtDateReminder:
    if not reminder.confirmed:
        reminder.confirmed = True
        reminder.confirmed_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(reminder)
    return reminder
