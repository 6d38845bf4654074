"""
Notification Service - handles in-app notifications.

Provides CRUD for notifications, recipient preferences, and trigger
functions for compliance events (check-ins, court dates, alerts).
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from securebond.db.enums import (
    NOTIFICATION_PREFERENCE_KEYS,
    NotificationPriority,
    NotificationType,
    PrincipalType,
    Role,
)
from securebond.db.models import Notification, NotificationPreferences, User

logger = logging.getLogger(__name__)

DEDUPE_WINDOW = timedelta(hours=1)

PREFERENCE_FIELDS = (
    "court_reminders",
    "payment_due",
    "compliance_alerts",
    "bond_expiring",
    "email_court_reminders",
    "email_payment_due",
    "email_compliance_alerts",
    "email_bond_expiring",
    "court_reminder_days",
    "payment_reminder_days",
    "bond_expiring_days",
    "quiet_hours_enabled",
    "quiet_hours_start",
    "quiet_hours_end",
)

DEFAULT_PREFERENCES: dict[str, Any] = {
    "court_reminders": True,
    "payment_due": True,
    "compliance_alerts": True,
    "bond_expiring": True,
    "email_court_reminders": True,
    "email_payment_due": True,
    "email_compliance_alerts": True,
    "email_bond_expiring": True,
    "court_reminder_days": 3,
    "payment_reminder_days": 7,
    "bond_expiring_days": 30,
    "quiet_hours_enabled": False,
    "quiet_hours_start": "22:00",
    "quiet_hours_end": "08:00",
}


# =============================================================================
# Notification Preferences
# =============================================================================


def _get_preferences_row(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
) -> NotificationPreferences | None:
    return db.query(NotificationPreferences).filter(
        NotificationPreferences.recipient_type == recipient_type.value,
        NotificationPreferences.recipient_id == recipient_id,
    ).first()


def get_preferences(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
) -> dict[str, Any]:
    """
    Get notification preferences.

    Returns defaults if no row exists.
    """
    row = _get_preferences_row(db, recipient_type, recipient_id)
    if not row:
        return dict(DEFAULT_PREFERENCES)
    return {field: getattr(row, field) for field in PREFERENCE_FIELDS}


def update_preferences(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
    updates: dict[str, Any],
) -> dict[str, Any]:
    """
    Update notification preferences.

    Creates row if it doesn't exist.
    """
    row = _get_preferences_row(db, recipient_type, recipient_id)
    if not row:
        row = NotificationPreferences(
            recipient_type=recipient_type.value,
            recipient_id=recipient_id,
            **DEFAULT_PREFERENCES,
        )
        db.add(row)

    for key, value in updates.items():
        if key in PREFERENCE_FIELDS and value is not None:
            setattr(row, key, value)

    db.commit()
    db.refresh(row)
    return {field: getattr(row, field) for field in PREFERENCE_FIELDS}


def should_notify(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
    notification_type: NotificationType,
) -> bool:
    """Check if the recipient wants this notification type."""
    setting_key = NOTIFICATION_PREFERENCE_KEYS.get(notification_type)
    if not setting_key:
        return True
    return bool(get_preferences(db, recipient_type, recipient_id).get(setting_key, True))


def _parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def in_quiet_hours(preferences: dict[str, Any], local_time: time) -> bool:
    """
    Whether local_time falls inside the recipient's quiet hours.

    Handles windows that wrap midnight (22:00 -> 08:00).
    """
    if not preferences.get("quiet_hours_enabled"):
        return False
    start = _parse_hhmm(preferences["quiet_hours_start"])
    end = _parse_hhmm(preferences["quiet_hours_end"])
    if start == end:
        return False
    if start < end:
        return start <= local_time < end
    return local_time >= start or local_time < end


# =============================================================================
# Notification CRUD
# =============================================================================


def create_notification(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    action_url: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
    dedupe_key: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    respect_preferences: bool = True,
    commit: bool = True,
) -> Optional[Notification]:
    """
    Create a notification.

    Returns None when the recipient opted out of this type or when the
    same dedupe_key was already sent to them within the last hour.
    """
    if respect_preferences and not should_notify(db, recipient_type, recipient_id, type):
        return None

    if dedupe_key:
        window_start = datetime.now(timezone.utc) - DEDUPE_WINDOW
        existing = db.query(Notification).filter(
            Notification.dedupe_key == dedupe_key,
            Notification.recipient_type == recipient_type.value,
            Notification.recipient_id == recipient_id,
            Notification.created_at > window_start,
        ).first()

        if existing:
            return None  # Already notified

    notification = Notification(
        recipient_type=recipient_type.value,
        recipient_id=recipient_id,
        type=type.value,
        priority=priority.value,
        title=title[:255],
        message=message,
        action_url=action_url,
        extra=metadata,
        dedupe_key=dedupe_key,
        expires_at=expires_at,
    )
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    else:
        db.flush()
    return notification


def _recipient_query(db: Session, recipient_type: PrincipalType, recipient_id: UUID):
    now = datetime.now(timezone.utc)
    return db.query(Notification).filter(
        Notification.recipient_type == recipient_type.value,
        Notification.recipient_id == recipient_id,
        or_(Notification.expires_at.is_(None), Notification.expires_at > now),
    )


def get_notifications(
    db: Session,
    recipient_type: PrincipalType,
    recipient_id: UUID,
    unread_only: bool = False,
    notification_type: NotificationType | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[Notification]:
    """Get unexpired notifications for a recipient, newest first."""
    query = _recipient_query(db, recipient_type, recipient_id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    if notification_type:
        query = query.filter(Notification.type == notification_type.value)
    return query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()


def get_unread_count(db: Session, recipient_type: PrincipalType, recipient_id: UUID) -> int:
    """Get count of unread notifications."""
    return _recipient_query(db, recipient_type, recipient_id).filter(
        Notification.read.is_(False)
    ).count()


def get_notification(
    db: Session,
    notification_id: UUID,
    recipient_type: PrincipalType,
    recipient_id: UUID,
) -> Optional[Notification]:
    """Fetch a notification owned by the recipient."""
    return db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.recipient_type == recipient_type.value,
        Notification.recipient_id == recipient_id,
    ).first()


def mark_read(db: Session, notification: Notification) -> Notification:
    if not notification.read:
        notification.read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return notification


def confirm(db: Session, notification: Notification) -> Notification:
    """Confirm receipt (court reminders ask clients to confirm). Implies read."""
    now = datetime.now(timezone.utc)
    if not notification.confirmed:
        notification.confirmed = True
        notification.confirmed_at = now
    if not notification.read:
        notification.read = True
        notification.read_at = now
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, recipient_type: PrincipalType, recipient_id: UUID) -> int:
    """Mark all notifications as read. Returns count updated."""
    count = db.query(Notification).filter(
        Notification.recipient_type == recipient_type.value,
        Notification.recipient_id == recipient_id,
        Notification.read.is_(False),
    ).update(
        {"read": True, "read_at": datetime.now(timezone.utc)},
        synchronize_session=False,
    )
    db.commit()
    return count


def delete_notification(db: Session, notification: Notification) -> None:
    db.delete(notification)
    db.commit()


def cleanup_notifications(
    db: Session,
    now: datetime | None = None,
    read_retention_days: int = 30,
) -> int:
    """Delete expired notifications and read ones past retention."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=read_retention_days)
    count = db.query(Notification).filter(
        or_(
            Notification.expires_at <= now,
            and_(Notification.read.is_(True), Notification.created_at < cutoff),
        )
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("Removed %s stale notifications", count)
    return count


# =============================================================================
# Notification Triggers
# =============================================================================


def notify_admins(
    db: Session,
    type: NotificationType,
    title: str,
    message: str,
    priority: NotificationPriority = NotificationPriority.HIGH,
    action_url: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
    dedupe_prefix: Optional[str] = None,
    commit: bool = True,
) -> list[Notification]:
    """Notify every active admin. Dedupe is per admin."""
    admins = db.query(User).filter(
        User.role == Role.ADMIN.value,
        User.is_active.is_(True),
    ).all()

    created = []
    for admin in admins:
        notification = create_notification(
            db=db,
            recipient_type=PrincipalType.USER,
            recipient_id=admin.id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            action_url=action_url,
            metadata=metadata,
            dedupe_key=f"{dedupe_prefix}:{admin.id}" if dedupe_prefix else None,
            commit=commit,
        )
        if notification:
            created.append(notification)
    return created
