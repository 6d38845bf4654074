"""
Notifications router - /api/notifications endpoints.

Provides notification listing, read/confirm status, and preferences for
the current principal (staff user or client).
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from securebond.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from securebond.db.enums import (
    NotificationPriority,
    NotificationType,
    PrincipalType,
    ROLES_CAN_MANAGE_CASES,
)
from securebond.schemas.auth import UserSession
from securebond.services import client_service, notification_service, user_service


router = APIRouter(prefix="/api/notifications", tags=["notifications"])

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# =============================================================================
# Schemas
# =============================================================================


class NotificationRead(BaseModel):
    """Notification response."""
    id: UUID
    type: str
    priority: str
    title: str
    message: str
    action_url: str | None
    metadata: dict[str, Any] | None = Field(None, validation_alias="extra")
    read: bool
    read_at: datetime | None
    confirmed: bool
    confirmed_at: datetime | None
    expires_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class NotificationListResponse(BaseModel):
    """Paginated notification list."""
    items: list[NotificationRead]
    unread_count: int


class UnreadCountResponse(BaseModel):
    """Unread count only (for polling)."""
    count: int


class NotificationSend(BaseModel):
    """Admin-authored notification to one user or client."""
    recipient_type: PrincipalType
    recipient_id: UUID
    type: NotificationType = NotificationType.SYSTEM_ALERT
    priority: NotificationPriority = NotificationPriority.MEDIUM
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)
    action_url: str | None = Field(None, max_length=500)
    expires_at: datetime | None = None


class NotificationPreferencesRead(BaseModel):
    court_reminders: bool
    payment_due: bool
    compliance_alerts: bool
    bond_expiring: bool
    email_court_reminders: bool
    email_payment_due: bool
    email_compliance_alerts: bool
    email_bond_expiring: bool
    court_reminder_days: int
    payment_reminder_days: int
    bond_expiring_days: int
    quiet_hours_enabled: bool
    quiet_hours_start: str
    quiet_hours_end: str


class NotificationPreferencesUpdate(BaseModel):
    court_reminders: bool | None = None
    payment_due: bool | None = None
    compliance_alerts: bool | None = None
    bond_expiring: bool | None = None
    email_court_reminders: bool | None = None
    email_payment_due: bool | None = None
    email_compliance_alerts: bool | None = None
    email_bond_expiring: bool | None = None
    court_reminder_days: int | None = Field(None, ge=0, le=30)
    payment_reminder_days: int | None = Field(None, ge=0, le=30)
    bond_expiring_days: int | None = Field(None, ge=0, le=365)
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: str | None = Field(None, pattern=HHMM_PATTERN)
    quiet_hours_end: str | None = Field(None, pattern=HHMM_PATTERN)


def _get_owned_or_404(db: Session, notification_id: UUID, session: UserSession):
    notification = notification_service.get_notification(
        db,
        notification_id,
        recipient_type=session.principal_type,
        recipient_id=session.principal_id,
    )
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    type: NotificationType | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get the current principal's notifications, newest first."""
    notifications = notification_service.get_notifications(
        db=db,
        recipient_type=session.principal_type,
        recipient_id=session.principal_id,
        unread_only=unread_only,
        notification_type=type,
        limit=limit,
        offset=offset,
    )
    unread_count = notification_service.get_unread_count(
        db=db,
        recipient_type=session.principal_type,
        recipient_id=session.principal_id,
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


@router.get("/count", response_model=UnreadCountResponse)
def get_unread_count(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get unread notification count (for polling)."""
    count = notification_service.get_unread_count(
        db=db,
        recipient_type=session.principal_type,
        recipient_id=session.principal_id,
    )
    return UnreadCountResponse(count=count)


@router.get("/preferences", response_model=NotificationPreferencesRead)
def get_preferences(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return notification_service.get_preferences(db, session.principal_type, session.principal_id)


@router.patch(
    "/preferences",
    response_model=NotificationPreferencesRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_preferences(
    data: NotificationPreferencesUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return notification_service.update_preferences(
        db,
        session.principal_type,
        session.principal_id,
        data.model_dump(exclude_unset=True),
    )


@router.post(
    "/read-all",
    dependencies=[Depends(require_csrf_header)],
)
def mark_all_read(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Mark all notifications as read."""
    count = notification_service.mark_all_read(
        db=db,
        recipient_type=session.principal_type,
        recipient_id=session.principal_id,
    )
    return {"marked_read": count}


@router.post(
    "",
    response_model=NotificationRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def send_notification(
    data: NotificationSend,
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
    db: Session = Depends(get_db),
):
    """Send a notification to a staff user or client. Preferences are not applied."""
    if data.recipient_type == PrincipalType.CLIENT:
        recipient = client_service.get_client(db, data.recipient_id)
    elif data.recipient_type == PrincipalType.USER:
        recipient = user_service.get_user_by_id(db, data.recipient_id)
    else:
        raise HTTPException(status_code=400, detail="recipient_type must be user or client")
    if not recipient:
        raise HTTPException(status_code=404, detail="Recipient not found")

    notification = notification_service.create_notification(
        db,
        recipient_type=data.recipient_type,
        recipient_id=data.recipient_id,
        type=data.type,
        title=data.title,
        message=data.message,
        priority=data.priority,
        action_url=data.action_url,
        metadata={"sent_by": str(session.principal_id)},
        expires_at=data.expires_at,
        respect_preferences=False,
    )
    return NotificationRead.model_validate(notification)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationRead,
    dependencies=[Depends(require_csrf_header)],
)
def mark_notification_read(
    notification_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Mark a notification as read."""
    notification = _get_owned_or_404(db, notification_id, session)
    return NotificationRead.model_validate(notification_service.mark_read(db, notification))


@router.patch(
    "/{notification_id}/confirm",
    response_model=NotificationRead,
    dependencies=[Depends(require_csrf_header)],
)
def confirm_notification(
    notification_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Confirm receipt (court reminders ask for confirmation)."""
    notification = _get_owned_or_404(db, notification_id, session)
    return NotificationRead.model_validate(notification_service.confirm(db, notification))


@router.delete(
    "/{notification_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_notification(
    notification_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    notification_service.delete_notification(db, _get_owned_or_404(db, notification_id, session))
