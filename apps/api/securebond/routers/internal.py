"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from external cron (Render/Railway/GH Actions).
"""

import hmac

from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel

from securebond.core.config import settings
from securebond.db.session import SessionLocal
from securebond.services import check_in_service, notification_service, reminder_service


router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    expected = settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if not hmac.compare_digest(x_internal_secret.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Invalid internal secret")


class CourtReminderResponse(BaseModel):
    due: int
    sent: int
    suppressed: int
    deferred: int
    failed: int


class MissedCheckInResponse(BaseModel):
    clients_flagged: int
    alerts_raised: int


class CleanupResponse(BaseModel):
    deleted: int


@router.post("/court-reminders", response_model=CourtReminderResponse)
def send_court_reminders(x_internal_secret: str = Header(...)):
    """
    Deliver every court reminder that is due.

    Run every 15 minutes; reminders already sent are skipped.
    """
    verify_internal_secret(x_internal_secret)
    with SessionLocal() as db:
        return reminder_service.process_pending_reminders(db)


@router.post("/missed-check-ins", response_model=MissedCheckInResponse)
def check_missed_check_ins(x_internal_secret: str = Header(...)):
    """
    Daily sweep for clients overdue on their check-in.

    A client is flagged at most once per check-in interval.
    """
    verify_internal_secret(x_internal_secret)
    with SessionLocal() as db:
        return check_in_service.sweep_missed_check_ins(db)


@router.post("/notifications-cleanup", response_model=CleanupResponse)
def cleanup_notifications(x_internal_secret: str = Header(...)):
    """Remove expired notifications and read ones past retention."""
    verify_internal_secret(x_internal_secret)
    with SessionLocal() as db:
        return CleanupResponse(deleted=notification_service.cleanup_notifications(db))
