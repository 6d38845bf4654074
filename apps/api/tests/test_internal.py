"""Tests for the cron endpoints under /internal/scheduled."""

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from httpx import AsyncClient

from securebond.core.config import settings
from securebond.db.enums import NotificationType, PrincipalType
from securebond.db.models import Alert, CourtDateReminder, Notification
from securebond.schemas.court_date import CourtDateCreate
from securebond.services import court_date_service, notification_service

HONOLULU = ZoneInfo("Pacific/Honolulu")
SECRET_HEADERS = {"X-Internal-Secret": "test-internal-secret"}


@pytest.mark.asyncio
async def test_missing_secret_header(client: AsyncClient):
    response = await client.post("/internal/scheduled/court-reminders")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_wrong_secret(client: AsyncClient):
    response = await client.post(
        "/internal/scheduled/court-reminders",
        headers={"X-Internal-Secret": "guess"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_secret_prefix_is_not_enough(client: AsyncClient):
    for value in ("test-internal", "test-internal-secret-and-more"):
        response = await client.post(
            "/internal/scheduled/court-reminders",
            headers={"X-Internal-Secret": value},
        )
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_secret_not_configured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_SECRET", "")
    response = await client.post("/internal/scheduled/missed-check-ins", headers=SECRET_HEADERS)
    assert response.status_code == 501


@pytest.mark.asyncio
async def test_court_reminders_job(client: AsyncClient, bail_client, db):
    local_day = (datetime.now(timezone.utc).astimezone(HONOLULU) + timedelta(days=2)).date()
    hearing = datetime.combine(local_day, time(14, 0), tzinfo=HONOLULU)
    # Scheduled a week ago, so the 7 and 3 day reminders are now overdue
    court_date = court_date_service.create_court_date(
        db,
        CourtDateCreate(client_id=bail_client.id, court_date=hearing, court_location="Hilo Courthouse"),
        now=hearing - timedelta(days=8),
    )

    response = await client.post("/internal/scheduled/court-reminders", headers=SECRET_HEADERS)
    assert response.status_code == 200
    assert response.json() == {"due": 2, "sent": 2, "suppressed": 0, "deferred": 0, "failed": 0}

    db.expire_all()
    sent = db.query(CourtDateReminder).filter(
        CourtDateReminder.court_date_id == court_date.id,
        CourtDateReminder.sent.is_(True),
    ).count()
    assert sent == 2
    assert db.query(Notification).filter(
        Notification.type == NotificationType.COURT_REMINDER.value
    ).count() == 2

    # Second run finds nothing new
    response = await client.post("/internal/scheduled/court-reminders", headers=SECRET_HEADERS)
    assert response.json()["due"] == 0


@pytest.mark.asyncio
async def test_missed_check_ins_job(client: AsyncClient, bail_client, db):
    bail_client.last_check_in_at = datetime.now(timezone.utc) - timedelta(days=10)
    db.commit()

    response = await client.post("/internal/scheduled/missed-check-ins", headers=SECRET_HEADERS)
    assert response.status_code == 200
    assert response.json() == {"clients_flagged": 1, "alerts_raised": 1}

    db.refresh(bail_client)
    assert bail_client.missed_check_ins == 1
    assert db.query(Alert).one().client_id == bail_client.id


@pytest.mark.asyncio
async def test_notifications_cleanup_job(client: AsyncClient, bail_client, db):
    notification_service.create_notification(
        db,
        recipient_type=PrincipalType.CLIENT,
        recipient_id=bail_client.id,
        type=NotificationType.SYSTEM_ALERT,
        title="Office closed",
        message="The office is closed for Prince Kuhio Day.",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
    )
    notification_service.create_notification(
        db,
        recipient_type=PrincipalType.CLIENT,
        recipient_id=bail_client.id,
        type=NotificationType.SYSTEM_ALERT,
        title="Welcome",
        message="Your portal account is ready.",
    )

    response = await client.post("/internal/scheduled/notifications-cleanup", headers=SECRET_HEADERS)
    assert response.status_code == 200
    assert response.json() == {"deleted": 1}

    db.expire_all()
    assert [n.title for n in db.query(Notification).all()] == ["Welcome"]
