"""Tests for in-app notifications and notification preferences."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from httpx import AsyncClient

from securebond.db.enums import NotificationType, PrincipalType
from securebond.db.models import Notification
from securebond.services import notification_service


def _notify(db, recipient_id, **kwargs) -> Notification | None:
    params = {
        "recipient_type": PrincipalType.CLIENT,
        "recipient_id": recipient_id,
        "type": NotificationType.SYSTEM_ALERT,
        "title": "Office closed",
        "message": "The office is closed on Kamehameha Day.",
    }
    params.update(kwargs)
    return notification_service.create_notification(db, **params)


def test_dedupe_key_suppresses_repeats_within_window(db, bail_client):
    first = _notify(db, bail_client.id, dedupe_key="holiday:2026")
    second = _notify(db, bail_client.id, dedupe_key="holiday:2026")

    assert first is not None
    assert second is None
    assert db.query(Notification).count() == 1

    # Outside the one-hour window the same key is delivered again
    first.created_at = datetime.now(timezone.utc) - timedelta(hours=2)
    db.commit()
    assert _notify(db, bail_client.id, dedupe_key="holiday:2026") is not None


def test_preferences_gate_notification_types(db, bail_client):
    notification_service.update_preferences(
        db, PrincipalType.CLIENT, bail_client.id, {"compliance_alerts": False}
    )
    assert _notify(db, bail_client.id, type=NotificationType.CHECK_IN_MISSED) is None
    # System alerts are not tied to a preference
    assert _notify(db, bail_client.id) is not None
    # Callers can bypass preferences explicitly
    assert _notify(
        db, bail_client.id, type=NotificationType.CHECK_IN_MISSED, respect_preferences=False
    ) is not None


def test_cleanup_removes_expired_and_old_read(db, bail_client):
    now = datetime.now(timezone.utc)
    expired = _notify(db, bail_client.id, expires_at=now - timedelta(minutes=1))
    old_read = _notify(db, bail_client.id)
    old_read.read = True
    old_read.created_at = now - timedelta(days=45)
    fresh = _notify(db, bail_client.id)
    db.commit()
    fresh_id = fresh.id

    assert expired is not None
    assert notification_service.cleanup_notifications(db, now=now) == 2
    assert [n.id for n in db.query(Notification).all()] == [fresh_id]


@pytest.mark.asyncio
async def test_list_count_and_read(portal_client: AsyncClient, bail_client, db):
    first = _notify(db, bail_client.id, title="First")
    _notify(db, bail_client.id, title="Second")
    _notify(db, bail_client.id, title="Expired", expires_at=datetime.now(timezone.utc) - timedelta(hours=1))

    response = await portal_client.get("/api/notifications")
    assert response.status_code == 200
    data = response.json()
    assert data["unread_count"] == 2
    assert {n["title"] for n in data["items"]} == {"First", "Second"}

    response = await portal_client.patch(f"/api/notifications/{first.id}/read")
    assert response.status_code == 200
    assert response.json()["read"] is True

    response = await portal_client.get("/api/notifications/count")
    assert response.json() == {"count": 1}

    response = await portal_client.get("/api/notifications", params={"unread_only": "true"})
    assert [n["title"] for n in response.json()["items"]] == ["Second"]


@pytest.mark.asyncio
async def test_confirm_marks_read(portal_client: AsyncClient, bail_client, db):
    notification = _notify(db, bail_client.id, type=NotificationType.COURT_REMINDER)

    response = await portal_client.patch(f"/api/notifications/{notification.id}/confirm")
    assert response.status_code == 200
    data = response.json()
    assert data["confirmed"] is True
    assert data["read"] is True


@pytest.mark.asyncio
async def test_read_all_and_delete(portal_client: AsyncClient, bail_client, db):
    for _ in range(3):
        _notify(db, bail_client.id)

    response = await portal_client.post("/api/notifications/read-all")
    assert response.json() == {"marked_read": 3}

    target = db.query(Notification).first()
    response = await portal_client.delete(f"/api/notifications/{target.id}")
    assert response.status_code == 204
    assert db.query(Notification).count() == 2


@pytest.mark.asyncio
async def test_cannot_touch_someone_elses_notification(portal_client: AsyncClient, admin_user, db):
    theirs = _notify(db, admin_user.id, recipient_type=PrincipalType.USER)

    assert (await portal_client.patch(f"/api/notifications/{theirs.id}/read")).status_code == 404
    assert (await portal_client.patch(f"/api/notifications/{theirs.id}/confirm")).status_code == 404
    assert (await portal_client.delete(f"/api/notifications/{theirs.id}")).status_code == 404


@pytest.mark.asyncio
async def test_preferences_defaults_and_update(portal_client: AsyncClient):
    response = await portal_client.get("/api/notifications/preferences")
    assert response.status_code == 200
    assert response.json()["quiet_hours_enabled"] is False
    assert response.json()["quiet_hours_start"] == "22:00"

    response = await portal_client.patch(
        "/api/notifications/preferences",
        json={"quiet_hours_enabled": True, "quiet_hours_start": "21:30", "court_reminder_days": 5},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["quiet_hours_enabled"] is True
    assert data["quiet_hours_start"] == "21:30"
    assert data["court_reminder_days"] == 5
    assert data["court_reminders"] is True


@pytest.mark.asyncio
async def test_preferences_reject_bad_times(portal_client: AsyncClient):
    response = await portal_client.patch(
        "/api/notifications/preferences",
        json={"quiet_hours_start": "25:00"},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body.quiet_hours_start"


@pytest.mark.asyncio
async def test_admin_sends_notification_regardless_of_preferences(
    admin_client: AsyncClient, bail_client, admin_user, db
):
    notification_service.update_preferences(
        db, PrincipalType.CLIENT, bail_client.id, {"payment_due": False}
    )
    response = await admin_client.post(
        "/api/notifications",
        json={
            "recipient_type": "client",
            "recipient_id": str(bail_client.id),
            "type": "payment_due",
            "title": "Payment due",
            "message": "Your installment is due Friday.",
        },
    )
    assert response.status_code == 201
    assert response.json()["metadata"] == {"sent_by": str(admin_user.id)}


@pytest.mark.asyncio
async def test_admin_send_unknown_recipient(admin_client: AsyncClient):
    response = await admin_client.post(
        "/api/notifications",
        json={
            "recipient_type": "client",
            "recipient_id": str(uuid4()),
            "title": "Hello",
            "message": "Anyone?",
        },
    )
    assert response.status_code == 404
