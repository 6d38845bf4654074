"""Tests for alert deduplication and the alerts API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from securebond.db.enums import AlertSeverity, AlertType
from securebond.db.models import Alert
from securebond.services import alert_service


def test_fingerprint_is_stable_and_scoped():
    client_id = uuid4()
    first = alert_service.fingerprint(AlertType.MISSED_CHECKIN, client_id)
    assert first == alert_service.fingerprint(AlertType.MISSED_CHECKIN, client_id)
    assert len(first) == 16
    assert first != alert_service.fingerprint(AlertType.MISSED_CHECKIN, uuid4())
    assert first != alert_service.fingerprint(AlertType.COURT_DATE, client_id)
    assert first != alert_service.fingerprint(AlertType.MISSED_CHECKIN, client_id, subject="x")


def test_recurring_alert_updates_existing_row(db, bail_client, admin_user):
    alert = alert_service.create_or_update_alert(
        db, AlertType.MISSED_CHECKIN, AlertSeverity.MEDIUM, "Missed 1", client_id=bail_client.id
    )
    alert_service.acknowledge_alert(db, alert, admin_user.id)
    assert alert.acknowledged is True

    again = alert_service.create_or_update_alert(
        db, AlertType.MISSED_CHECKIN, AlertSeverity.HIGH, "Missed 2", client_id=bail_client.id
    )

    assert again.id == alert.id
    assert db.query(Alert).count() == 1
    assert again.occurrence_count == 2
    assert again.message == "Missed 2"
    assert again.severity == "high"
    # Recurrence reopens it
    assert again.acknowledged is False
    assert again.acknowledged_by_user_id is None


def test_summary_counts_open_alerts(db, bail_client, admin_user):
    alert_service.create_alert(db, AlertType.SYSTEM, AlertSeverity.CRITICAL, "a")
    alert_service.create_alert(db, AlertType.SYSTEM, AlertSeverity.HIGH, "b")
    alert_service.create_alert(db, AlertType.SYSTEM, AlertSeverity.HIGH, "c")
    closed = alert_service.create_alert(db, AlertType.SYSTEM, AlertSeverity.LOW, "d")
    alert_service.acknowledge_alert(db, closed, admin_user.id)

    assert alert_service.get_alert_summary(db) == {
        "total": 3, "critical": 1, "high": 2, "medium": 0, "low": 0,
    }


@pytest.mark.asyncio
async def test_manual_alert_and_acknowledge(admin_client: AsyncClient, bail_client, admin_user):
    response = await admin_client.post(
        "/api/alerts",
        json={
            "client_id": str(bail_client.id),
            "alert_type": "payment_due",
            "severity": "low",
            "message": "Installment overdue",
        },
    )
    assert response.status_code == 201
    alert = response.json()
    assert alert["client_name"] == "Kai Kahale"
    assert alert["acknowledged"] is False

    response = await admin_client.get("/api/alerts/summary")
    assert response.json() == {"total": 1, "critical": 0, "high": 0, "medium": 0, "low": 1}

    response = await admin_client.patch(f"/api/alerts/{alert['id']}/acknowledge")
    assert response.status_code == 200
    data = response.json()
    assert data["acknowledged"] is True
    assert data["acknowledged_by_user_id"] == str(admin_user.id)

    response = await admin_client.get("/api/alerts")
    assert response.json() == []
    response = await admin_client.get("/api/alerts", params={"acknowledged": "true"})
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_manual_alert_unknown_client(admin_client: AsyncClient):
    response = await admin_client.post(
        "/api/alerts",
        json={"client_id": str(uuid4()), "message": "Who?"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_acknowledge_unknown_alert(admin_client: AsyncClient):
    response = await admin_client.patch(f"/api/alerts/{uuid4()}/acknowledge")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_alerts_are_admin_only(maintenance_client: AsyncClient, portal_client: AsyncClient):
    assert (await maintenance_client.get("/api/alerts")).status_code == 403
    assert (await portal_client.get("/api/alerts/summary")).status_code == 403
