"""Tests for check-ins, the jurisdiction check and the missed check-in sweep."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from securebond.db.enums import AlertType, PrincipalType
from securebond.db.models import Alert, Client, Notification
from securebond.services import company_service
from securebond.services.check_in_service import sweep_missed_check_ins

HONOLULU = {"latitude": 21.3069, "longitude": -157.8583}
LOS_ANGELES = {"latitude": 34.0522, "longitude": -118.2437}


@pytest.mark.asyncio
async def test_client_checks_in_inside_jurisdiction(portal_client: AsyncClient, bail_client, db):
    bail_client.missed_check_ins = 2
    db.commit()

    response = await portal_client.post("/api/check-ins", json={**HONOLULU, "accuracy": 12.5})
    assert response.status_code == 201
    data = response.json()
    assert data["client_id"] == str(bail_client.id)
    assert data["within_jurisdiction"] is True
    assert data["source"] == "gps"

    db.refresh(bail_client)
    assert bail_client.missed_check_ins == 0
    assert bail_client.last_check_in_at is not None
    assert db.query(Alert).count() == 0


@pytest.mark.asyncio
async def test_check_in_without_coordinates(portal_client: AsyncClient):
    response = await portal_client.post("/api/check-ins", json={"location": "Home", "notes": "All good"})
    assert response.status_code == 201
    data = response.json()
    assert data["within_jurisdiction"] is None
    assert data["source"] == "manual"


@pytest.mark.asyncio
async def test_check_in_outside_jurisdiction_alerts_admins(
    portal_client: AsyncClient, bail_client, admin_user, db
):
    response = await portal_client.post("/api/check-ins", json=LOS_ANGELES)
    assert response.status_code == 201
    assert response.json()["within_jurisdiction"] is False

    alert = db.query(Alert).one()
    assert alert.alert_type == AlertType.JURISDICTION_VIOLATION.value
    assert alert.severity == "high"
    assert alert.client_id == bail_client.id

    notification = db.query(Notification).filter(
        Notification.recipient_type == PrincipalType.USER.value,
        Notification.recipient_id == admin_user.id,
    ).one()
    assert notification.type == "jurisdiction_violation"
    assert notification.priority == "urgent"


@pytest.mark.asyncio
async def test_check_in_requires_both_coordinates(portal_client: AsyncClient):
    response = await portal_client.post("/api/check-ins", json={"latitude": 21.3})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_client_cannot_check_in_for_someone_else(portal_client: AsyncClient, db):
    other = Client(client_number="SB999999", full_name="Other", phone_number="+18085559999")
    db.add(other)
    db.commit()

    response = await portal_client.post("/api/check-ins", json={"client_id": str(other.id)})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_check_in_needs_client_id(admin_client: AsyncClient, bail_client):
    response = await admin_client.post("/api/check-ins", json={"location": "Office"})
    assert response.status_code == 400

    response = await admin_client.post(
        "/api/check-ins",
        json={"client_id": str(bail_client.id), "location": "Office"},
    )
    assert response.status_code == 201

    response = await admin_client.get("/api/check-ins", params={"client_id": str(bail_client.id)})
    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_maintenance_cannot_record_check_ins(maintenance_client: AsyncClient, bail_client):
    response = await maintenance_client.post(
        "/api/check-ins",
        json={"client_id": str(bail_client.id)},
    )
    assert response.status_code == 403


# =============================================================================
# Missed check-in sweep
# =============================================================================

def _overdue_client(db, number: str, days_since: int, now: datetime, active: bool = True) -> Client:
    client = Client(
        client_number=number,
        full_name=f"Client {number}",
        phone_number="+18085551000",
        is_active=active,
        last_check_in_at=now - timedelta(days=days_since),
        created_at=now - timedelta(days=90),
    )
    db.add(client)
    db.commit()
    return client


def test_sweep_flags_overdue_clients_once_per_interval(db):
    now = datetime.now(timezone.utc)
    overdue = _overdue_client(db, "SB000001", days_since=8, now=now)
    _overdue_client(db, "SB000002", days_since=2, now=now)
    _overdue_client(db, "SB000003", days_since=30, now=now, active=False)

    result = sweep_missed_check_ins(db, now=now)
    assert result == {"clients_flagged": 1, "alerts_raised": 1}

    db.refresh(overdue)
    assert overdue.missed_check_ins == 1
    alert = db.query(Alert).one()
    assert alert.alert_type == AlertType.MISSED_CHECKIN.value
    assert alert.severity == "medium"

    client_notice = db.query(Notification).filter(
        Notification.recipient_id == overdue.id
    ).one()
    assert client_notice.type == "check_in_missed"

    # Same interval: nothing new
    assert sweep_missed_check_ins(db, now=now + timedelta(days=1))["clients_flagged"] == 0


def test_sweep_escalates_severity(db):
    now = datetime.now(timezone.utc)
    client = _overdue_client(db, "SB000001", days_since=8, now=now)

    severities = []
    for week in range(3):
        sweep_missed_check_ins(db, now=now + timedelta(days=8 * week))
        db.refresh(client)
        severities.append(db.query(Alert).one().severity)

    assert client.missed_check_ins == 3
    assert severities == ["medium", "high", "critical"]
    assert db.query(Alert).one().occurrence_count == 3


def test_sweep_uses_configured_frequency(db):
    now = datetime.now(timezone.utc)
    company_service.upsert_configuration(
        db,
        {"company_name": "Aloha Bail Bonds LLC", "custom_settings": {"check_in_frequency": "daily"}},
    )
    _overdue_client(db, "SB000001", days_since=2, now=now)

    assert sweep_missed_check_ins(db, now=now)["clients_flagged"] == 1


@pytest.mark.asyncio
async def test_check_in_clears_missed_flag(portal_client: AsyncClient, bail_client, db):
    now = datetime.now(timezone.utc)
    bail_client.last_check_in_at = now - timedelta(days=8)
    db.commit()
    sweep_missed_check_ins(db, now=now)
    db.refresh(bail_client)
    assert bail_client.missed_check_in_flagged_at is not None

    response = await portal_client.post("/api/check-ins", json=HONOLULU)
    assert response.status_code == 201

    db.refresh(bail_client)
    assert bail_client.missed_check_ins == 0
    assert bail_client.missed_check_in_flagged_at is None
