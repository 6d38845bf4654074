"""Tests for dashboard statistics, analytics and CSV exports."""

import csv
import io
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

from securebond.db.enums import AuditEventType
from securebond.db.models import AuditLog, CheckIn, Client, CourtDate, Expense, Payment
from securebond.services import analytics_service, report_service


def _payment(db, client, amount: str, confirmed: bool, day: date) -> Payment:
    payment = Payment(
        client_id=client.id,
        amount=Decimal(amount),
        payment_date=day,
        confirmed=confirmed,
    )
    db.add(payment)
    return payment


def test_dashboard_stats(db, bail_client):
    now = datetime.now(timezone.utc)
    db.add(Client(client_number="SB200000", full_name="Inactive", phone_number="+18085550001", is_active=False))
    _payment(db, bail_client, "100.00", True, date.today())
    _payment(db, bail_client, "40.50", False, date.today())
    db.add(CourtDate(client_id=bail_client.id, court_date=now + timedelta(days=3)))
    db.add(CourtDate(client_id=bail_client.id, court_date=now - timedelta(days=3)))
    db.commit()

    stats = analytics_service.get_dashboard_stats(db, now=now)
    assert stats == {
        "total_clients": 2,
        "active_clients": 1,
        "upcoming_court_dates": 1,
        "pending_payments": 1,
        "total_revenue": Decimal("100.00"),
        "pending_amount": Decimal("40.50"),
    }


def test_overview_revenue_profit_and_compliance(db, bail_client):
    today = date(2030, 6, 15)
    _payment(db, bail_client, "300", True, date(2030, 6, 1))
    _payment(db, bail_client, "200", True, date(2030, 4, 20))
    _payment(db, bail_client, "999", False, date(2030, 6, 2))
    _payment(db, bail_client, "50", True, date(2028, 1, 1))
    db.add(Expense(description="Office rent", amount=Decimal("120"), expense_date=date(2030, 6, 1)))
    db.add(Client(client_number="SB200001", full_name="Late", phone_number="+18085550002", missed_check_ins=2))
    db.commit()

    overview = analytics_service.get_overview(db, today=today)

    assert len(overview["monthly_revenue"]) == 12
    assert list(overview["monthly_revenue"])[0] == "2029-07"
    assert overview["monthly_revenue"]["2030-06"] == Decimal("300.00")
    assert overview["monthly_revenue"]["2030-04"] == Decimal("200.00")
    assert overview["total_revenue"] == Decimal("550.00")
    assert overview["total_expenses"] == Decimal("120.00")
    assert overview["net_profit"] == Decimal("430.00")
    assert overview["compliance_rate"] == 50.0


def test_top_locations(db, bail_client):
    other = Client(client_number="SB200002", full_name="Alana Ho", phone_number="+18085550003")
    db.add(other)
    db.flush()
    for client, location in (
        (bail_client, "Honolulu"),
        (bail_client, "Honolulu"),
        (other, "Honolulu"),
        (other, "Hilo"),
        (other, ""),
    ):
        db.add(CheckIn(client_id=client.id, location=location))
    db.commit()

    top = analytics_service.get_top_locations(db, limit=5)
    assert top == [
        {"location": "Honolulu", "check_ins": 3, "unique_clients": 2, "client_names": ["Alana Ho", "Kai Kahale"]},
        {"location": "Hilo", "check_ins": 1, "unique_clients": 1, "client_names": ["Alana Ho"]},
    ]


def test_top_locations_limit_and_tie_break(db, bail_client):
    for location in ("Kona", "Hilo", "Kona", "Hilo", "Lihue"):
        db.add(CheckIn(client_id=bail_client.id, location=location))
    db.commit()

    top = analytics_service.get_top_locations(db, limit=1)
    assert top == [
        {"location": "Hilo", "check_ins": 2, "unique_clients": 1, "client_names": ["Kai Kahale"]},
    ]
    assert analytics_service.get_top_locations(db, limit=5)[-1]["location"] == "Lihue"


def test_csv_export_neutralizes_formulas(db):
    db.add(Client(client_number="SB200003", full_name="=HYPERLINK(\"x\")", phone_number="+18085550004"))
    db.commit()

    content, rows = report_service.export_clients(db)
    records = list(csv.reader(io.StringIO(content)))

    assert rows == 1
    assert records[0][:2] == ["Client ID", "Full Name"]
    assert records[1][1] == "'=HYPERLINK(\"x\")"
    assert records[1][6] == "TRUE"


def test_csv_export_keeps_phone_numbers_plain(db, bail_client):
    bail_client.address = "+1 Aloha St"
    db.commit()

    content, _ = report_service.export_clients(db)
    record = list(csv.reader(io.StringIO(content)))[1]

    assert record[2] == "+18085550100"
    # Other text that merely starts with "+" is still neutralized
    assert record[4] == "'+1 Aloha St"
    assert report_service._csv_safe("+18085550100\n=1") == "'+18085550100\n=1"


@pytest.mark.asyncio
async def test_export_endpoint_is_audited(admin_client: AsyncClient, bail_client, db):
    db.add(CheckIn(client_id=bail_client.id, location="@home", latitude=21.3, longitude=-157.8,
                   within_jurisdiction=True, source="gps"))
    db.commit()

    response = await admin_client.get("/api/reports/check-ins.csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="check-ins-' in response.headers["content-disposition"]

    records = list(csv.reader(io.StringIO(response.text)))
    assert records[1][1] == "SB100001"
    assert records[1][3] == "'@home"

    log = db.query(AuditLog).filter(AuditLog.event_type == AuditEventType.DATA_EXPORTED.value).one()
    assert log.target_type == "check_ins"
    assert log.details == {"rows": 1, "format": "csv"}


@pytest.mark.asyncio
async def test_unknown_report_is_rejected(admin_client: AsyncClient):
    response = await admin_client.get("/api/reports/bonds.csv")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_dashboard_endpoints(admin_client: AsyncClient, bail_client):
    response = await admin_client.get("/api/dashboard/stats")
    assert response.status_code == 200
    assert response.json()["total_clients"] == 1

    response = await admin_client.get("/api/analytics/overview")
    assert response.status_code == 200
    assert response.json()["compliance_rate"] == 100.0

    response = await admin_client.get("/api/analytics/top-locations", params={"days": 7})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_expenses_feed_net_profit(admin_client: AsyncClient):
    response = await admin_client.post(
        "/api/expenses",
        json={"description": "Court filing fees", "amount": "75.25", "category": "fees"},
    )
    assert response.status_code == 201

    response = await admin_client.get("/api/analytics/overview")
    data = response.json()
    assert Decimal(data["total_expenses"]) == Decimal("75.25")
    assert Decimal(data["net_profit"]) == Decimal("-75.25")


@pytest.mark.asyncio
async def test_reports_are_admin_only(maintenance_client: AsyncClient):
    assert (await maintenance_client.get("/api/dashboard/stats")).status_code == 403
    assert (await maintenance_client.get("/api/reports/clients.csv")).status_code == 403
