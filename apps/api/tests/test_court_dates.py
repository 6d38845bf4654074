"""Tests for court dates, the approval queue, attendance and reminder dispatch."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from httpx import AsyncClient

from securebond.db.enums import AlertSeverity, AlertType, CourtDateSource, PrincipalType, ReminderType
from securebond.db.models import Alert, Client, CourtDate, CourtDateReminder, Notification
from securebond.schemas.court_date import CourtDateCreate, CourtDateUpdate
from securebond.services import alert_service, court_date_service, notification_service
from securebond.services.reminder_service import (
    build_reminder_title,
    process_pending_reminders,
    reminder_times,
)

HONOLULU = ZoneInfo("Pacific/Honolulu")


def _local_day(days_ahead: int) -> date:
    return (datetime.now(timezone.utc).astimezone(HONOLULU) + timedelta(days=days_ahead)).date()


def _hearing(days_ahead: int, at: time = time(14, 0)) -> datetime:
    return datetime.combine(_local_day(days_ahead), at, tzinfo=HONOLULU)


def _create(db, client, when: datetime, source=CourtDateSource.MANUAL) -> CourtDate:
    return court_date_service.create_court_date(
        db,
        CourtDateCreate(
            client_id=client.id,
            court_date=when,
            court_location="Ka'ahumanu Hale, 777 Punchbowl St",
            source=source,
        ),
    )


# =============================================================================
# Reminder schedule
# =============================================================================

def test_reminder_times_are_nine_am_local():
    hearing = datetime(2030, 3, 10, 18, 0, tzinfo=timezone.utc)  # 08:00 HST
    times = dict(reminder_times(hearing, HONOLULU))

    assert times[ReminderType.INITIAL] == datetime(2030, 3, 3, 19, 0, tzinfo=timezone.utc)
    assert times[ReminderType.FOLLOWUP_1] == datetime(2030, 3, 7, 19, 0, tzinfo=timezone.utc)
    assert times[ReminderType.FOLLOWUP_2] == datetime(2030, 3, 9, 19, 0, tzinfo=timezone.utc)
    assert times[ReminderType.FINAL] == datetime(2030, 3, 10, 19, 0, tzinfo=timezone.utc)


def test_reminder_titles():
    assert build_reminder_title(ReminderType.INITIAL) == "Court Date Reminder - 7 Days"
    assert build_reminder_title(ReminderType.FOLLOWUP_2) == "Court Date Reminder - 1 Day"
    assert build_reminder_title(ReminderType.FINAL) == "Court Date Reminder - Today"


def test_manual_court_date_schedules_all_reminders(db, bail_client):
    court_date = _create(db, bail_client, _hearing(10))

    assert court_date.admin_approved is True
    assert [r.reminder_type for r in court_date.reminders] == [
        "initial", "followup_1", "followup_2", "final",
    ]


def test_only_future_reminders_before_the_hearing(db, bail_client):
    # 08:00 hearing two days out: the 7/3 day reminders have passed and
    # the 09:00 day-of reminder would land after the hearing
    court_date = _create(db, bail_client, _hearing(2, at=time(8, 0)))

    assert [r.reminder_type for r in court_date.reminders] == ["followup_2"]


def test_imported_court_date_waits_for_approval(db, bail_client, admin_user):
    court_date = _create(db, bail_client, _hearing(10), source=CourtDateSource.IMPORTED)
    assert court_date.admin_approved is False
    assert court_date.reminders == []
    assert court_date_service.get_pending_approval(db) == [court_date]

    court_date_service.approve_court_date(db, court_date, admin_user.id)
    assert court_date.admin_approved is True
    assert court_date.source_verified is True
    assert len(court_date.reminders) == 4
    assert court_date_service.get_pending_approval(db) == []


def test_naive_datetime_is_company_time(db, bail_client):
    naive = datetime.combine(_local_day(10), time(14, 0))
    court_date = _create(db, bail_client, naive)

    assert court_date.court_date == _hearing(10).astimezone(timezone.utc)


def test_rescheduling_rebuilds_unsent_reminders(db, bail_client):
    court_date = _create(db, bail_client, _hearing(10))
    court_date_service.update_court_date(
        db, court_date, CourtDateUpdate(court_date=_hearing(2, at=time(8, 0)))
    )
    assert [r.reminder_type for r in court_date.reminders] == ["followup_2"]
    assert db.query(CourtDateReminder).count() == 1


# =============================================================================
# Reminder dispatch
# =============================================================================

def test_due_reminder_becomes_client_notification(db, bail_client):
    hearing = _hearing(10)
    court_date = _create(db, bail_client, hearing)
    now = hearing - timedelta(days=6)

    result = process_pending_reminders(db, now=now)
    assert result == {"due": 1, "sent": 1, "suppressed": 0, "deferred": 0, "failed": 0}

    notification = db.query(Notification).one()
    assert notification.recipient_type == PrincipalType.CLIENT.value
    assert notification.recipient_id == bail_client.id
    assert notification.title == "Court Date Reminder - 7 Days"
    assert "Ka'ahumanu Hale" in notification.message
    assert notification.extra["court_date_id"] == str(court_date.id)

    initial = court_date.reminders[0]
    assert initial.sent is True
    assert initial.notification_id == notification.id

    # Nothing left due at the same instant
    assert process_pending_reminders(db, now=now)["due"] == 0


def test_reminders_for_unapproved_dates_are_not_sent(db, bail_client, admin_user):
    hearing = _hearing(10)
    court_date = _create(db, bail_client, hearing, source=CourtDateSource.SCRAPED)
    assert process_pending_reminders(db, now=hearing - timedelta(days=6))["due"] == 0

    court_date_service.approve_court_date(db, court_date, admin_user.id)
    assert process_pending_reminders(db, now=hearing - timedelta(days=6))["sent"] == 1


def test_opted_out_client_is_suppressed(db, bail_client):
    hearing = _hearing(10)
    _create(db, bail_client, hearing)
    notification_service.update_preferences(
        db, PrincipalType.CLIENT, bail_client.id, {"court_reminders": False}
    )

    result = process_pending_reminders(db, now=hearing - timedelta(days=6))
    assert result["suppressed"] == 1
    assert result["sent"] == 0
    assert db.query(Notification).count() == 0
    assert db.query(CourtDateReminder).filter(CourtDateReminder.sent.is_(True)).count() == 1


def test_quiet_hours_defer_all_but_final_reminder(db, bail_client):
    day = _local_day(10)
    _create(db, bail_client, _hearing(10))
    notification_service.update_preferences(
        db, PrincipalType.CLIENT, bail_client.id,
        {"quiet_hours_enabled": True, "quiet_hours_start": "09:00", "quiet_hours_end": "10:00"},
    )

    # 09:30 on the day of the hearing: every reminder is due
    now = datetime.combine(day, time(9, 30), tzinfo=HONOLULU)
    result = process_pending_reminders(db, now=now)
    assert result["due"] == 4
    assert result["sent"] == 1
    assert result["deferred"] == 3

    # After quiet hours the deferred reminders go out
    later = datetime.combine(day, time(10, 30), tzinfo=HONOLULU)
    assert process_pending_reminders(db, now=later)["sent"] == 3


def test_one_failing_reminder_does_not_stop_the_batch(db, bail_client, monkeypatch):
    day = _local_day(10)
    court_date = _create(db, bail_client, _hearing(10))
    original = notification_service.create_notification

    def flaky_create(db, **kwargs):
        if kwargs["metadata"]["reminder_type"] == ReminderType.FOLLOWUP_1.value:
            raise RuntimeError("notification store unavailable")
        return original(db, **kwargs)

    monkeypatch.setattr(notification_service, "create_notification", flaky_create)

    result = process_pending_reminders(db, now=datetime.combine(day, time(9, 30), tzinfo=HONOLULU))
    assert result == {"due": 4, "sent": 3, "suppressed": 0, "deferred": 0, "failed": 1}
    assert db.query(Notification).count() == 3

    db.expire_all()
    by_type = {r.reminder_type: r for r in court_date.reminders}
    assert by_type[ReminderType.FOLLOWUP_1.value].sent is False
    assert by_type[ReminderType.FOLLOWUP_1.value].notification_id is None
    for other in (ReminderType.INITIAL, ReminderType.FOLLOWUP_2, ReminderType.FINAL):
        assert by_type[other.value].sent is True

    # The failed reminder is retried on the next run
    monkeypatch.setattr(notification_service, "create_notification", original)
    retry = process_pending_reminders(db, now=datetime.combine(day, time(9, 45), tzinfo=HONOLULU))
    assert retry["sent"] == 1


def test_quiet_hours_wrap_midnight():
    prefs = {"quiet_hours_enabled": True, "quiet_hours_start": "22:00", "quiet_hours_end": "08:00"}
    assert notification_service.in_quiet_hours(prefs, time(23, 15))
    assert notification_service.in_quiet_hours(prefs, time(7, 59))
    assert not notification_service.in_quiet_hours(prefs, time(8, 0))
    assert not notification_service.in_quiet_hours({**prefs, "quiet_hours_enabled": False}, time(23, 0))


# =============================================================================
# HTTP
# =============================================================================

@pytest.mark.asyncio
async def test_create_court_date_endpoint(admin_client: AsyncClient, bail_client):
    response = await admin_client.post(
        "/api/court-dates",
        json={
            "client_id": str(bail_client.id),
            "court_date": _hearing(10).isoformat(),
            "court_type": "arraignment",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["admin_approved"] is True
    assert data["client_name"] == "Kai Kahale"
    assert data["days_until"] in (10, 11)

    response = await admin_client.get("/api/court-dates/reminders", params={"court_date_id": data["id"]})
    assert [r["reminder_type"] for r in response.json()] == [
        "initial", "followup_1", "followup_2", "final",
    ]


@pytest.mark.asyncio
async def test_approve_endpoint(admin_client: AsyncClient, bail_client, db):
    court_date = _create(db, bail_client, _hearing(10), source=CourtDateSource.IMPORTED)

    response = await admin_client.get("/api/court-dates/pending")
    assert [cd["id"] for cd in response.json()] == [str(court_date.id)]

    response = await admin_client.patch(f"/api/court-dates/{court_date.id}/approve")
    assert response.status_code == 200
    assert response.json()["admin_approved"] is True

    response = await admin_client.get("/api/court-dates/pending")
    assert response.json() == []


@pytest.mark.asyncio
async def test_missed_attendance_raises_critical_alert(admin_client: AsyncClient, bail_client, admin_user, db):
    court_date = _create(db, bail_client, _hearing(-1))

    response = await admin_client.post(
        f"/api/court-dates/{court_date.id}/attendance",
        json={"status": "missed", "notes": "No show"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["attendance_status"] == "missed"
    assert data["completed"] is True

    alert = db.query(Alert).one()
    assert alert.alert_type == AlertType.COURT_DATE.value
    assert alert.severity == "critical"

    notice = db.query(Notification).filter(Notification.recipient_id == admin_user.id).one()
    assert notice.title == "Failure to appear"


@pytest.mark.asyncio
async def test_attended_closes_court_alerts_and_reminders(admin_client: AsyncClient, bail_client, db):
    court_date = _create(db, bail_client, _hearing(10))
    alert_service.create_or_update_alert(
        db, AlertType.COURT_DATE, AlertSeverity.HIGH, "Reminder unconfirmed", client_id=bail_client.id
    )

    response = await admin_client.post(
        f"/api/court-dates/{court_date.id}/attendance",
        json={"status": "attended"},
    )
    assert response.status_code == 200

    db.expire_all()
    assert db.query(Alert).one().acknowledged is True
    assert db.query(CourtDateReminder).count() == 0


@pytest.mark.asyncio
async def test_upcoming_and_overdue(admin_client: AsyncClient, bail_client, db):
    upcoming = _create(db, bail_client, _hearing(5))
    overdue = _create(db, bail_client, _hearing(-3))
    _create(db, bail_client, _hearing(60))

    response = await admin_client.get("/api/court-dates/upcoming")
    assert [cd["id"] for cd in response.json()] == [str(upcoming.id)]

    response = await admin_client.get("/api/court-dates/overdue")
    assert [cd["id"] for cd in response.json()] == [str(overdue.id)]


@pytest.mark.asyncio
async def test_upcoming_includes_dates_awaiting_approval(admin_client: AsyncClient, bail_client, db):
    scraped = _create(db, bail_client, _hearing(4), source=CourtDateSource.SCRAPED)
    assert scraped.admin_approved is False

    response = await admin_client.get("/api/court-dates/upcoming")
    assert [cd["id"] for cd in response.json()] == [str(scraped.id)]


@pytest.mark.asyncio
async def test_unknown_client_is_404(admin_client: AsyncClient):
    response = await admin_client.post(
        "/api/court-dates",
        json={"client_id": "00000000-0000-0000-0000-000000000000", "court_date": _hearing(3).isoformat()},
    )
    assert response.status_code == 404


# =============================================================================
# Client portal
# =============================================================================

@pytest.mark.asyncio
async def test_portal_shows_only_approved_court_dates(portal_client: AsyncClient, bail_client, db):
    approved = _create(db, bail_client, _hearing(10))
    _create(db, bail_client, _hearing(12), source=CourtDateSource.SCRAPED)

    response = await portal_client.get("/api/client/court-dates")
    assert response.status_code == 200
    assert [cd["id"] for cd in response.json()] == [str(approved.id)]

    response = await portal_client.patch(f"/api/client/court-dates/{approved.id}/acknowledge")
    assert response.status_code == 200
    assert response.json()["client_acknowledged"] is True


@pytest.mark.asyncio
async def test_portal_cannot_acknowledge_other_clients_dates(portal_client: AsyncClient, db):
    other = Client(client_number="SB777777", full_name="Other", phone_number="+18085557777")
    db.add(other)
    db.commit()
    court_date = _create(db, other, _hearing(10))

    response = await portal_client.patch(f"/api/client/court-dates/{court_date.id}/acknowledge")
    assert response.status_code == 404
