"""Tests for staff and client portal authentication."""

import pytest
from httpx import AsyncClient

from securebond.core.config import settings
from securebond.core.deps import COOKIE_NAME
from securebond.core.rate_limit import limiter
from securebond.db.enums import AuditEventType
from securebond.db.models import AuditLog

ADMIN_PASSWORD = "AdminPass123!"
CLIENT_PASSWORD = "ClientPass1"


@pytest.mark.asyncio
async def test_staff_login_sets_session_cookie(client: AsyncClient, admin_user, db):
    response = await client.post(
        "/api/auth/staff-login",
        json={"email": "ADMIN@AlohaBailBonds.com", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "admin"
    assert data["principal_type"] == "user"
    assert data["email"] == "admin@alohabailbonds.com"

    set_cookie = response.headers["set-cookie"]
    assert COOKIE_NAME in set_cookie
    assert "httponly" in set_cookie.lower()

    db.refresh(admin_user)
    assert admin_user.last_login_at is not None
    assert db.query(AuditLog).filter(
        AuditLog.event_type == AuditEventType.AUTH_LOGIN_SUCCESS.value
    ).count() == 1


@pytest.mark.asyncio
async def test_staff_login_wrong_password_is_audited(client: AsyncClient, admin_user, db):
    response = await client.post(
        "/api/auth/staff-login",
        json={"email": "admin@alohabailbonds.com", "password": "nope"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"

    failed = db.query(AuditLog).filter(
        AuditLog.event_type == AuditEventType.AUTH_LOGIN_FAILED.value
    ).one()
    # The raw email is never stored
    assert "email_hash" in failed.details
    assert "admin@alohabailbonds.com" not in str(failed.details)


@pytest.mark.asyncio
async def test_client_login_with_client_number(client: AsyncClient, bail_client):
    response = await client.post(
        "/api/auth/client-login",
        json={"client_number": "sb100001", "password": CLIENT_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "client"
    assert data["client_id"] == str(bail_client.id)
    assert data["client_number"] == "SB100001"


@pytest.mark.asyncio
async def test_client_login_with_phone(client: AsyncClient, bail_client):
    response = await client.post(
        "/api/auth/client-login-phone",
        json={"phone_number": "(808) 555-0100", "password": CLIENT_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["client_id"] == str(bail_client.id)


@pytest.mark.asyncio
async def test_inactive_client_cannot_log_in(client: AsyncClient, bail_client, db):
    bail_client.is_active = False
    db.commit()

    response = await client.post(
        "/api/auth/client-login",
        json={"client_number": "SB100001", "password": CLIENT_PASSWORD},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_session(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_client_profile(portal_client: AsyncClient, bail_client):
    response = await portal_client.get("/api/auth/me")
    assert response.status_code == 200
    data = response.json()
    assert data["display_name"] == "Kai Kahale"
    assert data["client_number"] == "SB100001"


@pytest.mark.asyncio
async def test_revoked_session_is_rejected(portal_client: AsyncClient, bail_client, db):
    bail_client.token_version += 1
    db.commit()

    response = await portal_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Session revoked"


@pytest.mark.asyncio
async def test_garbage_cookie_is_rejected(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Cookie": f"{COOKIE_NAME}=not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_requires_csrf_header(admin_client: AsyncClient):
    response = await admin_client.post("/api/auth/logout", headers={"X-Requested-With": ""})
    assert response.status_code == 403

    response = await admin_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"status": "logged_out"}


@pytest.mark.asyncio
async def test_client_cannot_use_admin_endpoints(portal_client: AsyncClient):
    response = await portal_client.get("/api/clients")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_maintenance_cannot_manage_clients(maintenance_client: AsyncClient):
    response = await maintenance_client.get("/api/clients")
    assert response.status_code == 403


@pytest.fixture
def rate_limited(monkeypatch):
    """Turn the limiter on with empty counters for one test."""
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield limiter
    limiter.reset()


@pytest.mark.asyncio
async def test_staff_login_is_rate_limited(client: AsyncClient, admin_user, rate_limited):
    attempts = [
        await client.post(
            "/api/auth/staff-login",
            json={"email": "admin@alohabailbonds.com", "password": "wrong-guess"},
        )
        for _ in range(settings.RATE_LIMIT_AUTH)
    ]
    assert [r.status_code for r in attempts] == [401] * settings.RATE_LIMIT_AUTH

    # Even the right password is refused once the window is used up
    blocked = await client.post(
        "/api/auth/staff-login",
        json={"email": "admin@alohabailbonds.com", "password": ADMIN_PASSWORD},
    )
    assert blocked.status_code == 429
    assert COOKIE_NAME not in blocked.headers.get("set-cookie", "")
