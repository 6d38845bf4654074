"""Tests for admin staff management."""

import pytest
from httpx import ASGITransport, AsyncClient

from securebond.core.deps import COOKIE_NAME
from securebond.core.security import create_session_token, verify_password
from securebond.db.enums import AuditEventType, PrincipalType
from securebond.db.models import AuditLog, User
from securebond.main import app


def _token_for(user: User) -> str:
    return create_session_token(
        principal_id=user.id,
        principal_type=PrincipalType.USER.value,
        role=user.role,
        token_version=user.token_version,
    )


def _signed_in(token: str) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: token},
    )


@pytest.mark.asyncio
async def test_list_staff(admin_client: AsyncClient, maintenance_user):
    response = await admin_client.get("/api/admin/staff")
    assert response.status_code == 200
    names = [u["display_name"] for u in response.json()]
    assert names == ["Keoni Ops", "Leilani Admin"]
    assert "password_hash" not in response.json()[0]


@pytest.mark.asyncio
async def test_maintenance_cannot_manage_staff(maintenance_client: AsyncClient, admin_user):
    assert (await maintenance_client.get("/api/admin/staff")).status_code == 403
    response = await maintenance_client.post(
        "/api/admin/staff",
        json={"email": "new@alohabailbonds.com", "display_name": "New Hire"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_staff_generates_password(admin_client: AsyncClient, db):
    response = await admin_client.post(
        "/api/admin/staff",
        json={"email": "Mele@AlohaBailBonds.com", "display_name": "Mele Nui"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "mele@alohabailbonds.com"
    assert data["role"] == "maintenance"
    temp = data["temporary_password"]
    assert len(temp) == 12

    user = db.query(User).filter(User.email == "mele@alohabailbonds.com").one()
    assert verify_password(temp, user.password_hash)
    assert db.query(AuditLog).filter(
        AuditLog.event_type == AuditEventType.STAFF_CREATED.value
    ).count() == 1


@pytest.mark.asyncio
async def test_create_staff_with_password_returns_no_temporary_password(admin_client: AsyncClient, db):
    response = await admin_client.post(
        "/api/admin/staff",
        json={
            "email": "pua@alohabailbonds.com",
            "display_name": "Pua Lani",
            "role": "admin",
            "password": "ChosenPass99",
        },
    )
    assert response.status_code == 201
    assert response.json()["temporary_password"] is None
    user = db.query(User).filter(User.email == "pua@alohabailbonds.com").one()
    assert verify_password("ChosenPass99", user.password_hash)


@pytest.mark.asyncio
async def test_create_staff_duplicate_email_conflicts(admin_client: AsyncClient, maintenance_user):
    response = await admin_client.post(
        "/api/admin/staff",
        json={"email": "ops@alohabailbonds.com", "display_name": "Second Keoni"},
    )
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_staff_rejects_client_role(admin_client: AsyncClient, db):
    response = await admin_client.post(
        "/api/admin/staff",
        json={"email": "x@alohabailbonds.com", "display_name": "X", "role": "client"},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body.role"
    assert db.query(User).count() == 1


@pytest.mark.asyncio
async def test_role_change_revokes_existing_sessions(admin_client: AsyncClient, maintenance_user, db):
    old_token = _token_for(maintenance_user)
    async with _signed_in(old_token) as ops:
        assert (await ops.get("/api/auth/me")).status_code == 200

        response = await admin_client.patch(
            f"/api/admin/staff/{maintenance_user.id}",
            json={"role": "admin"},
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

        me = await ops.get("/api/auth/me")
        assert me.status_code == 401
        assert me.json()["detail"] == "Session revoked"

    db.refresh(maintenance_user)
    assert maintenance_user.token_version == 2


@pytest.mark.asyncio
async def test_rename_keeps_sessions(admin_client: AsyncClient, maintenance_user, db):
    response = await admin_client.patch(
        f"/api/admin/staff/{maintenance_user.id}",
        json={"display_name": "  Keoni Kealoha "},
    )
    assert response.status_code == 200
    assert response.json()["display_name"] == "Keoni Kealoha"
    db.refresh(maintenance_user)
    assert maintenance_user.token_version == 1


@pytest.mark.asyncio
async def test_delete_deactivates_staff(admin_client: AsyncClient, maintenance_user, db):
    token = _token_for(maintenance_user)
    response = await admin_client.delete(f"/api/admin/staff/{maintenance_user.id}")
    assert response.status_code == 204

    db.refresh(maintenance_user)
    assert maintenance_user.is_active is False
    async with _signed_in(token) as ops:
        assert (await ops.get("/api/auth/me")).status_code == 401

    active = await admin_client.get("/api/admin/staff", params={"include_inactive": "false"})
    assert [u["display_name"] for u in active.json()] == ["Leilani Admin"]
    assert db.query(AuditLog).filter(
        AuditLog.event_type == AuditEventType.STAFF_DEACTIVATED.value
    ).count() == 1


@pytest.mark.asyncio
async def test_admin_cannot_demote_or_remove_self(admin_client: AsyncClient, admin_user, db):
    demote = await admin_client.patch(
        f"/api/admin/staff/{admin_user.id}",
        json={"role": "maintenance"},
    )
    assert demote.status_code == 403

    remove = await admin_client.delete(f"/api/admin/staff/{admin_user.id}")
    assert remove.status_code == 403

    db.refresh(admin_user)
    assert admin_user.role == "admin"
    assert admin_user.is_active is True

    # Renaming yourself is fine
    rename = await admin_client.patch(
        f"/api/admin/staff/{admin_user.id}",
        json={"display_name": "Leilani Kanoa"},
    )
    assert rename.status_code == 200


@pytest.mark.asyncio
async def test_revoke_sessions(admin_client: AsyncClient, maintenance_user, db):
    token = _token_for(maintenance_user)
    response = await admin_client.post(f"/api/admin/staff/{maintenance_user.id}/revoke-sessions")
    assert response.status_code == 200
    assert response.json()["is_active"] is True

    async with _signed_in(token) as ops:
        assert (await ops.get("/api/auth/me")).status_code == 401


@pytest.mark.asyncio
async def test_unknown_staff_is_404(admin_client: AsyncClient):
    response = await admin_client.patch(
        "/api/admin/staff/00000000-0000-0000-0000-000000000000",
        json={"display_name": "Nobody"},
    )
    assert response.status_code == 404
