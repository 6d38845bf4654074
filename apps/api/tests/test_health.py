"""Tests for health endpoints and the unhandled error handler."""

import pytest
from httpx import AsyncClient

from securebond.core.config import settings
from securebond.routers import ops
from securebond.services import alert_service


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "env": "dev", "version": settings.VERSION}


@pytest.mark.asyncio
async def test_health_database_down(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(ops, "check_database", lambda: False)
    response = await client.get("/health")
    assert response.status_code == 503
    assert response.json()["database"] == "down"


@pytest.mark.asyncio
async def test_detailed_health_degraded_without_integrations(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["services"] == {
        "database": "up",
        "geolocation": "not_configured",
        "contact_storage": "not_configured",
        "rate_limit_storage": "memory",
    }
    assert data["version"] == settings.VERSION


@pytest.mark.asyncio
async def test_detailed_health_all_configured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "GEOLOCATION_API_KEY", "key")
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", "anon")

    response = await client.get("/api/health")
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_detailed_health_unhealthy(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(ops, "check_database", lambda: False)
    response = await client.get("/api/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_unhandled_error_returns_generic_500(error_client: AsyncClient, monkeypatch):
    def boom(db):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(alert_service, "get_alert_summary", boom)

    response = await error_client.get("/api/alerts/summary")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
