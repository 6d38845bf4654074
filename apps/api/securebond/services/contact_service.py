"""
Public contact form storage.

Inquiries are written to the Supabase `contact_inquiries` table through
its PostgREST endpoint, so the marketing site and the API share one inbox.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from securebond.core.config import settings
from securebond.services.http_service import request_with_retries

logger = logging.getLogger(__name__)


class ContactFormError(Exception):
    """Supabase write/read failure, carrying the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _table_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/rest/v1/{settings.CONTACT_TABLE}"


def _headers(**extra: str) -> dict[str, str]:
    return {
        "apikey": settings.SUPABASE_ANON_KEY,
        "Authorization": f"Bearer {settings.SUPABASE_ANON_KEY}",
        "Content-Type": "application/json",
        **extra,
    }


def _require_configured() -> None:
    if not settings.supabase_configured:
        raise ContactFormError("Contact form storage is not configured", status_code=503)


async def submit_inquiry(
    inquiry: dict[str, Any],
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Insert one inquiry and return the stored row."""
    _require_configured()

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await request_with_retries(
            lambda: client.post(
                _table_url(),
                json=inquiry,
                headers=_headers(Prefer="return=representation"),
            ),
        )
    except httpx.RequestError as exc:
        logger.warning("Contact inquiry insert failed: %s", exc.__class__.__name__)
        raise ContactFormError("Contact form storage unreachable") from exc
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code >= 400:
        logger.warning("Supabase rejected contact inquiry: %s", response.status_code)
        raise ContactFormError("Failed to submit contact form")

    rows = response.json() if response.content else []
    if isinstance(rows, list) and rows:
        return rows[0]
    return inquiry


async def list_inquiries(
    limit: int = 50,
    http_client: httpx.AsyncClient | None = None,
) -> list[dict[str, Any]]:
    """Newest inquiries first."""
    _require_configured()

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await request_with_retries(
            lambda: client.get(
                _table_url(),
                params={"select": "*", "order": "created_at.desc", "limit": str(limit)},
                headers=_headers(),
            ),
        )
    except httpx.RequestError as exc:
        raise ContactFormError("Contact form storage unreachable") from exc
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code >= 400:
        raise ContactFormError("Failed to load contact inquiries")
    return response.json()
