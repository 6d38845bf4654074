"""Audit logging service - security and compliance event tracking.

Security guidelines:
- NEVER log secrets (passwords, tokens, API keys)
- Hash PII in details (use hash_email for emails)
- Use IDs instead of raw data where possible
- IP: Trust X-Forwarded-For only behind a trusted proxy
"""

import hashlib
from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.db.enums import AuditEventType, PrincipalType
from securebond.db.models import AuditLog

# Keys stripped from details before they are persisted
REDACTED_KEYS = {"password", "temporary_password", "password_hash", "token", "secret", "api_key"}


def hash_email(email: str) -> str:
    """Hash email for audit log (prefix + SHA256 suffix for debugging)."""
    if not email:
        return ""
    prefix = email.split("@")[0][:3] if "@" in email else email[:3]
    suffix = hashlib.sha256(email.lower().encode()).hexdigest()[:12]
    return f"{prefix}...@[hash:{suffix}]"


def get_client_ip(request: Request | None) -> str | None:
    """
    Extract client IP from request.

    Only trusts X-Forwarded-For when TRUST_PROXY_HEADERS=True (behind reverse proxy).
    """
    if not request:
        return None

    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # X-Forwarded-For: client, proxy1, proxy2 - take first
            return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return None


def get_user_agent(request: Request | None) -> str | None:
    """Extract user agent from request."""
    if not request:
        return None
    ua = request.headers.get("user-agent", "")
    # Truncate to 500 chars (DB limit)
    return ua[:500] if ua else None


def redact_details(details: dict[str, Any] | None) -> dict[str, Any] | None:
    if not details:
        return details
    return {
        key: ("[redacted]" if key.lower() in REDACTED_KEYS else value)
        for key, value in details.items()
    }


def log_event(
    db: Session,
    event_type: AuditEventType,
    actor_type: PrincipalType = PrincipalType.SYSTEM,
    actor_id: UUID | None = None,
    target_type: str | None = None,
    target_id: UUID | None = None,
    details: dict[str, Any] | None = None,
    request: Request | None = None,
    commit: bool = True,
) -> AuditLog:
    """
    Record an audit event.

    Args:
        db: Database session
        event_type: Type of event (from AuditEventType)
        actor_type: user, client, or system
        actor_id: Principal who performed the action (None for system)
        target_type: Type of entity affected (e.g. 'client', 'payment')
        target_id: ID of the affected entity
        details: Additional context (redacted before storage)
        request: FastAPI request for IP/user-agent extraction
        commit: Set False to commit together with the caller's changes
    """
    entry = AuditLog(
        actor_type=actor_type.value,
        actor_id=actor_id,
        event_type=event_type.value,
        target_type=target_type,
        target_id=target_id,
        details=redact_details(details),
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry


def log_for_session(
    db: Session,
    session,
    event_type: AuditEventType,
    target_type: str | None = None,
    target_id: UUID | None = None,
    details: dict[str, Any] | None = None,
    request: Request | None = None,
) -> AuditLog:
    """Shortcut for events performed by the current session principal."""
    return log_event(
        db,
        event_type=event_type,
        actor_type=session.principal_type,
        actor_id=session.principal_id,
        target_type=target_type,
        target_id=target_id,
        details=details,
        request=request,
    )


def list_audit_logs(
    db: Session,
    event_type: str | None = None,
    actor_id: UUID | None = None,
    target_type: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
):
    """Build a filtered audit query, newest first (caller paginates)."""
    query = db.query(AuditLog)
    if event_type:
        query = query.filter(AuditLog.event_type == event_type)
    if actor_id:
        query = query.filter(AuditLog.actor_id == actor_id)
    if target_type:
        query = query.filter(AuditLog.target_type == target_type)
    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)
    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)
    return query.order_by(AuditLog.created_at.desc())
