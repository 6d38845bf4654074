"""
Compliance alerts service.

Manages deduplicated, actionable alerts with fingerprinting.
"""
import hashlib
import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from securebond.db.enums import AlertSeverity, AlertType
from securebond.db.models import Alert

logger = logging.getLogger(__name__)


def fingerprint(alert_type: AlertType, client_id: UUID | None, subject: str | None = None) -> str:
    """
    Generate a stable, PII-safe fingerprint for alert deduplication.

    No timestamps or random IDs - ensures dedupe works correctly.
    """
    normalized = f"{alert_type.value}:{client_id or 'none'}:{subject or 'default'}"
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def create_alert(
    db: Session,
    alert_type: AlertType,
    severity: AlertSeverity,
    message: str,
    client_id: UUID | None = None,
    commit: bool = True,
) -> Alert:
    """Create a one-off alert (manual alerts have no dedupe key)."""
    alert = Alert(
        client_id=client_id,
        alert_type=alert_type.value,
        severity=severity.value,
        message=message,
    )
    db.add(alert)
    if commit:
        db.commit()
        db.refresh(alert)
    else:
        db.flush()
    return alert


def create_or_update_alert(
    db: Session,
    alert_type: AlertType,
    severity: AlertSeverity,
    message: str,
    client_id: UUID | None = None,
    subject: str | None = None,
    commit: bool = True,
) -> Alert:
    """
    Create a new alert or update an existing one if fingerprint matches.

    Updates: last_seen_at, occurrence_count, message, severity
    Reopens acknowledged alerts if they recur.
    """
    dedupe_key = fingerprint(alert_type, client_id, subject)
    now = datetime.now(timezone.utc)

    existing = db.query(Alert).filter(Alert.dedupe_key == dedupe_key).first()

    if existing:
        existing.last_seen_at = now
        existing.occurrence_count += 1
        existing.message = message
        existing.severity = severity.value
        if existing.acknowledged:
            existing.acknowledged = False
            existing.acknowledged_at = None
            existing.acknowledged_by_user_id = None
        alert = existing
    else:
        alert = Alert(
            client_id=client_id,
            alert_type=alert_type.value,
            severity=severity.value,
            message=message,
            dedupe_key=dedupe_key,
        )
        db.add(alert)

    if commit:
        db.commit()
        db.refresh(alert)
    else:
        db.flush()
    logger.info("Alert %s (%s) recorded for client %s", alert_type.value, severity.value, client_id)
    return alert


def list_alerts(
    db: Session,
    acknowledged: bool | None = False,
    severity: AlertSeverity | None = None,
    alert_type: AlertType | None = None,
    client_id: UUID | None = None,
):
    """Filtered alert query, most recently seen first (caller paginates)."""
    query = db.query(Alert)
    if acknowledged is not None:
        query = query.filter(Alert.acknowledged == acknowledged)
    if severity:
        query = query.filter(Alert.severity == severity.value)
    if alert_type:
        query = query.filter(Alert.alert_type == alert_type.value)
    if client_id:
        query = query.filter(Alert.client_id == client_id)
    return query.order_by(Alert.last_seen_at.desc(), Alert.created_at.desc())


def get_alert(db: Session, alert_id: UUID) -> Alert | None:
    return db.get(Alert, alert_id)


def acknowledge_alert(db: Session, alert: Alert, user_id: UUID) -> Alert:
    """Mark an alert handled. Re-acknowledging keeps the first timestamp."""
    if not alert.acknowledged:
        alert.acknowledged = True
        alert.acknowledged_at = datetime.now(timezone.utc)
        alert.acknowledged_by_user_id = user_id
        db.commit()
        db.refresh(alert)
    return alert


def acknowledge_client_alerts(
    db: Session,
    client_id: UUID,
    alert_type: AlertType,
    user_id: UUID | None = None,
) -> int:
    """Acknowledge every open alert of a type for a client. Caller commits."""
    now = datetime.now(timezone.utc)
    alerts = db.query(Alert).filter(
        Alert.client_id == client_id,
        Alert.alert_type == alert_type.value,
        Alert.acknowledged.is_(False),
    ).all()
    for alert in alerts:
        alert.acknowledged = True
        alert.acknowledged_at = now
        alert.acknowledged_by_user_id = user_id
    return len(alerts)


def get_alert_summary(db: Session) -> dict:
    """Count unacknowledged alerts by severity."""
    rows = db.query(Alert.severity, func.count(Alert.id)).filter(
        Alert.acknowledged.is_(False)
    ).group_by(Alert.severity).all()

    counts = {severity.value: 0 for severity in AlertSeverity}
    for severity, count in rows:
        counts[severity] = count
    return {"total": sum(counts.values()), **counts}
