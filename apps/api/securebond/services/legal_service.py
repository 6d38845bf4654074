"""Privacy policy and terms of service acknowledgments."""

from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.db.enums import PrincipalType
from securebond.db.models import PrivacyAcknowledgment, TermsAcknowledgment
from securebond.services.audit_service import get_client_ip, get_user_agent


def _check_version(version: str, current: str, document: str) -> None:
    if version != current:
        raise ValueError(f"Only the current {document} version ({current}) can be acknowledged")


def get_privacy_acknowledgment(
    db: Session,
    principal_type: PrincipalType,
    principal_id: UUID,
) -> PrivacyAcknowledgment | None:
    """Latest acknowledgment of the current privacy policy, if any."""
    return db.query(PrivacyAcknowledgment).filter(
        PrivacyAcknowledgment.principal_type == principal_type.value,
        PrivacyAcknowledgment.principal_id == principal_id,
        PrivacyAcknowledgment.version == settings.PRIVACY_POLICY_VERSION,
    ).order_by(PrivacyAcknowledgment.acknowledged_at.desc()).first()


def acknowledge_privacy(
    db: Session,
    principal_type: PrincipalType,
    principal_id: UUID,
    data_types: list[str],
    version: str,
    request: Request | None = None,
) -> PrivacyAcknowledgment:
    _check_version(version, settings.PRIVACY_POLICY_VERSION, "privacy policy")
    ack = PrivacyAcknowledgment(
        principal_type=principal_type.value,
        principal_id=principal_id,
        version=version,
        data_types=sorted(set(data_types)),
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    db.add(ack)
    db.commit()
    db.refresh(ack)
    return ack


def get_terms_acknowledgment(
    db: Session,
    principal_type: PrincipalType,
    principal_id: UUID,
) -> TermsAcknowledgment | None:
    return db.query(TermsAcknowledgment).filter(
        TermsAcknowledgment.principal_type == principal_type.value,
        TermsAcknowledgment.principal_id == principal_id,
        TermsAcknowledgment.version == settings.TERMS_VERSION,
    ).order_by(TermsAcknowledgment.acknowledged_at.desc()).first()


def acknowledge_terms(
    db: Session,
    principal_type: PrincipalType,
    principal_id: UUID,
    version: str,
    request: Request | None = None,
) -> TermsAcknowledgment:
    """Record acceptance; accepting the same version again returns the existing record."""
    _check_version(version, settings.TERMS_VERSION, "terms")
    existing = get_terms_acknowledgment(db, principal_type, principal_id)
    if existing:
        return existing
    ack = TermsAcknowledgment(
        principal_type=principal_type.value,
        principal_id=principal_id,
        version=version,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    db.add(ack)
    db.commit()
    db.refresh(ack)
    return ack
