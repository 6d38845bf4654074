"""Legal router - privacy policy and terms of service acknowledgments."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.core.deps import get_current_session, get_db, require_csrf_header
from securebond.db.enums import AuditEventType
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, legal_service

router = APIRouter(prefix="/api", tags=["legal"])


# =============================================================================
# Schemas
# =============================================================================

class PrivacyAcknowledgmentCreate(BaseModel):
    data_types: list[str] = Field(default_factory=list, max_length=20)
    version: str = Field(..., min_length=1, max_length=20)


class PrivacyStatus(BaseModel):
    acknowledged: bool
    current_version: str
    version: str | None = None
    data_types: list[str] = []
    acknowledged_at: datetime | None = None


class TermsAcknowledgmentCreate(BaseModel):
    version: str = Field(..., min_length=1, max_length=20)


class TermsStatus(BaseModel):
    acknowledged: bool
    current_version: str
    acknowledged_at: datetime | None = None


def _privacy_status(ack) -> PrivacyStatus:
    if not ack:
        return PrivacyStatus(acknowledged=False, current_version=settings.PRIVACY_POLICY_VERSION)
    return PrivacyStatus(
        acknowledged=True,
        current_version=settings.PRIVACY_POLICY_VERSION,
        version=ack.version,
        data_types=ack.data_types or [],
        acknowledged_at=ack.acknowledged_at,
    )


def _terms_status(ack) -> TermsStatus:
    return TermsStatus(
        acknowledged=ack is not None,
        current_version=settings.TERMS_VERSION,
        acknowledged_at=ack.acknowledged_at if ack else None,
    )


# =============================================================================
# Privacy
# =============================================================================

@router.get("/privacy/acknowledgment", response_model=PrivacyStatus)
def get_privacy_acknowledgment(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Whether the current privacy policy version was acknowledged."""
    ack = legal_service.get_privacy_acknowledgment(db, session.principal_type, session.principal_id)
    return _privacy_status(ack)


@router.post(
    "/privacy/acknowledgment",
    response_model=PrivacyStatus,
    dependencies=[Depends(require_csrf_header)],
)
def acknowledge_privacy(
    data: PrivacyAcknowledgmentCreate,
    request: Request,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        ack = legal_service.acknowledge_privacy(
            db,
            session.principal_type,
            session.principal_id,
            data_types=data.data_types,
            version=data.version,
            request=request,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.PRIVACY_ACKNOWLEDGED,
        target_type="privacy_policy",
        details={"version": ack.version, "data_types": ack.data_types},
        request=request,
    )
    return _privacy_status(ack)


# =============================================================================
# Terms of service
# =============================================================================

@router.get("/terms/status", response_model=TermsStatus)
def get_terms_status(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    ack = legal_service.get_terms_acknowledgment(db, session.principal_type, session.principal_id)
    return _terms_status(ack)


@router.post(
    "/terms/acknowledge",
    response_model=TermsStatus,
    dependencies=[Depends(require_csrf_header)],
)
def acknowledge_terms(
    data: TermsAcknowledgmentCreate,
    request: Request,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        ack = legal_service.acknowledge_terms(
            db,
            session.principal_type,
            session.principal_id,
            version=data.version,
            request=request,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.TERMS_ACKNOWLEDGED,
        target_type="terms", details={"version": ack.version}, request=request,
    )
    return _terms_status(ack)
