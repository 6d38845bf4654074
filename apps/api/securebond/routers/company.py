"""Company configuration router - agency profile and operating settings."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import (
    AuditEventType,
    ROLES_CAN_MANAGE_SETTINGS,
    ROLES_CAN_VIEW_SETTINGS,
)
from securebond.schemas import (
    CompanyConfigurationRead,
    CompanyConfigurationUpdate,
    PublicCompanyInfo,
)
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, company_service

router = APIRouter(prefix="/api/company-configuration", tags=["company"])


def _get_config_or_404(db: Session):
    config = company_service.get_configuration(db)
    if not config:
        raise HTTPException(status_code=404, detail="Company configuration not found")
    return config


@router.get("/public", response_model=PublicCompanyInfo)
def get_public_info(db: Session = Depends(get_db)):
    """Branding details for the public landing page (no auth)."""
    return _get_config_or_404(db)


@router.get("", response_model=CompanyConfigurationRead)
def get_configuration(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_SETTINGS))),
):
    return _get_config_or_404(db)


@router.put(
    "",
    response_model=CompanyConfigurationRead,
    dependencies=[Depends(require_csrf_header)],
)
def save_configuration(
    data: CompanyConfigurationUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_SETTINGS))),
):
    """Create or replace the company configuration."""
    config = company_service.upsert_configuration(db, data.model_dump())
    audit_service.log_for_session(
        db, session, AuditEventType.COMPANY_CONFIG_UPDATED,
        target_type="company_configuration", target_id=config.id,
        details={"fields": sorted(data.model_dump(exclude_unset=True).keys())},
        request=request,
    )
    return config
