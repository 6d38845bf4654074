"""Contact router - public contact form backed by Supabase."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from securebond.core.config import settings
from securebond.core.deps import require_roles
from securebond.core.rate_limit import limiter
from securebond.db.enums import ROLES_CAN_MANAGE_CASES
from securebond.schemas import ContactInquiryCreate, ContactInquiryRead
from securebond.schemas.auth import UserSession
from securebond.services import contact_service

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", response_model=ContactInquiryRead, status_code=201)
@limiter.limit(f"{settings.RATE_LIMIT_CONTACT}/minute")
async def submit_contact_form(request: Request, data: ContactInquiryCreate):
    """Store a public inquiry (no auth, rate limited per IP)."""
    try:
        row = await contact_service.submit_inquiry(data.model_dump(mode="json"))
    except contact_service.ContactFormError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return row


@router.get("/inquiries", response_model=list[ContactInquiryRead])
async def list_inquiries(
    limit: int = Query(50, ge=1, le=200),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
):
    """Most recent inquiries first."""
    try:
        return await contact_service.list_inquiries(limit=limit)
    except contact_service.ContactFormError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
