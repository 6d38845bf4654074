"""Payments router - client payments and admin confirmation."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import (
    get_current_session,
    get_db,
    require_csrf_header,
    require_roles,
    resolve_client_scope,
)
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.schemas import PaymentCreate, PaymentRead
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, client_service, payment_service

router = APIRouter(prefix="/api/payments", tags=["payments"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


@router.post(
    "",
    response_model=PaymentRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_payment(
    data: PaymentCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Record a payment (unconfirmed until an admin confirms it)."""
    client_id = resolve_client_scope(session, data.client_id)
    if not client_service.get_client(db, client_id):
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        payment = payment_service.create_payment(db, client_id, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.PAYMENT_CREATED,
        target_type="payment", target_id=payment.id,
        details={"client_id": str(client_id), "amount": str(payment.amount)},
        request=request,
    )
    return payment


@router.get("", response_model=list[PaymentRead])
def list_payments(
    client_id: UUID | None = Query(None),
    confirmed: bool | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    query = payment_service.list_payments(db, client_id=client_id, confirmed=confirmed)
    return query.offset(offset).limit(limit).all()


@router.patch(
    "/{payment_id}/confirm",
    response_model=PaymentRead,
    dependencies=[Depends(require_csrf_header)],
)
def confirm_payment(
    payment_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Confirm a payment and apply it to the linked bond balance."""
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")

    try:
        payment = payment_service.confirm_payment(db, payment, session.principal_id)
    except payment_service.PaymentAlreadyConfirmedError as e:
        raise HTTPException(status_code=409, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.PAYMENT_CONFIRMED,
        target_type="payment", target_id=payment.id,
        details={"amount": str(payment.amount)}, request=request,
    )
    return payment
