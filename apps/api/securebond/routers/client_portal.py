"""Client portal router - a client's own records."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_client, require_csrf_header
from securebond.routers.court_dates import to_court_date_read
from securebond.schemas import BondRead, CheckInRead, CourtDateRead, PaymentRead
from securebond.schemas.auth import UserSession
from securebond.services import (
    bond_service,
    check_in_service,
    court_date_service,
    payment_service,
)

router = APIRouter(prefix="/api/client", tags=["client-portal"])


@router.get("/check-ins", response_model=list[CheckInRead])
def list_my_check_ins(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_client),
):
    return check_in_service.list_check_ins(db, client_id=session.client_id).limit(limit).all()


@router.get("/payments", response_model=list[PaymentRead])
def list_my_payments(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_client),
):
    return payment_service.list_payments(db, client_id=session.client_id).all()


@router.get("/bonds", response_model=list[BondRead])
def list_my_bonds(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_client),
):
    return bond_service.list_bonds(db, client_id=session.client_id).all()


@router.get("/court-dates", response_model=list[CourtDateRead])
def list_my_court_dates(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_client),
):
    """Approved court dates only; pending imports stay hidden until reviewed."""
    query = court_date_service.list_court_dates(db, client_id=session.client_id, approved=True)
    return [to_court_date_read(cd) for cd in query.all()]


@router.patch(
    "/court-dates/{court_date_id}/acknowledge",
    response_model=CourtDateRead,
    dependencies=[Depends(require_csrf_header)],
)
def acknowledge_court_date(
    court_date_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_client),
):
    """Client confirms they know about an upcoming court date."""
    court_date = court_date_service.get_court_date(db, court_date_id)
    if not court_date or court_date.client_id != session.client_id:
        raise HTTPException(status_code=404, detail="Court date not found")
    return to_court_date_read(court_date_service.acknowledge_by_client(db, court_date))
