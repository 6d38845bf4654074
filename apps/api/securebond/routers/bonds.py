"""Bonds router - admin bond management."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import AuditEventType, BondStatus, ROLES_CAN_MANAGE_CASES
from securebond.db.models import Bond
from securebond.schemas import BondCreate, BondRead, BondUpdate
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, bond_service

router = APIRouter(prefix="/api/bonds", tags=["bonds"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


def _to_read(bond: Bond) -> BondRead:
    return BondRead.model_validate(bond).model_copy(
        update={"client_name": bond.client.full_name if bond.client else None}
    )


def _get_bond_or_404(db: Session, bond_id: UUID) -> Bond:
    bond = bond_service.get_bond(db, bond_id)
    if not bond:
        raise HTTPException(status_code=404, detail="Bond not found")
    return bond


@router.get("", response_model=list[BondRead])
def list_bonds(
    client_id: UUID | None = Query(None),
    status: BondStatus | None = Query(None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return [_to_read(b) for b in bond_service.list_bonds(db, client_id=client_id, status=status).all()]


@router.get("/active", response_model=list[BondRead])
def list_active_bonds(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return [_to_read(b) for b in bond_service.list_bonds(db, status=BondStatus.ACTIVE).all()]


@router.post(
    "",
    response_model=BondRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_bond(
    data: BondCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    try:
        bond = bond_service.create_bond(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.BOND_CREATED,
        target_type="bond", target_id=bond.id,
        details={"client_id": str(bond.client_id), "bond_amount": str(bond.bond_amount)},
        request=request,
    )
    return _to_read(bond)


@router.get("/{bond_id}", response_model=BondRead)
def get_bond(
    bond_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return _to_read(_get_bond_or_404(db, bond_id))


@router.patch(
    "/{bond_id}",
    response_model=BondRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_bond(
    bond_id: UUID,
    data: BondUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    bond = bond_service.update_bond(db, _get_bond_or_404(db, bond_id), data)
    audit_service.log_for_session(
        db, session, AuditEventType.BOND_UPDATED,
        target_type="bond", target_id=bond.id,
        details={"fields": sorted(data.model_dump(exclude_unset=True).keys())},
        request=request,
    )
    return _to_read(bond)


@router.delete(
    "/{bond_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_bond(
    bond_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    bond_service.delete_bond(db, _get_bond_or_404(db, bond_id))
    audit_service.log_for_session(
        db, session, AuditEventType.BOND_DELETED,
        target_type="bond", target_id=bond_id, request=request,
    )
