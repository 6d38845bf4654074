"""Staff router - admin management of admin and maintenance accounts."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.core.security import generate_temporary_password
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_STAFF
from securebond.db.models import User
from securebond.schemas.auth import UserSession
from securebond.schemas.user import StaffCreate, StaffCreateResponse, StaffRead, StaffUpdate
from securebond.services import audit_service, user_service

router = APIRouter(prefix="/api/admin/staff", tags=["staff"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_STAFF))

# Generated staff passwords are longer than client ones
STAFF_TEMP_PASSWORD_LENGTH = 12


def _get_staff_or_404(db: Session, user_id: UUID) -> User:
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return user


def _forbid_self(session: UserSession, user: User, action: str) -> None:
    if user.id == session.principal_id:
        raise HTTPException(status_code=403, detail=f"Cannot {action} your own account")


@router.get("", response_model=list[StaffRead])
def list_staff(
    include_inactive: bool = Query(True),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return user_service.list_staff(db, include_inactive=include_inactive)


@router.post(
    "",
    response_model=StaffCreateResponse,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_staff(
    data: StaffCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """
    Create an admin or maintenance account.

    When no password is supplied one is generated and returned once.
    Duplicate email -> 409.
    """
    generated = None if data.password else generate_temporary_password(STAFF_TEMP_PASSWORD_LENGTH)
    try:
        user = user_service.create_staff_user(
            db, data.email, data.display_name, data.password or generated, data.role
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.STAFF_CREATED,
        target_type="user", target_id=user.id,
        details={"role": user.role}, request=request,
    )
    return StaffCreateResponse(
        **StaffRead.model_validate(user).model_dump(),
        temporary_password=generated,
    )


@router.get("/{user_id}", response_model=StaffRead)
def get_staff(
    user_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return _get_staff_or_404(db, user_id)


@router.patch(
    "/{user_id}",
    response_model=StaffRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_staff(
    user_id: UUID,
    data: StaffUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """
    Rename, change role, or (de)activate a staff account.

    Admins cannot change their own role or deactivate themselves, so at
    least one active admin always remains.
    """
    user = _get_staff_or_404(db, user_id)
    if data.role is not None or data.is_active is not None:
        _forbid_self(session, user, "change the role or status of")

    changed = sorted(data.model_dump(exclude_none=True).keys())
    try:
        user = user_service.update_staff_user(
            db, user,
            display_name=data.display_name,
            role=data.role,
            is_active=data.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.STAFF_UPDATED,
        target_type="user", target_id=user.id,
        details={"fields": changed}, request=request,
    )
    return user


@router.delete(
    "/{user_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def deactivate_staff(
    user_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Deactivate a staff account. The row is kept for the audit trail."""
    user = _get_staff_or_404(db, user_id)
    _forbid_self(session, user, "deactivate")

    user_service.disable_user(db, user)
    audit_service.log_for_session(
        db, session, AuditEventType.STAFF_DEACTIVATED,
        target_type="user", target_id=user.id, request=request,
    )


@router.post(
    "/{user_id}/revoke-sessions",
    response_model=StaffRead,
    dependencies=[Depends(require_csrf_header)],
)
def revoke_staff_sessions(
    user_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Sign the account out everywhere."""
    user = user_service.revoke_all_sessions(db, _get_staff_or_404(db, user_id))
    audit_service.log_for_session(
        db, session, AuditEventType.STAFF_SESSIONS_REVOKED,
        target_type="user", target_id=user.id, request=request,
    )
    return user
