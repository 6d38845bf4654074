"""Clients router - admin case management of bail clients."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.schemas import (
    AlertRead,
    BondRead,
    BulkUploadResult,
    CheckInRead,
    ClientCreate,
    ClientCreateResponse,
    ClientListResponse,
    ClientLocation,
    ClientRead,
    ClientUpdate,
    CourtDateRead,
    PasswordResetResponse,
    PaymentRead,
)
from securebond.schemas.auth import UserSession
from securebond.services import (
    alert_service,
    audit_service,
    bond_service,
    check_in_service,
    client_service,
    court_date_service,
    payment_service,
)
from securebond.utils.pagination import PaginationParams, get_pagination, page_envelope, paginate_query

router = APIRouter(prefix="/api/clients", tags=["clients"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


def _get_client_or_404(db: Session, client_id: UUID):
    client = client_service.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.get("", response_model=ClientListResponse)
def list_clients(
    q: str | None = Query(None, max_length=100, description="Search name, ID, phone, email"),
    is_active: bool | None = Query(None),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """List clients with search and pagination."""
    rows, total = paginate_query(client_service.list_clients(db, q=q, is_active=is_active), pagination)
    return ClientListResponse(
        **page_envelope([ClientRead.model_validate(c) for c in rows], total, pagination)
    )


@router.post(
    "",
    response_model=ClientCreateResponse,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_client(
    data: ClientCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """
    Create a client.

    The temporary password is returned only in this response.
    """
    try:
        client, password = client_service.create_client(db, data)
    except client_service.DuplicateClientError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.CLIENT_CREATED,
        target_type="client", target_id=client.id, request=request,
    )
    return ClientCreateResponse(
        **ClientRead.model_validate(client).model_dump(),
        temporary_password=password,
    )


@router.get("/locations", response_model=list[ClientLocation])
def get_client_locations(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Latest coordinates and compliance status of every active client."""
    return client_service.get_client_locations(db)


@router.post(
    "/bulk-upload",
    response_model=BulkUploadResult,
    dependencies=[Depends(require_csrf_header)],
)
def bulk_upload_clients(
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Create or update clients from a CSV file. Runs in the thread pool."""
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only .csv files are accepted")

    content = file.file.read(settings.BULK_UPLOAD_MAX_BYTES + 1)
    if len(content) > settings.BULK_UPLOAD_MAX_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        result = client_service.bulk_upload_clients(db, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.CLIENT_BULK_UPLOAD,
        target_type="client",
        details={
            "processed": result["processed"],
            "created": result["created"],
            "updated": result["updated"],
            "errors": len(result["errors"]),
        },
        request=request,
    )
    return result


@router.get("/{client_id}", response_model=ClientRead)
def get_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return _get_client_or_404(db, client_id)


@router.patch(
    "/{client_id}",
    response_model=ClientRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_client(
    client_id: UUID,
    data: ClientUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    client = _get_client_or_404(db, client_id)
    changed = sorted(data.model_dump(exclude_unset=True).keys())
    try:
        client = client_service.update_client(db, client, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    audit_service.log_for_session(
        db, session, AuditEventType.CLIENT_UPDATED,
        target_type="client", target_id=client.id,
        details={"fields": changed}, request=request,
    )
    return client


@router.delete(
    "/{client_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_client(
    client_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Delete a client and all of their records."""
    client = _get_client_or_404(db, client_id)
    client_service.delete_client(db, client)
    audit_service.log_for_session(
        db, session, AuditEventType.CLIENT_DELETED,
        target_type="client", target_id=client_id, request=request,
    )


@router.post(
    "/{client_id}/reset-password",
    response_model=PasswordResetResponse,
    dependencies=[Depends(require_csrf_header)],
)
def reset_client_password(
    client_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    """Issue a new temporary password; existing client sessions end."""
    client = _get_client_or_404(db, client_id)
    password = client_service.reset_password(db, client)
    audit_service.log_for_session(
        db, session, AuditEventType.CLIENT_PASSWORD_RESET,
        target_type="client", target_id=client.id, request=request,
    )
    return PasswordResetResponse(
        client_id=client.id,
        client_number=client.client_number,
        temporary_password=password,
    )


# =============================================================================
# Client sub-resources
# =============================================================================

@router.get("/{client_id}/check-ins", response_model=list[CheckInRead])
def list_client_check_ins(
    client_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    _get_client_or_404(db, client_id)
    return check_in_service.list_check_ins(db, client_id=client_id).limit(limit).all()


@router.get("/{client_id}/payments", response_model=list[PaymentRead])
def list_client_payments(
    client_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    _get_client_or_404(db, client_id)
    return payment_service.list_payments(db, client_id=client_id).all()


@router.get("/{client_id}/court-dates", response_model=list[CourtDateRead])
def list_client_court_dates(
    client_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    client = _get_client_or_404(db, client_id)
    court_dates = court_date_service.list_court_dates(db, client_id=client_id).all()
    return [
        CourtDateRead.model_validate(cd).model_copy(update={"client_name": client.full_name})
        for cd in court_dates
    ]


@router.get("/{client_id}/bonds", response_model=list[BondRead])
def list_client_bonds(
    client_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    client = _get_client_or_404(db, client_id)
    return [
        BondRead.model_validate(b).model_copy(update={"client_name": client.full_name})
        for b in bond_service.list_bonds(db, client_id=client_id).all()
    ]


@router.get("/{client_id}/alerts", response_model=list[AlertRead])
def list_client_alerts(
    client_id: UUID,
    acknowledged: bool | None = Query(None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    client = _get_client_or_404(db, client_id)
    alerts = alert_service.list_alerts(db, acknowledged=acknowledged, client_id=client_id).all()
    return [
        AlertRead.model_validate(a).model_copy(update={"client_name": client.full_name})
        for a in alerts
    ]
