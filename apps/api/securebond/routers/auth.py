"""Authentication router - staff and client login, logout, session info."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from securebond.core.config import settings
from securebond.core.deps import (
    COOKIE_NAME,
    get_current_session,
    get_db,
    require_csrf_header,
)
from securebond.core.rate_limit import limiter
from securebond.core.security import create_session_token
from securebond.db.enums import AuditEventType, PrincipalType, Role
from securebond.schemas.auth import (
    ClientLoginRequest,
    ClientPhoneLoginRequest,
    MeResponse,
    StaffLoginRequest,
    UserSession,
)
from securebond.services import audit_service, client_service, user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

AUTH_LIMIT = f"{settings.RATE_LIMIT_AUTH}/minute"


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


def _login_failed(db: Session, request: Request, details: dict) -> HTTPException:
    audit_service.log_event(
        db,
        event_type=AuditEventType.AUTH_LOGIN_FAILED,
        details=details,
        request=request,
    )
    return HTTPException(status_code=401, detail="Invalid credentials")


def _client_login_response(db: Session, request: Request, response: Response, client) -> MeResponse:
    token = create_session_token(
        principal_id=client.id,
        principal_type=PrincipalType.CLIENT.value,
        role=Role.CLIENT.value,
        token_version=client.token_version,
    )
    _set_session_cookie(response, token)
    audit_service.log_event(
        db,
        event_type=AuditEventType.AUTH_LOGIN_SUCCESS,
        actor_type=PrincipalType.CLIENT,
        actor_id=client.id,
        request=request,
    )
    return MeResponse(
        principal_id=client.id,
        principal_type=PrincipalType.CLIENT,
        role=Role.CLIENT,
        display_name=client.full_name,
        client_id=client.id,
        client_number=client.client_number,
        email=client.email,
    )


# =============================================================================
# Login
# =============================================================================

@router.post("/staff-login", response_model=MeResponse)
@limiter.limit(AUTH_LIMIT)
def staff_login(
    request: Request,
    response: Response,
    body: StaffLoginRequest,
    db: Session = Depends(get_db),
):
    """Admin / maintenance login with email and password."""
    user = user_service.authenticate_staff(db, body.email, body.password)
    if not user:
        raise _login_failed(
            db, request, {"email_hash": audit_service.hash_email(body.email), "portal": "staff"}
        )
    if not Role.has_value(user.role):
        raise HTTPException(status_code=403, detail=f"Unknown role '{user.role}'. Contact administrator.")

    token = create_session_token(
        principal_id=user.id,
        principal_type=PrincipalType.USER.value,
        role=user.role,
        token_version=user.token_version,
    )
    _set_session_cookie(response, token)
    audit_service.log_event(
        db,
        event_type=AuditEventType.AUTH_LOGIN_SUCCESS,
        actor_type=PrincipalType.USER,
        actor_id=user.id,
        request=request,
    )
    return MeResponse(
        principal_id=user.id,
        principal_type=PrincipalType.USER,
        role=Role(user.role),
        display_name=user.display_name,
        email=user.email,
    )


@router.post("/client-login", response_model=MeResponse)
@limiter.limit(AUTH_LIMIT)
def client_login(
    request: Request,
    response: Response,
    body: ClientLoginRequest,
    db: Session = Depends(get_db),
):
    """Client portal login with client ID and password."""
    client = client_service.authenticate_client(db, body.client_number, body.password)
    if not client:
        raise _login_failed(db, request, {"client_number": body.client_number.strip().upper()})
    return _client_login_response(db, request, response, client)


@router.post("/client-login-phone", response_model=MeResponse)
@limiter.limit(AUTH_LIMIT)
def client_login_phone(
    request: Request,
    response: Response,
    body: ClientPhoneLoginRequest,
    db: Session = Depends(get_db),
):
    """Client portal login with phone number and password."""
    client = client_service.authenticate_client_by_phone(db, body.phone_number, body.password)
    if not client:
        raise _login_failed(db, request, {"portal": "client_phone"})
    return _client_login_response(db, request, response, client)


# =============================================================================
# Session Endpoints
# =============================================================================

@router.get("/me", response_model=MeResponse)
def get_me(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get current authenticated principal."""
    if session.principal_type == PrincipalType.CLIENT:
        client = client_service.get_client(db, session.principal_id)
        return MeResponse(
            **session.model_dump(),
            client_number=client.client_number,
            email=client.email,
        )
    user = user_service.get_user_by_id(db, session.principal_id)
    return MeResponse(**session.model_dump(), email=user.email)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(
    request: Request,
    response: Response,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Clear session cookie and log logout event.

    Requires X-Requested-With header for CSRF protection.
    """
    audit_service.log_for_session(db, session, AuditEventType.AUTH_LOGOUT, request=request)
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}
