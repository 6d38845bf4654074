"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from securebond.core.security import decode_session_token
from securebond.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "securebond_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _load_principal(db: Session, principal_type: str, principal_id: UUID):
    # Import here to avoid circular imports
    from securebond.db.enums import PrincipalType
    from securebond.db.models import Client, User

    if principal_type == PrincipalType.CLIENT.value:
        return db.get(Client, principal_id)
    if principal_type == PrincipalType.USER.value:
        return db.get(User, principal_id)
    return None


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Get full session context for the authenticated principal.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - Principal (staff user or client) exists and is active
    - Token version matches (for revocation support)

    Raises:
        HTTPException 401: Authentication failed
        HTTPException 403: Unknown role
    """
    from securebond.db.enums import PrincipalType, Role
    from securebond.schemas.auth import UserSession

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
        principal_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")

    principal_type = payload.get("principal_type")
    principal = _load_principal(db, principal_type, principal_id)
    if not principal:
        raise HTTPException(status_code=401, detail="Account not found")

    if not principal.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    # Token version check (revocation support)
    if principal.token_version != payload.get("token_version"):
        raise HTTPException(status_code=401, detail="Session revoked")

    if principal_type == PrincipalType.CLIENT.value:
        role = Role.CLIENT
        display_name = principal.full_name
        client_id = principal.id
    else:
        # Validate role is a known enum value - return 403 not 500
        if not Role.has_value(principal.role):
            raise HTTPException(
                status_code=403,
                detail=f"Unknown role '{principal.role}'. Contact administrator.",
            )
        role = Role(principal.role)
        display_name = principal.display_name
        client_id = None

    session = UserSession(
        principal_id=principal.id,
        principal_type=PrincipalType(principal_type),
        role=role,
        display_name=display_name,
        client_id=client_id,
    )
    request.state.principal = session
    return session


def require_roles(allowed_roles: list):
    """
    Dependency factory for role-based authorization.

    Uses enum values (not strings) to prevent drift.

    Usage:
        @router.get("/ops", dependencies=[Depends(require_roles([Role.ADMIN, Role.MAINTENANCE]))])
    """
    def dependency(request: Request, db: Session = Depends(get_db)):
        session = get_current_session(request, db)
        if session.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Role '{session.role.value}' not authorized for this action",
            )
        return session
    return dependency


def require_client(request: Request, db: Session = Depends(get_db)):
    """Client-portal endpoints: the session must belong to a client."""
    from securebond.db.enums import Role

    session = get_current_session(request, db)
    if session.role != Role.CLIENT:
        raise HTTPException(status_code=403, detail="Client account required")
    return session


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PUT, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )


def resolve_client_scope(session, client_id: UUID | None) -> UUID:
    """
    Pick the client a check-in or payment belongs to.

    Clients always act on themselves; staff must name the client.
    """
    from securebond.db.enums import Role

    if session.role == Role.CLIENT:
        if client_id and client_id != session.client_id:
            raise HTTPException(status_code=403, detail="Clients can only act on their own record")
        return session.client_id
    if session.role != Role.ADMIN:
        raise HTTPException(
            status_code=403,
            detail=f"Role '{session.role.value}' not authorized for this action",
        )
    if not client_id:
        raise HTTPException(status_code=400, detail="client_id is required")
    return client_id
