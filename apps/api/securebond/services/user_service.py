"""User service - staff account lookup and management."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from securebond.core.security import hash_password, verify_password
from securebond.db.enums import Role, STAFF_ROLES
from securebond.db.models import User
from securebond.utils.normalization import normalize_email


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    """Get user by ID."""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def authenticate_staff(db: Session, email: str, password: str) -> User | None:
    """Return the active staff user for valid credentials, else None."""
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    return user


def create_staff_user(
    db: Session,
    email: str,
    display_name: str,
    password: str,
    role: Role = Role.ADMIN,
) -> User:
    """
    Create a staff account.

    Raises:
        ValueError: role is not a staff role or the email is taken
    """
    if role not in STAFF_ROLES:
        raise ValueError(f"'{role.value}' is not a staff role")
    if get_user_by_email(db, email):
        raise ValueError(f"User '{email}' already exists")

    user = User(
        email=normalize_email(email),
        display_name=display_name.strip(),
        password_hash=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_staff(db: Session, include_inactive: bool = True) -> list[User]:
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active.is_(True))
    return query.order_by(User.display_name).all()


def update_staff_user(
    db: Session,
    user: User,
    display_name: str | None = None,
    role: Role | None = None,
    is_active: bool | None = None,
) -> User:
    """
    Apply a partial update. None leaves a field unchanged.

    A role change or deactivation bumps token_version so the account's
    open sessions stop working.
    """
    if display_name is not None:
        name = display_name.strip()
        if not name:
            raise ValueError("display_name cannot be blank")
        user.display_name = name

    revoke = False
    if role is not None and role.value != user.role:
        if role not in STAFF_ROLES:
            raise ValueError(f"'{role.value}' is not a staff role")
        user.role = role.value
        revoke = True
    if is_active is not None and is_active != user.is_active:
        user.is_active = is_active
        revoke = revoke or not is_active

    if revoke:
        user.token_version += 1
    db.commit()
    db.refresh(user)
    return user


def disable_user(db: Session, user: User) -> User:
    """Deactivate (soft delete) a staff account and end its sessions."""
    return update_staff_user(db, user, is_active=False)


def revoke_all_sessions(db: Session, user: User) -> User:
    user.token_version += 1
    db.commit()
    db.refresh(user)
    return user
