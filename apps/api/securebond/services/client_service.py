"""Client service - business logic for client records, credentials and CSV import."""

import csv
import io
import logging
import secrets
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from securebond.core.security import generate_temporary_password, hash_password, verify_password
from securebond.db.enums import ClientLocationStatus
from securebond.db.models import CheckIn, Client
from securebond.schemas.client import ClientCreate, ClientUpdate
from securebond.utils.normalization import normalize_email, normalize_name, normalize_phone

logger = logging.getLogger(__name__)

CLIENT_NUMBER_PREFIX = "SB"

# NOT NULL columns a PATCH may set but never clear
REQUIRED_CLIENT_FIELDS = ("full_name", "phone_number", "is_active")


class DuplicateClientError(ValueError):
    """client_number already taken."""


# =============================================================================
# Credentials
# =============================================================================

def generate_client_number(db: Session) -> str:
    """Random `SB` + 6 hex digits, retried until unused."""
    while True:
        candidate = f"{CLIENT_NUMBER_PREFIX}{secrets.token_hex(3).upper()}"
        if not get_client_by_number(db, candidate):
            return candidate


def authenticate_client(db: Session, client_number: str, password: str) -> Client | None:
    client = get_client_by_number(db, client_number.strip())
    if not client or not client.is_active:
        return None
    if not verify_password(password, client.password_hash):
        return None
    return client


def authenticate_client_by_phone(db: Session, phone_number: str, password: str) -> Client | None:
    """
    Phone login. Several clients may share a phone (family members);
    the first active one whose password matches wins.
    """
    try:
        phone = normalize_phone(phone_number)
    except ValueError:
        return None
    candidates = db.query(Client).filter(
        Client.phone_number == phone,
        Client.is_active.is_(True),
    ).order_by(Client.created_at).all()
    for client in candidates:
        if verify_password(password, client.password_hash):
            return client
    return None


def reset_password(db: Session, client: Client) -> str:
    """Issue a new temporary password and revoke existing sessions."""
    password = generate_temporary_password()
    client.password_hash = hash_password(password)
    client.token_version += 1
    db.commit()
    db.refresh(client)
    return password


# =============================================================================
# CRUD
# =============================================================================

def get_client(db: Session, client_id: UUID) -> Client | None:
    return db.get(Client, client_id)


def get_client_by_number(db: Session, client_number: str) -> Client | None:
    return db.query(Client).filter(
        func.upper(Client.client_number) == client_number.upper()
    ).first()


def list_clients(db: Session, q: str | None = None, is_active: bool | None = None):
    """Client query ordered by name (caller paginates)."""
    query = db.query(Client)
    if is_active is not None:
        query = query.filter(Client.is_active == is_active)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            Client.full_name.ilike(pattern),
            Client.client_number.ilike(pattern),
            Client.phone_number.ilike(pattern),
            Client.email.ilike(pattern),
        ))
    return query.order_by(Client.full_name, Client.created_at)


def create_client(db: Session, data: ClientCreate) -> tuple[Client, str]:
    """
    Create a client with a generated temporary password.

    Returns:
        (client, temporary_password) - the password is not stored in clear.

    Raises:
        DuplicateClientError: client_number already in use
        ValueError: invalid phone number
    """
    if data.client_number:
        client_number = data.client_number.strip().upper()
        if get_client_by_number(db, client_number):
            raise DuplicateClientError(f"Client ID '{client_number}' already exists")
    else:
        client_number = generate_client_number(db)

    password = generate_temporary_password()
    client = Client(
        client_number=client_number,
        password_hash=hash_password(password),
        full_name=normalize_name(data.full_name),
        phone_number=normalize_phone(data.phone_number),
        email=normalize_email(data.email),
        address=data.address,
        date_of_birth=data.date_of_birth,
        emergency_contact=data.emergency_contact,
        emergency_phone=normalize_phone(data.emergency_phone),
        is_active=data.is_active,
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    logger.info("Client %s created", client.id)
    return client, password


def update_client(db: Session, client: Client, data: ClientUpdate) -> Client:
    """
    Apply a partial update.

    Raises:
        ValueError: null for a required field, or an invalid phone number
    """
    updates = data.model_dump(exclude_unset=True)
    for field in REQUIRED_CLIENT_FIELDS:
        if field in updates and updates[field] is None:
            raise ValueError(f"{field} cannot be null")
    if "full_name" in updates:
        updates["full_name"] = normalize_name(updates["full_name"])
        if not updates["full_name"]:
            raise ValueError("full_name cannot be blank")
    if "phone_number" in updates:
        updates["phone_number"] = normalize_phone(updates["phone_number"])
    if "emergency_phone" in updates:
        updates["emergency_phone"] = normalize_phone(updates["emergency_phone"])
    if "email" in updates:
        updates["email"] = normalize_email(updates["email"])

    for key, value in updates.items():
        setattr(client, key, value)
    if updates.get("is_active") is False:
        # Deactivation ends any open portal session
        client.token_version += 1

    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, client: Client) -> None:
    """Delete a client and (via cascade) all dependent records."""
    db.delete(client)
    db.commit()


# =============================================================================
# Locations
# =============================================================================

def location_status(missed_check_ins: int) -> ClientLocationStatus:
    if missed_check_ins > 2:
        return ClientLocationStatus.MISSING
    if missed_check_ins > 0:
        return ClientLocationStatus.OVERDUE
    return ClientLocationStatus.COMPLIANT


def get_client_locations(db: Session) -> list[dict[str, Any]]:
    """Latest check-in with coordinates for every active client."""
    clients = db.query(Client).filter(Client.is_active.is_(True)).order_by(Client.full_name).all()

    latest_time = db.query(
        CheckIn.client_id,
        func.max(CheckIn.check_in_time).label("latest"),
    ).filter(
        CheckIn.latitude.is_not(None),
    ).group_by(CheckIn.client_id).subquery()

    latest_check_ins = db.query(CheckIn).join(
        latest_time,
        (CheckIn.client_id == latest_time.c.client_id)
        & (CheckIn.check_in_time == latest_time.c.latest),
    ).all()
    by_client = {c.client_id: c for c in latest_check_ins}

    locations = []
    for client in clients:
        check_in = by_client.get(client.id)
        locations.append({
            "client_id": client.id,
            "client_number": client.client_number,
            "full_name": client.full_name,
            "latitude": check_in.latitude if check_in else None,
            "longitude": check_in.longitude if check_in else None,
            "last_check_in_at": client.last_check_in_at,
            "missed_check_ins": client.missed_check_ins,
            "within_jurisdiction": check_in.within_jurisdiction if check_in else None,
            "status": location_status(client.missed_check_ins),
        })
    return locations


# =============================================================================
# Bulk CSV import
# =============================================================================

# CSV header -> Client field
BULK_COLUMNS = {
    "Full Name": "full_name",
    "Phone Number": "phone_number",
    "Email": "email",
    "Address": "address",
    "Date of Birth (YYYY-MM-DD)": "date_of_birth",
    "Emergency Contact Name": "emergency_contact",
    "Emergency Contact Phone": "emergency_phone",
    "Is Active (TRUE/FALSE)": "is_active",
}
REQUIRED_BULK_COLUMNS = ("Full Name", "Phone Number", "Email")


def parse_csv_file(file_content: bytes | str) -> list[dict[str, str]]:
    """Parse CSV content into header-keyed rows."""
    if isinstance(file_content, bytes):
        file_content = file_content.decode("utf-8-sig")  # Handle BOM
    reader = csv.DictReader(io.StringIO(file_content))
    if not reader.fieldnames:
        return []
    missing = [c for c in REQUIRED_BULK_COLUMNS if c not in reader.fieldnames]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")
    return list(reader)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("true", "yes", "1", "y"):
        return True
    if normalized in ("false", "no", "0", "n"):
        return False
    raise ValueError("must be TRUE or FALSE")


def _validate_bulk_row(raw: dict[str, str]) -> tuple[dict[str, Any], list[tuple[str, str]]]:
    """Return (clean values, [(field, message), ...])."""
    values: dict[str, Any] = {}
    errors: list[tuple[str, str]] = []

    def cell(column: str) -> str:
        return (raw.get(column) or "").strip()

    for column in REQUIRED_BULK_COLUMNS:
        if not cell(column):
            errors.append((BULK_COLUMNS[column], f"{column} is required"))

    values["full_name"] = normalize_name(cell("Full Name"))
    values["address"] = cell("Address") or None
    values["emergency_contact"] = cell("Emergency Contact Name") or None

    email = normalize_email(cell("Email"))
    if email and "@" not in email:
        errors.append(("email", "Invalid email address"))
    values["email"] = email

    for column in ("Phone Number", "Emergency Contact Phone"):
        field = BULK_COLUMNS[column]
        try:
            values[field] = normalize_phone(cell(column))
        except ValueError as e:
            errors.append((field, str(e)))

    dob = cell("Date of Birth (YYYY-MM-DD)")
    if dob:
        try:
            values["date_of_birth"] = date.fromisoformat(dob)
        except ValueError:
            errors.append(("date_of_birth", "Date of Birth must be YYYY-MM-DD"))

    active = cell("Is Active (TRUE/FALSE)")
    if active:
        try:
            values["is_active"] = _parse_bool(active)
        except ValueError as e:
            errors.append(("is_active", f"Is Active {e}"))

    return values, errors


def bulk_upload_clients(db: Session, file_content: bytes | str) -> dict[str, Any]:
    """
    Create or update clients from a CSV export.

    Rows match existing clients by email (update); otherwise a client is
    created with a generated client number and no password; an admin
    issues one through reset-password.
    Row numbers in errors count the header as row 1. Valid rows are
    committed even when other rows fail.
    """
    rows = parse_csv_file(file_content)
    result = {"processed": 0, "created": 0, "updated": 0, "errors": []}

    for index, raw in enumerate(rows):
        row_number = index + 2
        if not any((v or "").strip() for v in raw.values() if isinstance(v, str)):
            continue
        result["processed"] += 1

        values, errors = _validate_bulk_row(raw)
        if errors:
            result["errors"].extend(
                {"row": row_number, "field": field, "message": message}
                for field, message in errors
            )
            continue

        existing = db.query(Client).filter(Client.email == values["email"]).first()
        if existing:
            for key, value in values.items():
                if value is not None:
                    setattr(existing, key, value)
            result["updated"] += 1
        else:
            db.add(Client(
                client_number=generate_client_number(db),
                **{k: v for k, v in values.items() if v is not None},
            ))
            result["created"] += 1
        db.flush()

    db.commit()
    result["success"] = not result["errors"]
    logger.info(
        "Bulk client upload: %s processed, %s created, %s updated, %s errors",
        result["processed"], result["created"], result["updated"], len(result["errors"]),
    )
    return result
