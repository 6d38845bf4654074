"""Bond service."""

import secrets
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from securebond.db.enums import BondStatus
from securebond.db.models import Bond, Client
from securebond.schemas.bond import BondCreate, BondUpdate


def generate_bond_number(db: Session) -> str:
    """`BB-<year>-<6 hex>`, retried until unused."""
    year = datetime.now(timezone.utc).year
    while True:
        candidate = f"BB-{year}-{secrets.token_hex(3).upper()}"
        if not db.query(Bond.id).filter(Bond.bond_number == candidate).first():
            return candidate


def create_bond(db: Session, data: BondCreate) -> Bond:
    if not db.get(Client, data.client_id):
        raise ValueError("Client not found")

    bond = Bond(
        client_id=data.client_id,
        bond_number=generate_bond_number(db),
        bond_amount=data.bond_amount,
        total_owed=data.total_owed,
        down_payment=data.down_payment,
        remaining_balance=data.total_owed - data.down_payment,
        premium_rate=data.premium_rate,
        bond_type=data.bond_type.value,
        court_location=data.court_location,
        case_number=data.case_number,
        charges=data.charges,
        cosigner_name=data.cosigner_name,
        cosigner_phone=data.cosigner_phone,
        notes=data.notes,
    )
    db.add(bond)
    db.commit()
    db.refresh(bond)
    return bond


def get_bond(db: Session, bond_id: UUID) -> Bond | None:
    return db.get(Bond, bond_id)


def list_bonds(db: Session, client_id: UUID | None = None, status: BondStatus | None = None):
    query = db.query(Bond)
    if client_id:
        query = query.filter(Bond.client_id == client_id)
    if status:
        query = query.filter(Bond.status == status.value)
    return query.order_by(Bond.issued_at.desc())


def update_bond(db: Session, bond: Bond, data: BondUpdate) -> Bond:
    for key, value in data.model_dump(exclude_unset=True).items():
        if key == "status" and value is not None:
            value = value.value
        setattr(bond, key, value)
    db.commit()
    db.refresh(bond)
    return bond


def delete_bond(db: Session, bond: Bond) -> None:
    db.delete(bond)
    db.commit()
