"""Payment service - recording and confirming client payments."""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from securebond.db.enums import BondStatus
from securebond.db.models import Bond, Payment
from securebond.schemas.payment import PaymentCreate

logger = logging.getLogger(__name__)


class PaymentAlreadyConfirmedError(ValueError):
    """Confirming twice would double-apply the amount to the bond."""


def create_payment(db: Session, client_id: UUID, data: PaymentCreate) -> Payment:
    """
    Record an unconfirmed payment.

    Raises:
        ValueError: bond_id does not belong to the client
    """
    if data.bond_id:
        bond = db.get(Bond, data.bond_id)
        if not bond or bond.client_id != client_id:
            raise ValueError("Bond not found for this client")

    payment = Payment(
        client_id=client_id,
        bond_id=data.bond_id,
        amount=data.amount,
        payment_date=data.payment_date or date.today(),
        payment_method=data.payment_method.value,
        receipt_image_url=data.receipt_image_url,
        notes=data.notes,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def get_payment(db: Session, payment_id: UUID) -> Payment | None:
    return db.get(Payment, payment_id)


def list_payments(
    db: Session,
    client_id: UUID | None = None,
    confirmed: bool | None = None,
):
    """Payment query, newest first (caller paginates)."""
    query = db.query(Payment)
    if client_id:
        query = query.filter(Payment.client_id == client_id)
    if confirmed is not None:
        query = query.filter(Payment.confirmed == confirmed)
    return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc())


def confirm_payment(db: Session, payment: Payment, user_id: UUID) -> Payment:
    """
    Confirm a payment and apply it to the linked bond.

    The bond balance is floored at zero; a bond paid off becomes completed.

    Raises:
        PaymentAlreadyConfirmedError: payment was confirmed before
    """
    if payment.confirmed:
        raise PaymentAlreadyConfirmedError("Payment already confirmed")

    payment.confirmed = True
    payment.confirmed_by_user_id = user_id
    payment.confirmed_at = datetime.now(timezone.utc)

    if payment.bond_id:
        bond = db.get(Bond, payment.bond_id)
        if bond:
            bond.remaining_balance = max(
                Decimal("0"), Decimal(bond.remaining_balance) - Decimal(payment.amount)
            )
            if bond.remaining_balance == 0 and bond.status == BondStatus.ACTIVE.value:
                bond.status = BondStatus.COMPLETED.value
                logger.info("Bond %s paid off", bond.id)

    db.commit()
    db.refresh(payment)
    return payment
