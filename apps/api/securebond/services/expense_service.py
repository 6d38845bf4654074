"""Expense service."""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from securebond.db.models import Expense
from securebond.schemas.expense import ExpenseCreate


def create_expense(db: Session, data: ExpenseCreate, user_id: UUID) -> Expense:
    expense = Expense(
        description=data.description,
        amount=data.amount,
        category=data.category,
        expense_date=data.expense_date or date.today(),
        created_by_user_id=user_id,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def list_expenses(db: Session, category: str | None = None):
    query = db.query(Expense)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.expense_date.desc(), Expense.created_at.desc())


def get_expense(db: Session, expense_id: UUID) -> Expense | None:
    return db.get(Expense, expense_id)


def delete_expense(db: Session, expense: Expense) -> None:
    db.delete(expense)
    db.commit()
