"""Expenses router - agency operating expenses (feeds the profit figures)."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from securebond.core.deps import get_db, require_csrf_header, require_roles
from securebond.db.enums import AuditEventType, ROLES_CAN_MANAGE_CASES
from securebond.schemas import ExpenseCreate, ExpenseRead
from securebond.schemas.auth import UserSession
from securebond.services import audit_service, expense_service

router = APIRouter(prefix="/api/expenses", tags=["expenses"])

require_admin = require_roles(list(ROLES_CAN_MANAGE_CASES))


@router.get("", response_model=list[ExpenseRead])
def list_expenses(
    category: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    return expense_service.list_expenses(db, category=category).all()


@router.post(
    "",
    response_model=ExpenseRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_expense(
    data: ExpenseCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    expense = expense_service.create_expense(db, data, session.principal_id)
    audit_service.log_for_session(
        db, session, AuditEventType.EXPENSE_CREATED,
        target_type="expense", target_id=expense.id,
        details={"amount": str(expense.amount), "category": expense.category},
        request=request,
    )
    return expense


@router.delete(
    "/{expense_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_admin),
):
    expense = expense_service.get_expense(db, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    expense_service.delete_expense(db, expense)
