from fastapi import APIRouter, Depends, HTTPException

from detailing_admin.core.sessions import require_admin_session
from detailing_admin.schemas.expense import ExpenseCreated, ExpenseIn, ExpensesOut
from detailing_admin.services.expenses import (
    ExpenseSource,
    ExpenseValidationError,
    build_expense,
    get_expense_source,
)

router = APIRouter(prefix="/api", tags=["expenses"], dependencies=[Depends(require_admin_session)])


@router.get("/expenses", response_model=ExpensesOut)
async def list_expenses(source: ExpenseSource = Depends(get_expense_source)):
    return ExpensesOut(items=await source.list_expenses())


@router.post("/expenses", response_model=ExpenseCreated)
async def create_expense(payload: ExpenseIn, source: ExpenseSource = Depends(get_expense_source)):
    try:
        expense = build_expense(payload)
    except ExpenseValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    expense_id = await source.add_expense(expense)
    return ExpenseCreated(insertedId=expense_id, item={**expense, "_id": expense_id})
