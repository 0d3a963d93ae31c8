from typing import List

from fastapi import APIRouter, Depends

from fairshare.db.dal import Database
from fairshare.models.expense import (
    PrivateExpenseIn,
    PrivateExpenseOut,
    PrivateExpenseUpdateIn,
)
from fairshare.routers.deps import get_db, not_found
from fairshare.services.months import ensure_month_open, require_month
from fairshare.services.overview import expense_out

router = APIRouter(tags=["private-expenses"])


def _open_expense(db: Database, expense_id: int) -> dict:
    row = db.get_private_expense(expense_id)
    if not row:
        raise not_found("expense not found")
    ensure_month_open(db, int(row["month_id"]))
    return row


@router.get(
    "/months/{month_id}/expenses",
    response_model=List[PrivateExpenseOut],
    summary="Private expenses of a month, newest date first",
)
async def list_expenses(month_id: int, db: Database = Depends(get_db)):
    require_month(db, month_id)
    return [expense_out(r) for r in db.list_private_expenses(month_id)]


@router.post(
    "/months/{month_id}/expenses",
    response_model=PrivateExpenseOut,
    status_code=201,
    summary="Record an expense the partner paid for me",
)
async def create_expense(
    month_id: int,
    payload: PrivateExpenseIn,
    db: Database = Depends(get_db),
):
    ensure_month_open(db, month_id)
    expense_id = db.create_private_expense(
        month_id,
        payload.date,
        payload.description,
        payload.amount,
        created_by=payload.created_by,
    )
    return expense_out(db.get_private_expense(expense_id))


@router.put(
    "/expenses/{expense_id}",
    response_model=PrivateExpenseOut,
    summary="Replace date, description and amount of an expense",
)
async def update_expense(
    expense_id: int,
    payload: PrivateExpenseUpdateIn,
    db: Database = Depends(get_db),
):
    _open_expense(db, expense_id)
    db.update_private_expense(expense_id, payload.date, payload.description, payload.amount)
    return expense_out(db.get_private_expense(expense_id))


@router.delete("/expenses/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: int, db: Database = Depends(get_db)):
    _open_expense(db, expense_id)
    db.delete_private_expense(expense_id)
    return None
