from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from fairshare.core.config import Settings
from fairshare.db.dal import Database
from fairshare.models.history import HistoryOut
from fairshare.models.month import (
    BalanceStartIn,
    ClosedMonthOut,
    IncomeOut,
    IncomesUpdateIn,
    MonthOut,
    MonthOverviewOut,
)
from fairshare.models.settlement import SettlementOut
from fairshare.routers.deps import get_app_settings, get_db, require_dev_environment
from fairshare.services import months as month_service
from fairshare.services.history import get_month_history
from fairshare.services.overview import build_month_overview, month_out

router = APIRouter(prefix="/months", tags=["months"])


@router.get(
    "/current",
    response_model=MonthOverviewOut,
    summary="Overview of the current calendar month (created on first access)",
)
async def current_month(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    month = month_service.get_or_create_current_month(db)
    return build_month_overview(db, int(month["id"]), settings)


@router.get(
    "/archive",
    response_model=List[ClosedMonthOut],
    summary="Closed months, newest first",
)
async def archive(
    limit: int = Query(12, ge=1, description="Maximum number of months"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    rows = db.list_closed_months(min(limit, settings.archive_limit))
    return [ClosedMonthOut.model_validate(r) for r in rows]


@router.delete(
    "",
    summary="Delete every month and its entries (development only)",
    dependencies=[Depends(require_dev_environment)],
)
async def delete_all(db: Database = Depends(get_db)):
    deleted = month_service.delete_all_months(db)
    return {"deleted": deleted}


@router.get("/{month_id}", response_model=MonthOverviewOut, summary="Month overview")
async def get_month(
    month_id: int,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return build_month_overview(db, month_id, settings)


@router.get(
    "/{month_id}/settlement",
    response_model=SettlementOut,
    summary="Computed settlement of a month",
)
async def get_settlement(month_id: int, db: Database = Depends(get_db)):
    return SettlementOut.model_validate(month_service.compute_month(db, month_id))


@router.put(
    "/{month_id}/incomes",
    response_model=List[IncomeOut],
    summary="Set the net incomes of an open month",
)
async def put_incomes(
    month_id: int,
    payload: IncomesUpdateIn,
    db: Database = Depends(get_db),
):
    rows = month_service.update_incomes(db, month_id, payload.as_mapping())
    return [IncomeOut.model_validate(r) for r in rows]


@router.put(
    "/{month_id}/balance-start",
    response_model=MonthOut,
    summary="Correct the carried-over private balance of an open month",
)
async def put_balance_start(
    month_id: int,
    payload: BalanceStartIn,
    db: Database = Depends(get_db),
):
    return month_out(month_service.update_balance_start(db, month_id, payload.private_balance_start))


@router.post(
    "/{month_id}/close",
    response_model=MonthOut,
    summary="Settle and close an open month",
)
async def close(month_id: int, db: Database = Depends(get_db)):
    return month_out(month_service.close_month(db, month_id))


@router.post(
    "/{month_id}/reset",
    response_model=MonthOut,
    summary="Wipe an open month's entries (development only)",
    dependencies=[Depends(require_dev_environment)],
)
async def reset(month_id: int, db: Database = Depends(get_db)):
    return month_out(month_service.reset_open_month(db, month_id))


@router.delete(
    "/{month_id}",
    status_code=204,
    summary="Delete a closed month (development only)",
    dependencies=[Depends(require_dev_environment)],
)
async def delete_month(month_id: int, db: Database = Depends(get_db)):
    month_service.delete_closed_month(db, month_id)
    return None


@router.get(
    "/{month_id}/history",
    response_model=HistoryOut,
    summary="Latest entries of a month, optionally the full list",
)
async def history(
    month_id: int,
    full: bool = Query(False, description="Include every position of the month"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    month_service.require_month(db, month_id)
    result = get_month_history(
        db, month_id, include_full=full, preview_size=settings.history_preview_size
    )
    return HistoryOut.model_validate(result)
