from typing import List

from fastapi import APIRouter, Depends, Query

from fairshare.db.dal import Database
from fairshare.models.month import MonthCreateIn, MonthOut
from fairshare.routers.deps import get_db
from fairshare.services import months as month_service
from fairshare.services.overview import month_out

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/months", response_model=List[MonthOut], summary="All months, newest first")
async def list_months(
    limit: int = Query(24, ge=1, le=240),
    db: Database = Depends(get_db),
):
    return [month_out(m) for m in db.list_months(limit)]


@router.post(
    "/months",
    response_model=MonthOut,
    summary="Create (or reopen) a month and make it the only open one",
)
async def create_month(payload: MonthCreateIn, db: Database = Depends(get_db)):
    return month_out(month_service.create_or_open_month(db, payload.year, payload.month))


@router.post(
    "/months/{month_id}/open",
    response_model=MonthOut,
    summary="Switch the open month",
)
async def open_month(month_id: int, db: Database = Depends(get_db)):
    return month_out(month_service.switch_month(db, month_id))
