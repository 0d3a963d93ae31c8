from fastapi import APIRouter, Depends

from fairshare.db.dal import Database
from fairshare.models.transfer import TransferIn, TransferListOut, TransferOut
from fairshare.routers.deps import get_db, not_found
from fairshare.services.months import ensure_month_open, require_month
from fairshare.services.overview import transfer_out

router = APIRouter(tags=["transfers"])


@router.get(
    "/months/{month_id}/transfers",
    response_model=TransferListOut,
    summary="Prepayment transfers of a month with their rounded total",
)
async def list_transfers(month_id: int, db: Database = Depends(get_db)):
    require_month(db, month_id)
    return TransferListOut(
        transfers=[transfer_out(t) for t in db.list_transfers(month_id)],
        total=db.total_transfers(month_id),
    )


@router.post(
    "/months/{month_id}/transfers",
    response_model=TransferOut,
    status_code=201,
    summary="Record a prepayment towards the month's fixed costs",
)
async def create_transfer(
    month_id: int,
    payload: TransferIn,
    db: Database = Depends(get_db),
):
    ensure_month_open(db, month_id)
    transfer_id = db.create_transfer(
        month_id, payload.amount, payload.description, created_by=payload.created_by
    )
    return transfer_out(db.get_transfer(transfer_id))


@router.delete("/transfers/{transfer_id}", status_code=204, summary="Delete a transfer")
async def delete_transfer(transfer_id: int, db: Database = Depends(get_db)):
    row = db.get_transfer(transfer_id)
    if not row:
        raise not_found("transfer not found")
    ensure_month_open(db, int(row["month_id"]))
    db.delete_transfer(transfer_id)
    return None
