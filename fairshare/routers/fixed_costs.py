from fastapi import APIRouter, Depends

from fairshare.db.dal import Database
from fairshare.models.fixed_cost import (
    CategoryIn,
    CategoryOut,
    FixedItemIn,
    FixedItemOut,
    FixedItemUpdateIn,
)
from fairshare.routers.deps import get_db, not_found
from fairshare.services.months import ensure_month_open
from fairshare.services.overview import category_out, item_out

router = APIRouter(tags=["fixed-costs"])


# Helpers ----------------------------------------------------------


def _open_category(db: Database, category_id: int) -> dict:
    category = db.get_fixed_category(category_id)
    if not category:
        raise not_found("category not found")
    ensure_month_open(db, int(category["month_id"]))
    return category


def _open_item(db: Database, item_id: int) -> dict:
    item = db.get_fixed_item(item_id)
    if not item:
        raise not_found("item not found")
    ensure_month_open(db, int(item["month_id"]))
    return item


# Routes -----------------------------------------------------------
@router.post(
    "/months/{month_id}/categories",
    response_model=CategoryOut,
    status_code=201,
    summary="Add a fixed-cost category to an open month",
)
async def create_category(
    month_id: int,
    payload: CategoryIn,
    db: Database = Depends(get_db),
):
    ensure_month_open(db, month_id)
    category_id = db.create_fixed_category(month_id, payload.label)
    row = db.get_fixed_category(category_id)
    return category_out({**row, "items": []})


@router.delete(
    "/categories/{category_id}",
    status_code=204,
    summary="Delete a category together with its items",
)
async def delete_category(category_id: int, db: Database = Depends(get_db)):
    _open_category(db, category_id)
    db.delete_fixed_category(category_id)
    return None


@router.post(
    "/categories/{category_id}/items",
    response_model=FixedItemOut,
    status_code=201,
    summary="Add a fixed-cost item to a category",
)
async def create_item(
    category_id: int,
    payload: FixedItemIn,
    db: Database = Depends(get_db),
):
    _open_category(db, category_id)
    item_id = db.create_fixed_item(
        category_id,
        payload.label,
        payload.amount,
        split_mode=payload.split_mode.value,
        created_by=payload.created_by,
    )
    return item_out(db.get_fixed_item(item_id))


@router.patch(
    "/items/{item_id}",
    response_model=FixedItemOut,
    summary="Edit a fixed-cost item (partial)",
)
async def patch_item(
    item_id: int,
    payload: FixedItemUpdateIn,
    db: Database = Depends(get_db),
):
    _open_item(db, item_id)
    changes = payload.model_dump(exclude_none=True)
    if "split_mode" in changes:
        changes["split_mode"] = changes["split_mode"].value
    db.update_fixed_item(item_id, **changes)
    return item_out(db.get_fixed_item(item_id))


@router.delete("/items/{item_id}", status_code=204, summary="Delete a fixed-cost item")
async def delete_item(item_id: int, db: Database = Depends(get_db)):
    _open_item(db, item_id)
    db.delete_fixed_item(item_id)
    return None
