"""Fixed-cost templates: month-independent defaults copied into new months.

Editing a template never touches months that already exist.
"""

from typing import List

from fastapi import APIRouter, Depends

from fairshare.db.dal import Database
from fairshare.models.fixed_cost import (
    CategoryIn,
    TemplateCategoryOut,
    TemplateItemIn,
    TemplateItemOut,
    TemplateItemUpdateIn,
)
from fairshare.routers.deps import get_db, not_found
from fairshare.services.overview import template_category_out

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[TemplateCategoryOut], summary="List templates")
async def list_templates(db: Database = Depends(get_db)):
    return [template_category_out(c) for c in db.list_template_categories()]


@router.post(
    "",
    response_model=TemplateCategoryOut,
    status_code=201,
    summary="Create a template category",
)
async def create_template(payload: CategoryIn, db: Database = Depends(get_db)):
    category_id = db.create_template_category(payload.label)
    return template_category_out({**db.get_template_category(category_id), "items": []})


@router.post(
    "/{category_id}/items",
    response_model=TemplateItemOut,
    status_code=201,
    summary="Add an item to a template category",
)
async def create_template_item(
    category_id: int,
    payload: TemplateItemIn,
    db: Database = Depends(get_db),
):
    if not db.get_template_category(category_id):
        raise not_found("template category not found")
    item_id = db.create_template_item(
        category_id, payload.label, payload.amount, split_mode=payload.split_mode.value
    )
    return TemplateItemOut.model_validate(db.get_template_item(item_id))


@router.patch(
    "/items/{item_id}",
    response_model=TemplateItemOut,
    summary="Edit a template item (partial)",
)
async def patch_template_item(
    item_id: int,
    payload: TemplateItemUpdateIn,
    db: Database = Depends(get_db),
):
    if not db.get_template_item(item_id):
        raise not_found("template item not found")
    changes = payload.model_dump(exclude_none=True)
    if "split_mode" in changes:
        changes["split_mode"] = changes["split_mode"].value
    db.update_template_item(item_id, **changes)
    return TemplateItemOut.model_validate(db.get_template_item(item_id))


@router.delete("/items/{item_id}", status_code=204, summary="Delete a template item")
async def delete_template_item(item_id: int, db: Database = Depends(get_db)):
    try:
        db.delete_template_item(item_id)
    except ValueError:
        raise not_found("template item not found")
    return None


@router.delete(
    "/{category_id}",
    status_code=204,
    summary="Delete a template category with its items",
)
async def delete_template(category_id: int, db: Database = Depends(get_db)):
    try:
        db.delete_template_category(category_id)
    except ValueError:
        raise not_found("template category not found")
    return None
