from __future__ import annotations
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
)

from .constants import Role, SPLIT_MODES
from .domain import SplitMode


def _split_mode(value: Any) -> SplitMode:
    # 'half' is accepted from older clients and stored as 'income'
    raw = value.value if isinstance(value, SplitMode) else str(value).strip().lower()
    if raw not in SPLIT_MODES:
        raise ValueError(f"Invalid split mode: {value}")
    return SplitMode.normalize(raw)


def _label(value: str) -> str:
    if not value.strip():
        raise ValueError("label cannot be empty")
    return value.strip()


Label = Annotated[str, Field(max_length=100), AfterValidator(_label)]
SplitModeIn = Annotated[SplitMode, BeforeValidator(_split_mode)]
# Rows written before the 'half' retirement may still carry it
StoredSplitMode = Annotated[SplitMode, BeforeValidator(SplitMode.normalize)]
Amount = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class CategoryIn(BaseModel):
    label: Label


class FixedItemIn(BaseModel):
    label: Label
    amount: Amount
    split_mode: SplitModeIn = SplitMode.INCOME
    created_by: Optional[Role] = None


class FixedItemUpdateIn(BaseModel):
    """Partial update; omitted fields keep their value, an empty body changes nothing."""

    label: Optional[Label] = None
    amount: Optional[Amount] = None
    split_mode: Optional[SplitModeIn] = None


class FixedItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    label: str
    amount: float
    split_mode: StoredSplitMode
    created_by: Optional[str] = None
    from_template: bool = False
    created_at: datetime
    updated_at: datetime


class CategoryOut(BaseModel):
    id: int
    month_id: int
    label: str
    sort_order: int
    from_template: bool = False
    items: List[FixedItemOut] = []


class TemplateItemIn(BaseModel):
    label: Label
    amount: Amount
    split_mode: SplitModeIn = SplitMode.INCOME


class TemplateItemUpdateIn(FixedItemUpdateIn):
    pass


class TemplateItemOut(BaseModel):
    id: int
    template_category_id: int
    label: str
    amount: float
    split_mode: StoredSplitMode
    sort_order: int


class TemplateCategoryOut(BaseModel):
    id: int
    label: str
    sort_order: int
    items: List[TemplateItemOut] = []
