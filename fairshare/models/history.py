from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class HistoryPositionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: Literal["private_expense", "fixed_item"]
    description: str
    amount: float
    created_at: datetime
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None


class HistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latest: List[HistoryPositionOut]
    total_count: int
    full_month_list: Optional[List[HistoryPositionOut]] = None
