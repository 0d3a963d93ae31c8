from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date, datetime

from .constants import Role


class PrivateExpenseIn(BaseModel):
    """A one-off expense fronted by the partner; always adds to my debt."""

    date: date
    description: str = Field(..., max_length=200)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    created_by: Optional[Role] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description cannot be empty")
        return v.strip()


class PrivateExpenseUpdateIn(BaseModel):
    """Full replacement of date, description and amount.

    The author (created_by) is kept from the original entry.
    """

    date: date
    description: str = Field(..., max_length=200)
    amount: float = Field(..., ge=0, allow_inf_nan=False)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description cannot be empty")
        return v.strip()


class PrivateExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    month_id: int
    date: date
    description: str
    amount: float
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
