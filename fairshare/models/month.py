from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .expense import PrivateExpenseOut
from .fixed_cost import CategoryOut
from .history import HistoryOut
from .settlement import SettlementOut
from .transfer import TransferOut


class ProfileOut(BaseModel):
    role: Literal["me", "partner"]
    name: str


class MonthOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    month: int
    status: Literal["open", "closed"]
    private_balance_start: float
    private_balance_end: Optional[float] = None
    closed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ClosedMonthOut(BaseModel):
    id: int
    year: int
    month: int
    private_balance_start: float
    private_balance_end: Optional[float] = None
    closed_at: Optional[datetime] = None


class IncomeOut(BaseModel):
    role: Literal["me", "partner"]
    net_income: float


class IncomesUpdateIn(BaseModel):
    """Net incomes for the month; omitted roles are left unchanged."""

    me: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    partner: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def at_least_one(self) -> "IncomesUpdateIn":
        if self.me is None and self.partner is None:
            raise ValueError("No income values provided")
        return self

    def as_mapping(self) -> dict:
        return {
            role: value
            for role, value in (("me", self.me), ("partner", self.partner))
            if value is not None
        }


class BalanceStartIn(BaseModel):
    # Signed: positive means "me" owes the partner
    private_balance_start: float = Field(..., allow_inf_nan=False)


class MonthCreateIn(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)


class MonthOverviewOut(BaseModel):
    """Everything the dashboard shows for one month."""

    month: MonthOut
    profiles: List[ProfileOut]
    incomes: List[IncomeOut]
    fixed_categories: List[CategoryOut]
    private_expenses: List[PrivateExpenseOut]
    transfers: List[TransferOut]
    computed: SettlementOut
    closed_months: List[ClosedMonthOut]
    history: HistoryOut
