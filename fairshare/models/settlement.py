from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .domain import (
    FixedCategory,
    FixedItem,
    MonthInputs,
    Person,
    PersonRole,
    PrivateExpense,
    SplitMode,
)
from .fixed_cost import Amount, Label, SplitModeIn


class PersonIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    net_income: Amount = 0.0


class PreviewItemIn(BaseModel):
    id: Optional[str] = None
    label: Label
    amount: Amount
    split_mode: SplitModeIn = SplitMode.INCOME


class PreviewCategoryIn(BaseModel):
    id: Optional[str] = None
    label: Label
    items: List[PreviewItemIn] = []


class PreviewExpenseIn(BaseModel):
    id: Optional[str] = None
    date: str = ""
    description: str = ""
    amount: Amount


class SettlementRequest(BaseModel):
    """Unsaved month contents for a stateless settlement preview."""

    me: PersonIn
    partner: PersonIn
    fixed_categories: List[PreviewCategoryIn] = []
    private_expenses: List[PreviewExpenseIn] = []
    private_balance_start: float = Field(0.0, allow_inf_nan=False)
    prepayment_this_month: Amount = 0.0

    def to_domain(self) -> MonthInputs:
        categories = tuple(
            FixedCategory(
                id=c.id or f"category-{ci}",
                label=c.label,
                items=tuple(
                    FixedItem(
                        id=i.id or f"item-{ci}-{ii}",
                        label=i.label,
                        amount=i.amount,
                        split_mode=i.split_mode,
                    )
                    for ii, i in enumerate(c.items)
                ),
            )
            for ci, c in enumerate(self.fixed_categories)
        )
        expenses = tuple(
            PrivateExpense(
                id=e.id or f"expense-{ei}",
                date_iso=e.date,
                description=e.description,
                amount=e.amount,
            )
            for ei, e in enumerate(self.private_expenses)
        )
        return MonthInputs(
            me=Person(PersonRole.ME, self.me.name, self.me.net_income),
            partner=Person(PersonRole.PARTNER, self.partner.name, self.partner.net_income),
            fixed_categories=categories,
            private_expenses=expenses,
            private_balance_start=self.private_balance_start,
            prepayment_this_month=self.prepayment_this_month,
        )


class SettlementOut(BaseModel):
    """Computed settlement of one month.

    private_balance_end is signed: positive means "me" still owes the
    partner, negative means the partner owes "me".
    """

    model_config = ConfigDict(from_attributes=True)

    share_me: float
    share_partner: float
    total_fixed_costs: float
    my_fixed_share: float
    private_added_this_month: float
    private_balance_start: float
    private_balance_end: float
    prepayment_this_month: float
    fixed_cost_due: float
    fixed_cost_shortfall: float
    fixed_cost_overpayment: float
    private_total_due_before_prepayment: float
    recommended_prepayment: float
