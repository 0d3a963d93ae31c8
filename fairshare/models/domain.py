"""Plain value types consumed and produced by the settlement engine.

These are deliberately free of validation: the engine accepts any numeric
input and never raises. Range checks live in the API models
(``fairshare.models.month`` and friends) before a ``MonthInputs`` is built.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Tuple


class PersonRole(str, Enum):
    ME = "me"
    PARTNER = "partner"


class SplitMode(str, Enum):
    """How responsibility for a fixed cost is divided.

    - INCOME: proportional to net income
    - ME: carried fully by me
    - PARTNER: carried fully by the partner
    """

    INCOME = "income"
    ME = "me"
    PARTNER = "partner"

    @classmethod
    def normalize(cls, value: Any) -> "SplitMode":
        """Map stored values (including the retired ``half``) onto the enum.

        Anything unrecognized falls back to INCOME.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.INCOME


# Values accepted from clients and storage; ``half`` is read as INCOME.
LEGACY_SPLIT_MODES: Tuple[str, ...] = ("half",)
ACCEPTED_SPLIT_MODES: Tuple[str, ...] = tuple(m.value for m in SplitMode) + LEGACY_SPLIT_MODES


@dataclass(frozen=True)
class Person:
    role: PersonRole
    name: str
    net_income: float = 0.0


@dataclass(frozen=True)
class FixedItem:
    id: str
    label: str
    amount: float
    split_mode: SplitMode = SplitMode.INCOME


@dataclass(frozen=True)
class FixedCategory:
    id: str
    label: str
    items: Tuple[FixedItem, ...] = ()


@dataclass(frozen=True)
class PrivateExpense:
    id: str
    date_iso: str
    description: str
    amount: float


@dataclass(frozen=True)
class MonthInputs:
    """Everything one settlement run needs.

    private_balance_start is signed: positive means "me" owes the partner.
    prepayment_this_month is the sum of the month's transfers.
    """

    me: Person
    partner: Person
    fixed_categories: Tuple[FixedCategory, ...] = ()
    private_expenses: Tuple[PrivateExpense, ...] = ()
    private_balance_start: float = 0.0
    prepayment_this_month: float = 0.0


class IncomeShares(NamedTuple):
    share_me: float
    share_partner: float


@dataclass(frozen=True)
class MonthComputed:
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


__all__ = [
    "PersonRole",
    "SplitMode",
    "ACCEPTED_SPLIT_MODES",
    "Person",
    "FixedItem",
    "FixedCategory",
    "PrivateExpense",
    "MonthInputs",
    "IncomeShares",
    "MonthComputed",
]
