"""Monthly settlement engine.

Turns one month's incomes, fixed costs, private expenses, opening balance and
prepayments into a ``MonthComputed`` snapshot.

Prepayment model:
    - at month start "me" prepays the expected fixed cost share to the partner
    - during the month the partner fronts private expenses, which add to my debt
    - at month end: balance = opening + private + fixed share - prepayment

Rounding happens at every aggregation step (each item, each total), never once
at the end. Accumulation is done with explicit loops because ``sum()`` on
floats uses compensated summation on recent interpreters, which would change
results at the cent level.

Every function here is pure: no I/O, no shared state, no exceptions for
numeric input.
"""

from __future__ import annotations
from typing import Iterable

from fairshare.models.domain import (
    FixedCategory,
    FixedItem,
    IncomeShares,
    MonthComputed,
    MonthInputs,
    PrivateExpense,
    SplitMode,
)
from fairshare.services.money import round_money


def calculate_income_shares(income_me: float, income_partner: float) -> IncomeShares:
    """Split responsibility proportionally to net income.

    Falls back to 50/50 when nobody has income yet, and to 100/0 when only
    one side earns. Shares are not rounded.
    """
    if income_me <= 0 and income_partner <= 0:
        return IncomeShares(0.5, 0.5)
    if income_me > 0 and income_partner <= 0:
        return IncomeShares(1.0, 0.0)
    if income_me <= 0 and income_partner > 0:
        return IncomeShares(0.0, 1.0)
    share_me = income_me / (income_me + income_partner)
    return IncomeShares(share_me, 1 - share_me)


def sum_fixed_costs(categories: Iterable[FixedCategory]) -> float:
    """Raw, unsplit total of every fixed item."""
    total = 0.0
    for category in categories:
        category_sum = 0.0
        for item in category.items:
            category_sum += item.amount
        total += category_sum
    return round_money(total)


def sum_private_expenses(expenses: Iterable[PrivateExpense]) -> float:
    total = 0.0
    for expense in expenses:
        total += expense.amount
    return round_money(total)


def calculate_my_share_for_fixed_item(item: FixedItem, share_me: float) -> float:
    """My part of one fixed item, rounded to cents."""
    mode = item.split_mode
    if mode == SplitMode.ME:
        my_share = item.amount
    elif mode == SplitMode.PARTNER:
        my_share = 0.0
    else:
        # INCOME, and any retired mode (``half``) that skipped normalization
        my_share = item.amount * share_me
    return round_money(my_share)


def calculate_my_fixed_share(categories: Iterable[FixedCategory], share_me: float) -> float:
    """Sum of per-item shares, including items carried fully by me."""
    total = 0.0
    for category in categories:
        category_sum = 0.0
        for item in category.items:
            category_sum += calculate_my_share_for_fixed_item(item, share_me)
        total += category_sum
    return round_money(total)


def calculate_month(inputs: MonthInputs) -> MonthComputed:
    shares = calculate_income_shares(inputs.me.net_income, inputs.partner.net_income)

    total_fixed_costs = sum_fixed_costs(inputs.fixed_categories)
    my_fixed_share = calculate_my_fixed_share(inputs.fixed_categories, shares.share_me)
    private_added = sum_private_expenses(inputs.private_expenses)

    # Items in mode "me" count fully: the partner fronted them from the
    # shared account. "partner" items contribute nothing.
    fixed_cost_due = my_fixed_share

    balance_start = round_money(inputs.private_balance_start)
    prepayment = round_money(inputs.prepayment_this_month)

    shortfall = round_money(max(0.0, fixed_cost_due - prepayment))
    overpayment = round_money(max(0.0, prepayment - fixed_cost_due))

    total_due_before = round_money(balance_start + private_added + fixed_cost_due)
    balance_end = round_money(total_due_before - prepayment)

    return MonthComputed(
        share_me=shares.share_me,
        share_partner=shares.share_partner,
        total_fixed_costs=total_fixed_costs,
        my_fixed_share=my_fixed_share,
        private_added_this_month=private_added,
        private_balance_start=balance_start,
        private_balance_end=balance_end,
        prepayment_this_month=prepayment,
        fixed_cost_due=fixed_cost_due,
        fixed_cost_shortfall=shortfall,
        fixed_cost_overpayment=overpayment,
        private_total_due_before_prepayment=total_due_before,
        recommended_prepayment=fixed_cost_due,
    )


__all__ = [
    "calculate_income_shares",
    "sum_fixed_costs",
    "sum_private_expenses",
    "calculate_my_share_for_fixed_item",
    "calculate_my_fixed_share",
    "calculate_month",
]
