"""Read model for the month dashboard.

Collects a month, its entries, the computed settlement, the recent closed
months and the history preview into one ``MonthOverviewOut``. The row
mappers below are shared with the routers so that every endpoint renders
stored rows the same way.
"""

from __future__ import annotations
from typing import Any, Dict

from fairshare.core.config import Settings
from fairshare.db.dal import Database
from fairshare.models.fixed_cost import (
    CategoryOut,
    FixedItemOut,
    TemplateCategoryOut,
    TemplateItemOut,
)
from fairshare.models.expense import PrivateExpenseOut
from fairshare.models.history import HistoryOut
from fairshare.models.month import (
    ClosedMonthOut,
    IncomeOut,
    MonthOut,
    MonthOverviewOut,
    ProfileOut,
)
from fairshare.models.settlement import SettlementOut
from fairshare.models.transfer import TransferOut
from fairshare.services.history import get_month_history
from fairshare.services.months import compute_month, require_month


def month_out(row: Dict[str, Any]) -> MonthOut:
    return MonthOut.model_validate(row)


def item_out(row: Dict[str, Any]) -> FixedItemOut:
    return FixedItemOut(
        id=row["id"],
        category_id=row["category_id"],
        label=row["label"],
        amount=row["amount"],
        split_mode=row["split_mode"],
        created_by=row.get("created_by"),
        from_template=row.get("template_item_id") is not None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def category_out(row: Dict[str, Any]) -> CategoryOut:
    return CategoryOut(
        id=row["id"],
        month_id=row["month_id"],
        label=row["label"],
        sort_order=row["sort_order"],
        from_template=row.get("template_category_id") is not None,
        items=[item_out(i) for i in row.get("items", [])],
    )


def expense_out(row: Dict[str, Any]) -> PrivateExpenseOut:
    return PrivateExpenseOut.model_validate(row)


def transfer_out(row: Dict[str, Any]) -> TransferOut:
    return TransferOut.model_validate(row)


def template_category_out(row: Dict[str, Any]) -> TemplateCategoryOut:
    return TemplateCategoryOut(
        id=row["id"],
        label=row["label"],
        sort_order=row["sort_order"],
        items=[TemplateItemOut.model_validate(i) for i in row.get("items", [])],
    )


def build_month_overview(db: Database, month_id: int, settings: Settings) -> MonthOverviewOut:
    month = require_month(db, month_id)
    computed = compute_month(db, month_id)
    history = get_month_history(db, month_id, preview_size=settings.history_preview_size)
    return MonthOverviewOut(
        month=month_out(month),
        profiles=[ProfileOut.model_validate(p) for p in db.list_profiles()],
        incomes=[IncomeOut.model_validate(i) for i in db.ensure_month_incomes(month_id)],
        fixed_categories=[category_out(c) for c in db.list_fixed_categories(month_id)],
        private_expenses=[expense_out(e) for e in db.list_private_expenses(month_id)],
        transfers=[transfer_out(t) for t in db.list_transfers(month_id)],
        computed=SettlementOut.model_validate(computed),
        closed_months=[
            ClosedMonthOut.model_validate(m)
            for m in db.list_closed_months(settings.closed_months_limit)
        ],
        history=HistoryOut.model_validate(history),
    )
