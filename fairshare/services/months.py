"""Month lifecycle service.

A month is ``open`` while entries are being collected and ``closed`` once
settled. Closing runs the settlement engine and stores the ending balance;
the next month created picks that balance up as its starting balance (the
carryover). Writes against a closed month are rejected with
``MonthClosedError``.

All functions take the ``Database`` explicitly; nothing here caches an
"active" month or profile between calls.
"""

from __future__ import annotations
import logging
import math
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from fairshare.core.errors import MonthClosedError, MonthNotFoundError, MonthStateError
from fairshare.db.dal import Database
from fairshare.models.domain import (
    FixedCategory,
    FixedItem,
    MonthComputed,
    MonthInputs,
    Person,
    PersonRole,
    PrivateExpense,
    SplitMode,
)
from fairshare.services.money import round_money
from fairshare.services.settlement import calculate_month

logger = logging.getLogger("fairshare.months")


def require_month(db: Database, month_id: int) -> Dict[str, Any]:
    month = db.get_month(month_id)
    if month is None:
        raise MonthNotFoundError(f"month {month_id} not found")
    return month


def ensure_month_open(db: Database, month_id: int) -> Dict[str, Any]:
    month = require_month(db, month_id)
    if month["status"] != "open":
        raise MonthClosedError(month_id)
    return month


def get_or_create_current_month(db: Database, today: Optional[date] = None) -> Dict[str, Any]:
    """Return the month row for today's calendar month, creating it when missing.

    A new month starts with the ending balance of the most recent closed
    month (0 when there is none) and a copy of the fixed-cost templates.
    """
    today = today or date.today()
    existing = db.find_month(today.year, today.month)
    if existing:
        return existing
    start = db.latest_closed_balance()
    month_id = db.create_month(today.year, today.month, private_balance_start=start)
    logger.info(
        "created month",
        extra={"context": {"month_id": month_id, "year": today.year, "month": today.month, "balance_start": start}},
    )
    return require_month(db, month_id)


def create_or_open_month(db: Database, year: int, month: int) -> Dict[str, Any]:
    """Make (year, month) the single open month, creating it when missing.

    An existing month that is not open gets reopened and every other open
    month is closed. A missing month starts with the ending balance of the
    latest month strictly before it.
    """
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    existing = db.find_month(year, month)
    if existing:
        if existing["status"] != "open":
            db.open_exclusively(int(existing["id"]))
        return require_month(db, int(existing["id"]))

    start = db.balance_before(year, month)
    db.close_all_open_months()
    month_id = db.create_month(year, month, private_balance_start=start)
    logger.info(
        "created month manually",
        extra={"context": {"month_id": month_id, "year": year, "month": month, "balance_start": start}},
    )
    return require_month(db, month_id)


def switch_month(db: Database, month_id: int) -> Dict[str, Any]:
    require_month(db, month_id)
    db.open_exclusively(month_id)
    return require_month(db, month_id)


def update_incomes(db: Database, month_id: int, incomes: Mapping[str, float]) -> List[Dict[str, Any]]:
    for value in incomes.values():
        if not math.isfinite(value):
            raise ValueError("Net income must be a valid number")
    ensure_month_open(db, month_id)
    db.set_month_incomes(month_id, incomes)
    return db.list_month_incomes(month_id)


def update_balance_start(db: Database, month_id: int, value: float) -> Dict[str, Any]:
    if not math.isfinite(value):
        raise ValueError("Private balance start must be a valid number")
    ensure_month_open(db, month_id)
    db.set_balance_start(month_id, value)
    return require_month(db, month_id)


def build_month_inputs(db: Database, month_id: int) -> MonthInputs:
    """Assemble the settlement input for one stored month.

    This is the ingestion boundary: stored split modes (including the
    retired ``half``) are normalized here, and the prepayment is the
    rounded sum of the month's transfers.
    """
    month = require_month(db, month_id)
    names = db.get_profile_names()
    incomes = {r["role"]: float(r["net_income"] or 0) for r in db.ensure_month_incomes(month_id)}

    categories = tuple(
        FixedCategory(
            id=str(c["id"]),
            label=c["label"],
            items=tuple(
                FixedItem(
                    id=str(i["id"]),
                    label=i["label"],
                    amount=float(i["amount"] or 0),
                    split_mode=SplitMode.normalize(i["split_mode"]),
                )
                for i in c["items"]
            ),
        )
        for c in db.list_fixed_categories(month_id)
    )
    expenses = tuple(
        PrivateExpense(
            id=str(e["id"]),
            date_iso=e["date"],
            description=e["description"],
            amount=float(e["amount"] or 0),
        )
        for e in db.list_private_expenses(month_id)
    )
    return MonthInputs(
        me=Person(PersonRole.ME, names.get("me", "Me"), incomes.get("me", 0.0)),
        partner=Person(PersonRole.PARTNER, names.get("partner", "Partner"), incomes.get("partner", 0.0)),
        fixed_categories=categories,
        private_expenses=expenses,
        private_balance_start=float(month["private_balance_start"] or 0),
        prepayment_this_month=db.total_transfers(month_id),
    )


def compute_month(db: Database, month_id: int) -> MonthComputed:
    return calculate_month(build_month_inputs(db, month_id))


def close_month(db: Database, month_id: int) -> Dict[str, Any]:
    """Settle an open month and store its ending balance for the carryover."""
    ensure_month_open(db, month_id)
    computed = compute_month(db, month_id)
    balance_end = round_money(computed.private_balance_end)
    db.close_month(month_id, balance_end)
    logger.info(
        "closed month",
        extra={"context": {"month_id": month_id, "balance_end": balance_end}},
    )
    return require_month(db, month_id)


def reset_open_month(db: Database, month_id: int) -> Dict[str, Any]:
    ensure_month_open(db, month_id)
    db.reset_month(month_id)
    logger.warning("reset month", extra={"context": {"month_id": month_id}})
    return require_month(db, month_id)


def delete_closed_month(db: Database, month_id: int) -> None:
    month = require_month(db, month_id)
    if month["status"] != "closed":
        raise MonthStateError("Can only delete closed months")
    db.delete_closed_month(month_id)
    logger.warning("deleted closed month", extra={"context": {"month_id": month_id}})


def delete_all_months(db: Database) -> int:
    deleted = db.delete_all_months()
    logger.warning("deleted all months", extra={"context": {"count": deleted}})
    return deleted


__all__ = [
    "MonthNotFoundError",
    "require_month",
    "ensure_month_open",
    "get_or_create_current_month",
    "create_or_open_month",
    "switch_month",
    "update_incomes",
    "update_balance_start",
    "build_month_inputs",
    "compute_month",
    "close_month",
    "reset_open_month",
    "delete_closed_month",
    "delete_all_months",
]
