"""Month history: the most recent entries of a month across entry types.

Private expenses and fixed items are merged into one newest-first list of
positions; callers get a short preview plus the total count, and the full
list on request.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fairshare.db.dal import Database

DEFAULT_PREVIEW_SIZE = 5


@dataclass(frozen=True)
class HistoryPosition:
    id: int
    type: str  # 'private_expense' | 'fixed_item'
    description: str
    amount: float
    created_at: str
    created_by: Optional[str]
    created_by_name: Optional[str]


@dataclass(frozen=True)
class HistoryResult:
    latest: List[HistoryPosition]
    total_count: int
    full_month_list: Optional[List[HistoryPosition]] = field(default=None)


def _position(row: Dict[str, Any], kind: str, description: str, names: Dict[str, str]) -> HistoryPosition:
    created_by = row.get("created_by")
    return HistoryPosition(
        id=int(row["id"]),
        type=kind,
        description=description,
        amount=float(row["amount"]),
        created_at=row["created_at"],
        created_by=created_by,
        created_by_name=names.get(created_by) if created_by else None,
    )


def get_month_history(
    db: Database,
    month_id: int,
    include_full: bool = False,
    preview_size: int = DEFAULT_PREVIEW_SIZE,
) -> HistoryResult:
    names = db.get_profile_names()
    positions = [
        _position(e, "private_expense", e["description"], names)
        for e in db.list_private_expenses(month_id)
    ]
    for category in db.list_fixed_categories(month_id):
        positions.extend(
            _position(i, "fixed_item", i["label"], names) for i in category["items"]
        )
    # ISO timestamps sort lexicographically; id breaks ties within a millisecond
    positions.sort(key=lambda p: (p.created_at, p.id), reverse=True)
    return HistoryResult(
        latest=positions[:preview_size],
        total_count=len(positions),
        full_month_list=positions if include_full else None,
    )


__all__ = ["HistoryPosition", "HistoryResult", "get_month_history", "DEFAULT_PREVIEW_SIZE"]
