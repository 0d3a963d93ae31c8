"""Data Access Layer for the household split tracker.

Responsibilities
----------------
- Provide CRUD helpers for months, incomes, fixed costs, private expenses,
  transfers and fixed-cost templates.
- Keep month lifecycle writes (create with carried balance, close, reset,
  delete) atomic: each public method runs in its own connection and commits
  once.
- Return plain dict rows; mapping to API models happens in the routers.

Lifecycle rules that depend on more than one table (closed-month guards,
settlement on close) live in ``fairshare.services.months``.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Any, Dict, Iterable, List, Mapping, Optional
from datetime import date

from fairshare.core.errors import MonthStateError
from fairshare.services.money import round_money

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
ROLES = ("me", "partner")
_UNSET = object()


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @staticmethod
    def _fetch_one(cur: sqlite3.Cursor, sql: str, params: Iterable[Any] = ()) -> Optional[Dict[str, Any]]:
        cur.execute(sql, tuple(params))
        row = cur.fetchone()
        return dict(row) if row else None

    @staticmethod
    def _fetch_all(cur: sqlite3.Cursor, sql: str, params: Iterable[Any] = ()) -> List[Dict[str, Any]]:
        cur.execute(sql, tuple(params))
        return [dict(r) for r in cur.fetchall()]

    # ------------------------------------------------------------------
    # Profiles
    def list_profiles(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(), "SELECT role, name FROM profiles ORDER BY role ASC"
            )

    def get_profile_names(self) -> Dict[str, str]:
        return {p["role"]: p["name"] for p in self.list_profiles()}

    # ------------------------------------------------------------------
    # Months
    def get_month(self, month_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM months WHERE id = ?", (month_id,)
            )

    def find_month(self, year: int, month: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(),
                "SELECT * FROM months WHERE year = ? AND month = ?",
                (year, month),
            )

    def list_months(self, limit: int = 24) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(),
                "SELECT * FROM months ORDER BY year DESC, month DESC LIMIT ?",
                (limit,),
            )

    def list_closed_months(self, limit: int = 12) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(),
                """
                SELECT id, year, month, private_balance_start, private_balance_end, closed_at
                FROM months
                WHERE status = 'closed'
                ORDER BY year DESC, month DESC
                LIMIT ?
                """,
                (limit,),
            )

    def latest_closed_balance(self) -> float:
        """Ending balance of the most recent closed month, 0 when none."""
        with self._connect() as conn:
            row = self._fetch_one(
                conn.cursor(),
                """
                SELECT private_balance_end FROM months
                WHERE status = 'closed'
                ORDER BY year DESC, month DESC
                LIMIT 1
                """,
            )
        if not row or row["private_balance_end"] is None:
            return 0.0
        return float(row["private_balance_end"])

    def balance_before(self, year: int, month: int) -> float:
        """Ending balance of the latest month strictly before (year, month)."""
        with self._connect() as conn:
            row = self._fetch_one(
                conn.cursor(),
                """
                SELECT private_balance_end FROM months
                WHERE year < ? OR (year = ? AND month < ?)
                ORDER BY year DESC, month DESC
                LIMIT 1
                """,
                (year, year, month),
            )
        if not row or row["private_balance_end"] is None:
            return 0.0
        return float(row["private_balance_end"])

    def create_month(
        self,
        year: int,
        month: int,
        private_balance_start: float = 0.0,
        copy_templates: bool = True,
    ) -> int:
        """Insert an open month with both income rows and, optionally, the
        fixed-cost templates copied in. Runs as a single transaction."""
        if not 1 <= month <= 12:
            raise ValueError("month must be between 1 and 12")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO months (year, month, status, private_balance_start, created_at, updated_at)
                VALUES (?, ?, 'open', ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (year, month, round_money(private_balance_start)),
            )
            month_id = int(cur.lastrowid)
            self._ensure_incomes(cur, month_id)
            if copy_templates:
                self._copy_templates(cur, month_id)
            conn.commit()
            return month_id

    def open_exclusively(self, month_id: int) -> None:
        """Close every other open month and open ``month_id``."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT id FROM months WHERE id = ?", (month_id,))
            if not cur.fetchone():
                raise ValueError("Month not found")
            cur.execute(
                f"""
                UPDATE months SET status = 'closed', updated_at = ({UTC_NOW_SQL})
                WHERE status = 'open' AND id != ?
                """,
                (month_id,),
            )
            cur.execute(
                f"UPDATE months SET status = 'open', updated_at = ({UTC_NOW_SQL}) WHERE id = ?",
                (month_id,),
            )
            conn.commit()

    def close_all_open_months(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE months SET status = 'closed', updated_at = ({UTC_NOW_SQL}) WHERE status = 'open'"
            )
            conn.commit()
            return cur.rowcount

    def close_month(self, month_id: int, private_balance_end: float) -> None:
        """Mark an open month closed and record its ending balance."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE months
                SET status = 'closed', private_balance_end = ?,
                    closed_at = ({UTC_NOW_SQL}), updated_at = ({UTC_NOW_SQL})
                WHERE id = ? AND status = 'open'
                """,
                (round_money(private_balance_end), month_id),
            )
            if cur.rowcount == 0:
                raise MonthStateError("Only an open month can be closed")
            conn.commit()

    def set_balance_start(self, month_id: int, value: float) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE months SET private_balance_start = ?, updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (round_money(value), month_id),
            )
            if cur.rowcount == 0:
                raise ValueError("Month not found")
            conn.commit()

    def reset_month(self, month_id: int) -> None:
        """Wipe a month's entries and balances, keeping the month row open."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT status FROM months WHERE id = ?", (month_id,))
            row = cur.fetchone()
            if not row:
                raise ValueError("Month not found")
            if row["status"] != "open":
                raise MonthStateError("Only an open month can be reset")
            cur.execute("DELETE FROM fixed_categories WHERE month_id = ?", (month_id,))
            cur.execute("DELETE FROM private_expenses WHERE month_id = ?", (month_id,))
            cur.execute("DELETE FROM transfers WHERE month_id = ?", (month_id,))
            cur.execute(
                f"UPDATE month_incomes SET net_income = 0, updated_at = ({UTC_NOW_SQL}) WHERE month_id = ?",
                (month_id,),
            )
            cur.execute(
                f"""
                UPDATE months
                SET private_balance_start = 0, private_balance_end = NULL,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (month_id,),
            )
            conn.commit()

    def delete_closed_month(self, month_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT status FROM months WHERE id = ?", (month_id,))
            row = cur.fetchone()
            if not row:
                raise ValueError("Month not found")
            if row["status"] != "closed":
                raise MonthStateError("Can only delete closed months")
            # child rows go via ON DELETE CASCADE
            cur.execute("DELETE FROM months WHERE id = ? AND status = 'closed'", (month_id,))
            conn.commit()

    def delete_all_months(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM months")
            conn.commit()
            return cur.rowcount

    # ------------------------------------------------------------------
    # Incomes
    def _ensure_incomes(self, cur: sqlite3.Cursor, month_id: int) -> None:
        for role in ROLES:
            cur.execute(
                "INSERT OR IGNORE INTO month_incomes (month_id, role, net_income) VALUES (?, ?, 0)",
                (month_id, role),
            )

    def ensure_month_incomes(self, month_id: int) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            self._ensure_incomes(cur, month_id)
            conn.commit()
            return self._fetch_all(
                cur,
                "SELECT month_id, role, net_income FROM month_incomes WHERE month_id = ? ORDER BY role",
                (month_id,),
            )

    def list_month_incomes(self, month_id: int) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(),
                "SELECT month_id, role, net_income FROM month_incomes WHERE month_id = ? ORDER BY role",
                (month_id,),
            )

    def set_month_incomes(self, month_id: int, incomes: Mapping[str, float]) -> None:
        for role, value in incomes.items():
            if role not in ROLES:
                raise ValueError(f"Unsupported role '{role}'")
            if value < 0:
                raise ValueError("Net income must be >= 0")
        with self._connect() as conn:
            cur = conn.cursor()
            for role, value in incomes.items():
                cur.execute(
                    f"""
                    INSERT INTO month_incomes (month_id, role, net_income, updated_at)
                    VALUES (?, ?, ?, ({UTC_NOW_SQL}))
                    ON CONFLICT(month_id, role) DO UPDATE SET
                        net_income = excluded.net_income,
                        updated_at = ({UTC_NOW_SQL})
                    """,
                    (month_id, role, round_money(value)),
                )
            conn.commit()

    # ------------------------------------------------------------------
    # Fixed costs
    def list_fixed_categories(self, month_id: int) -> List[Dict[str, Any]]:
        """Categories of a month with their items nested under ``items``."""
        with self._connect() as conn:
            cur = conn.cursor()
            categories = self._fetch_all(
                cur,
                """
                SELECT * FROM fixed_categories
                WHERE month_id = ?
                ORDER BY sort_order ASC, created_at ASC, id ASC
                """,
                (month_id,),
            )
            if not categories:
                return []
            items = self._fetch_all(
                cur,
                """
                SELECT i.* FROM fixed_items i
                JOIN fixed_categories c ON c.id = i.category_id
                WHERE c.month_id = ?
                ORDER BY i.created_at ASC, i.id ASC
                """,
                (month_id,),
            )
        by_category: Dict[int, List[Dict[str, Any]]] = {}
        for item in items:
            by_category.setdefault(item["category_id"], []).append(item)
        for category in categories:
            category["items"] = by_category.get(category["id"], [])
        return categories

    def get_fixed_category(self, category_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM fixed_categories WHERE id = ?", (category_id,)
            )

    def create_fixed_category(self, month_id: int, label: str) -> int:
        label = label.strip()
        if not label:
            raise ValueError("Label cannot be empty")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT COALESCE(MAX(sort_order) + 1, 0) FROM fixed_categories WHERE month_id = ?",
                (month_id,),
            )
            next_sort = int(cur.fetchone()[0])
            cur.execute(
                f"""
                INSERT INTO fixed_categories (month_id, label, sort_order, created_at, updated_at)
                VALUES (?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (month_id, label, next_sort),
            )
            conn.commit()
            return int(cur.lastrowid)

    def delete_fixed_category(self, category_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM fixed_categories WHERE id = ?", (category_id,))
            if cur.rowcount == 0:
                raise ValueError("Category not found")
            conn.commit()

    def get_fixed_item(self, item_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(),
                """
                SELECT i.*, c.month_id AS month_id FROM fixed_items i
                JOIN fixed_categories c ON c.id = i.category_id
                WHERE i.id = ?
                """,
                (item_id,),
            )

    def create_fixed_item(
        self,
        category_id: int,
        label: str,
        amount: float,
        split_mode: str = "income",
        created_by: Optional[str] = None,
    ) -> int:
        label = label.strip()
        if not label:
            raise ValueError("Label cannot be empty")
        if amount < 0:
            raise ValueError("Amount must be >= 0")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO fixed_items (category_id, label, amount, split_mode, created_by, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (category_id, label, round_money(amount), split_mode, created_by),
            )
            conn.commit()
            return int(cur.lastrowid)

    def update_fixed_item(
        self,
        item_id: int,
        *,
        label: Any = _UNSET,
        amount: Any = _UNSET,
        split_mode: Any = _UNSET,
    ) -> None:
        updates: List[str] = []
        params: List[Any] = []

        if label is not _UNSET:
            label = label.strip()
            if not label:
                raise ValueError("Label cannot be empty")
            updates.append("label = ?")
            params.append(label)
        if amount is not _UNSET:
            if amount < 0:
                raise ValueError("Amount must be >= 0")
            updates.append("amount = ?")
            params.append(round_money(amount))
        if split_mode is not _UNSET:
            updates.append("split_mode = ?")
            params.append(split_mode)

        if not updates:
            return

        updates.append(f"updated_at = ({UTC_NOW_SQL})")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE fixed_items SET {', '.join(updates)} WHERE id = ?",
                (*params, item_id),
            )
            if cur.rowcount == 0:
                raise ValueError("Item not found")
            conn.commit()

    def delete_fixed_item(self, item_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM fixed_items WHERE id = ?", (item_id,))
            if cur.rowcount == 0:
                raise ValueError("Item not found")
            conn.commit()

    # ------------------------------------------------------------------
    # Private expenses
    def list_private_expenses(self, month_id: int) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(),
                "SELECT * FROM private_expenses WHERE month_id = ? ORDER BY date DESC, id DESC",
                (month_id,),
            )

    def get_private_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM private_expenses WHERE id = ?", (expense_id,)
            )

    def create_private_expense(
        self,
        month_id: int,
        expense_date: date,
        description: str,
        amount: float,
        created_by: Optional[str] = None,
    ) -> int:
        if amount < 0:
            raise ValueError("Amount must be >= 0")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO private_expenses (month_id, date, description, amount, created_by, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (
                    month_id,
                    expense_date.isoformat(),
                    description.strip(),
                    round_money(amount),
                    created_by,
                ),
            )
            conn.commit()
            return int(cur.lastrowid)

    def update_private_expense(
        self, expense_id: int, expense_date: date, description: str, amount: float
    ) -> None:
        if amount < 0:
            raise ValueError("Amount must be >= 0")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE private_expenses
                SET date = ?, description = ?, amount = ?, updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (expense_date.isoformat(), description.strip(), round_money(amount), expense_id),
            )
            if cur.rowcount == 0:
                raise ValueError("Expense not found")
            conn.commit()

    def delete_private_expense(self, expense_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM private_expenses WHERE id = ?", (expense_id,))
            if cur.rowcount == 0:
                raise ValueError("Expense not found")
            conn.commit()

    # ------------------------------------------------------------------
    # Transfers
    def list_transfers(self, month_id: int) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_all(
                conn.cursor(),
                "SELECT * FROM transfers WHERE month_id = ? ORDER BY created_at DESC, id DESC",
                (month_id,),
            )

    def get_transfer(self, transfer_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM transfers WHERE id = ?", (transfer_id,)
            )

    def create_transfer(
        self,
        month_id: int,
        amount: float,
        description: Optional[str] = None,
        created_by: Optional[str] = "me",
    ) -> int:
        if amount < 0:
            raise ValueError("Amount must be >= 0")
        description = (description or "").strip() or None
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO transfers (month_id, amount, description, created_by, created_at)
                VALUES (?, ?, ?, ?, ({UTC_NOW_SQL}))
                """,
                (month_id, round_money(amount), description, created_by or "me"),
            )
            conn.commit()
            return int(cur.lastrowid)

    def delete_transfer(self, transfer_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM transfers WHERE id = ?", (transfer_id,))
            if cur.rowcount == 0:
                raise ValueError("Transfer not found")
            conn.commit()

    def total_transfers(self, month_id: int) -> float:
        total = 0.0
        for row in self.list_transfers(month_id):
            total += float(row["amount"])
        return round_money(total)

    # ------------------------------------------------------------------
    # Fixed-cost templates
    def list_template_categories(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            return self._list_templates(conn.cursor())

    def _list_templates(self, cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
        categories = self._fetch_all(
            cur, "SELECT * FROM template_categories ORDER BY sort_order ASC, id ASC"
        )
        items = self._fetch_all(
            cur, "SELECT * FROM template_items ORDER BY sort_order ASC, id ASC"
        )
        by_category: Dict[int, List[Dict[str, Any]]] = {}
        for item in items:
            by_category.setdefault(item["template_category_id"], []).append(item)
        for category in categories:
            category["items"] = by_category.get(category["id"], [])
        return categories

    def get_template_category(self, category_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM template_categories WHERE id = ?", (category_id,)
            )

    def get_template_item(self, item_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            return self._fetch_one(
                conn.cursor(), "SELECT * FROM template_items WHERE id = ?", (item_id,)
            )

    def create_template_category(self, label: str) -> int:
        label = label.strip()
        if not label:
            raise ValueError("Label cannot be empty")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COALESCE(MAX(sort_order), 0) + 1 FROM template_categories")
            next_sort = int(cur.fetchone()[0])
            cur.execute(
                f"""
                INSERT INTO template_categories (label, sort_order, created_at, updated_at)
                VALUES (?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (label, next_sort),
            )
            conn.commit()
            return int(cur.lastrowid)

    def create_template_item(
        self, category_id: int, label: str, amount: float, split_mode: str = "income"
    ) -> int:
        label = label.strip()
        if not label:
            raise ValueError("Label cannot be empty")
        if amount < 0:
            raise ValueError("Amount must be >= 0")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT COALESCE(MAX(sort_order), 0) + 1 FROM template_items WHERE template_category_id = ?",
                (category_id,),
            )
            next_sort = int(cur.fetchone()[0])
            cur.execute(
                f"""
                INSERT INTO template_items (
                    template_category_id, label, amount, split_mode, sort_order, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (category_id, label, round_money(amount), split_mode, next_sort),
            )
            conn.commit()
            return int(cur.lastrowid)

    def update_template_item(
        self,
        item_id: int,
        *,
        label: Any = _UNSET,
        amount: Any = _UNSET,
        split_mode: Any = _UNSET,
    ) -> None:
        updates: List[str] = []
        params: List[Any] = []
        if label is not _UNSET:
            label = label.strip()
            if not label:
                raise ValueError("Label cannot be empty")
            updates.append("label = ?")
            params.append(label)
        if amount is not _UNSET:
            if amount < 0:
                raise ValueError("Amount must be >= 0")
            updates.append("amount = ?")
            params.append(round_money(amount))
        if split_mode is not _UNSET:
            updates.append("split_mode = ?")
            params.append(split_mode)
        updates.append(f"updated_at = ({UTC_NOW_SQL})")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"UPDATE template_items SET {', '.join(updates)} WHERE id = ?",
                (*params, item_id),
            )
            if cur.rowcount == 0:
                raise ValueError("Template item not found")
            conn.commit()

    def delete_template_category(self, category_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM template_categories WHERE id = ?", (category_id,))
            if cur.rowcount == 0:
                raise ValueError("Template category not found")
            conn.commit()

    def delete_template_item(self, item_id: int) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM template_items WHERE id = ?", (item_id,))
            if cur.rowcount == 0:
                raise ValueError("Template item not found")
            conn.commit()

    def copy_templates_to_month(self, month_id: int) -> int:
        """Copy every template category and item into a month; returns the
        number of categories created."""
        with self._connect() as conn:
            cur = conn.cursor()
            copied = self._copy_templates(cur, month_id)
            conn.commit()
            return copied

    def _copy_templates(self, cur: sqlite3.Cursor, month_id: int) -> int:
        templates = self._list_templates(cur)
        for sort_order, template in enumerate(templates):
            cur.execute(
                f"""
                INSERT INTO fixed_categories (
                    month_id, label, sort_order, template_category_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (month_id, template["label"], sort_order, template["id"]),
            )
            category_id = int(cur.lastrowid)
            for item in template["items"]:
                cur.execute(
                    f"""
                    INSERT INTO fixed_items (
                        category_id, label, amount, split_mode, template_item_id, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                    """,
                    (category_id, item["label"], item["amount"], item["split_mode"], item["id"]),
                )
        return len(templates)
