"""Database schema DDL definitions and initialization utilities.

Tables:
  - profiles: the two household members ('me' | 'partner') and display names
  - months: one row per calendar month with lifecycle status and balances
  - month_incomes: net income per month and role
  - fixed_categories / fixed_items: recurring costs of a month
  - private_expenses: one-off expenses fronted by the partner
  - transfers: prepayments made towards the month's fixed costs
  - template_categories / template_items: month-independent fixed cost
    defaults copied into every new month
  - metadata: key/value store (schema version etc.)
"""

from __future__ import annotations
import sqlite3
from typing import Mapping, Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

PROFILES_DDL = f"""
CREATE TABLE IF NOT EXISTS profiles (
    role TEXT PRIMARY KEY CHECK (role IN ('me','partner')),
    name TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

MONTHS_DDL = f"""
CREATE TABLE IF NOT EXISTS months (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    year INTEGER NOT NULL,
    month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
    status TEXT NOT NULL DEFAULT 'open' CHECK (status IN ('open','closed')),
    private_balance_start REAL NOT NULL DEFAULT 0,
    private_balance_end REAL, -- set on close
    closed_at TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    UNIQUE(year, month)
);
"""

MONTH_INCOMES_DDL = f"""
CREATE TABLE IF NOT EXISTS month_incomes (
    month_id INTEGER NOT NULL,
    role TEXT NOT NULL CHECK (role IN ('me','partner')),
    net_income REAL NOT NULL DEFAULT 0,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    PRIMARY KEY (month_id, role),
    FOREIGN KEY (month_id) REFERENCES months(id) ON DELETE CASCADE
);
"""

FIXED_CATEGORIES_DDL = f"""
CREATE TABLE IF NOT EXISTS fixed_categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    month_id INTEGER NOT NULL,
    label TEXT NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    template_category_id INTEGER, -- set when copied from a template
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (month_id) REFERENCES months(id) ON DELETE CASCADE
);
"""

FIXED_ITEMS_DDL = f"""
CREATE TABLE IF NOT EXISTS fixed_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category_id INTEGER NOT NULL,
    label TEXT NOT NULL,
    amount REAL NOT NULL DEFAULT 0,
    split_mode TEXT NOT NULL DEFAULT 'income', -- 'income' | 'me' | 'partner' (legacy 'half')
    created_by TEXT, -- role of the person who entered it
    template_item_id INTEGER,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (category_id) REFERENCES fixed_categories(id) ON DELETE CASCADE
);
"""

PRIVATE_EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS private_expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    month_id INTEGER NOT NULL,
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    description TEXT NOT NULL,
    amount REAL NOT NULL,
    created_by TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (month_id) REFERENCES months(id) ON DELETE CASCADE
);
"""

TRANSFERS_DDL = f"""
CREATE TABLE IF NOT EXISTS transfers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    month_id INTEGER NOT NULL,
    amount REAL NOT NULL,
    description TEXT,
    created_by TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (month_id) REFERENCES months(id) ON DELETE CASCADE
);
"""

TEMPLATE_CATEGORIES_DDL = f"""
CREATE TABLE IF NOT EXISTS template_categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    label TEXT NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

TEMPLATE_ITEMS_DDL = f"""
CREATE TABLE IF NOT EXISTS template_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    template_category_id INTEGER NOT NULL,
    label TEXT NOT NULL,
    amount REAL NOT NULL DEFAULT 0,
    split_mode TEXT NOT NULL DEFAULT 'income',
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    FOREIGN KEY (template_category_id) REFERENCES template_categories(id) ON DELETE CASCADE
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

MONTHS_STATUS_INDEX_DDL = "CREATE INDEX IF NOT EXISTS idx_months_status ON months(status, year, month);"
CATEGORIES_MONTH_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_fixed_categories_month ON fixed_categories(month_id, sort_order);"
)
ITEMS_CATEGORY_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_fixed_items_category ON fixed_items(category_id);"
)
EXPENSES_MONTH_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_private_expenses_month ON private_expenses(month_id, date);"
)
TRANSFERS_MONTH_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_transfers_month ON transfers(month_id);"
)

DDL_ORDER: Sequence[str] = (
    PROFILES_DDL,
    MONTHS_DDL,
    MONTH_INCOMES_DDL,
    FIXED_CATEGORIES_DDL,
    FIXED_ITEMS_DDL,
    PRIVATE_EXPENSES_DDL,
    TRANSFERS_DDL,
    TEMPLATE_CATEGORIES_DDL,
    TEMPLATE_ITEMS_DDL,
    METADATA_DDL,
)

INDEX_DDL: Sequence[str] = (
    MONTHS_STATUS_INDEX_DDL,
    CATEGORIES_MONTH_INDEX_DDL,
    ITEMS_CATEGORY_INDEX_DDL,
    EXPENSES_MONTH_INDEX_DDL,
    TRANSFERS_MONTH_INDEX_DDL,
)

DEFAULT_PROFILE_NAMES: Mapping[str, str] = {"me": "Me", "partner": "Partner"}


def init_db(path: Path, profile_names: Mapping[str, str] | None = None) -> None:
    """Create all tables idempotently and make sure both profiles exist.

    Parameters
    ----------
    path: Path to SQLite database file.
    profile_names: Display names for a fresh install; existing profiles keep
        their names.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        _ensure_profiles(cur, profile_names or DEFAULT_PROFILE_NAMES)
        for ddl in INDEX_DDL:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()


def _ensure_profiles(cur: sqlite3.Cursor, names: Mapping[str, str]) -> None:
    for role in ("me", "partner"):
        cur.execute(
            "INSERT OR IGNORE INTO profiles (role, name) VALUES (?, ?)",
            (role, names.get(role) or DEFAULT_PROFILE_NAMES[role]),
        )
