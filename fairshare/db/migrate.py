"""Database migration utilities.

Handles schema evolution by applying idempotent migrations keyed by an integer
`schema_version` stored in the metadata table. Each migration upgrades the
SQLite schema in-place while preserving user data.
"""

from __future__ import annotations
from pathlib import Path
import sqlite3
from typing import List, Mapping, Optional

from . import schema as schema_def
from .schema import init_db

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schema_version"


def _get_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,))
        row = cur.fetchone()
        if row:
            return int(row[0])
    except sqlite3.OperationalError:
        # metadata table may not exist yet (first run before init_db)
        return None
    return None


def apply_migrations(
    db_path: Path, profile_names: Mapping[str, str] | None = None
) -> int:
    """Apply required migrations and return resulting schema version."""
    init_db(db_path, profile_names)
    conn = sqlite3.connect(db_path)
    try:
        version = _get_schema_version(conn) or 1
        if version < 2:
            _migrate_to_v2(conn)
            version = 2
        _set_schema_version(conn, version)
        conn.commit()
        return version
    finally:
        conn.close()


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    cur = conn.cursor()
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _migrate_to_v2(conn: sqlite3.Connection) -> None:
    """Upgrade schema to version 2 (retire the 'half' split mode).

    Installs from before v2 may lack the ``created_by`` / template link
    columns; those are added, and stored 'half' items are rewritten to
    'income', which is how the settlement engine has read them since.
    """
    cur = conn.cursor()
    try:
        _add_missing_column(cur, "fixed_items", "created_by", "TEXT")
        _add_missing_column(cur, "fixed_items", "template_item_id", "INTEGER")
        _add_missing_column(cur, "fixed_categories", "template_category_id", "INTEGER")
        _add_missing_column(cur, "private_expenses", "created_by", "TEXT")
        _add_missing_column(cur, "transfers", "created_by", "TEXT")
        for table in ("fixed_items", "template_items"):
            cur.execute(
                f"UPDATE {table} SET split_mode = 'income' WHERE split_mode = 'half'"
            )
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def _table_columns(cur: sqlite3.Cursor, table: str) -> List[str]:
    cur.execute(f"PRAGMA table_info({table})")
    return [r[1] for r in cur.fetchall()]


def _add_missing_column(cur: sqlite3.Cursor, table: str, column: str, decl: str) -> None:
    if column in _table_columns(cur, table):
        return
    cur.execute(f"ALTER TABLE {table} ADD COLUMN {column} {decl}")
