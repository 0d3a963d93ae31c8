from datetime import date

from fairshare.services.history import get_month_history
from fairshare.services.months import get_or_create_current_month


def _set_created_at(db, table, row_id, stamp):
    with db._connect() as conn:
        conn.execute(f"UPDATE {table} SET created_at = ? WHERE id = ?", (stamp, row_id))
        conn.commit()


def test_history_merges_entry_types_newest_first(db, today):
    month_id = get_or_create_current_month(db, today=today)["id"]
    category_id = db.create_fixed_category(month_id, "Home")
    rent = db.create_fixed_item(category_id, "Rent", 900, created_by="me")
    food = db.create_private_expense(month_id, date(2025, 3, 2), "Groceries", 42.5, created_by="partner")
    cinema = db.create_private_expense(month_id, date(2025, 3, 1), "Cinema", 18, created_by=None)

    _set_created_at(db, "fixed_items", rent, "2025-03-01T08:00:00.000Z")
    _set_created_at(db, "private_expenses", food, "2025-03-02T09:00:00.000Z")
    _set_created_at(db, "private_expenses", cinema, "2025-03-03T20:00:00.000Z")

    result = get_month_history(db, month_id)
    assert result.total_count == 3
    assert result.full_month_list is None
    assert [(p.type, p.description) for p in result.latest] == [
        ("private_expense", "Cinema"),
        ("private_expense", "Groceries"),
        ("fixed_item", "Rent"),
    ]
    groceries = result.latest[1]
    assert groceries.amount == 42.5
    assert groceries.created_by_name == "Sam"
    assert result.latest[0].created_by_name is None
    assert result.latest[2].created_by_name == "Alex"


def test_history_preview_and_full_list(db, today):
    month_id = get_or_create_current_month(db, today=today)["id"]
    for n in range(7):
        expense_id = db.create_private_expense(month_id, date(2025, 3, 1), f"Entry {n}", n)
        _set_created_at(db, "private_expenses", expense_id, f"2025-03-01T10:00:0{n}.000Z")

    preview = get_month_history(db, month_id)
    assert len(preview.latest) == 5
    assert preview.total_count == 7
    assert preview.latest[0].description == "Entry 6"

    full = get_month_history(db, month_id, include_full=True, preview_size=2)
    assert len(full.latest) == 2
    assert [p.description for p in full.full_month_list][-1] == "Entry 0"
    assert len(full.full_month_list) == 7


def test_history_of_empty_month(db, today):
    month_id = get_or_create_current_month(db, today=today)["id"]
    result = get_month_history(db, month_id, include_full=True)
    assert result.latest == []
    assert result.total_count == 0
    assert result.full_month_list == []
