from datetime import date

import pytest
from fastapi.testclient import TestClient

from fairshare.core.config import Settings
from fairshare.db.dal import Database
from fairshare.db.migrate import apply_migrations
from fairshare.main import create_app
from fairshare.models.domain import (
    FixedCategory,
    FixedItem,
    MonthInputs,
    Person,
    PersonRole,
    PrivateExpense,
    SplitMode,
)


@pytest.fixture
def settings(tmp_path):
    s = Settings(
        data_dir=tmp_path,
        db_filename="test.sqlite3",
        environment="test",
        debug=False,
        me_name="Alex",
        partner_name="Sam",
        admin_password=None,
    )
    s.init_post_load()
    return s


@pytest.fixture
def db(settings):
    apply_migrations(settings.db_path, {"me": settings.me_name, "partner": settings.partner_name})
    return Database(settings.db_path)


@pytest.fixture
def client(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def today():
    return date(2025, 3, 15)


def make_inputs(
    income_me=2000.0,
    income_partner=3000.0,
    items=(),
    expenses=(),
    balance_start=0.0,
    prepayment=0.0,
):
    """Build MonthInputs from (amount, split_mode) pairs and expense amounts."""
    category = FixedCategory(
        id="c1",
        label="Household",
        items=tuple(
            FixedItem(id=f"i{n}", label=f"Item {n}", amount=amount, split_mode=SplitMode(mode))
            for n, (amount, mode) in enumerate(items)
        ),
    )
    return MonthInputs(
        me=Person(PersonRole.ME, "Alex", income_me),
        partner=Person(PersonRole.PARTNER, "Sam", income_partner),
        fixed_categories=(category,) if items else (),
        private_expenses=tuple(
            PrivateExpense(id=f"e{n}", date_iso="2025-03-01", description="groceries", amount=amount)
            for n, amount in enumerate(expenses)
        ),
        private_balance_start=balance_start,
        prepayment_this_month=prepayment,
    )


@pytest.fixture
def inputs():
    return make_inputs
