import json

import pytest
from fastapi.testclient import TestClient

from fairshare.core.errors import server_error_handler
from fairshare.core.logging import JsonFormatter
from fairshare.main import create_app
from fairshare.routers.deps import auth_token


@pytest.fixture
def month(client):
    body = client.get("/months/current").json()
    return body["month"]["id"]


def test_root_and_health(client):
    assert client.get("/").json()["version"] == "0.1.0"
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["x-request-id"]


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"x-request-id": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"


def test_unknown_route_error_shape(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not_found", "detail": "No route for GET /nope"}


def test_current_month_overview(client):
    body = client.get("/months/current").json()
    assert body["month"]["status"] == "open"
    assert {p["role"]: p["name"] for p in body["profiles"]} == {"me": "Alex", "partner": "Sam"}
    assert body["computed"]["share_me"] == 0.5
    assert body["computed"]["private_balance_end"] == 0
    assert body["history"] == {"latest": [], "total_count": 0, "full_month_list": None}


def test_full_month_flow(client, month):
    assert client.put(f"/months/{month}/incomes", json={"me": 2000, "partner": 3000}).status_code == 200

    cat = client.post(f"/months/{month}/categories", json={"label": "  Home "})
    assert cat.status_code == 201
    assert cat.json()["label"] == "Home"
    category_id = cat.json()["id"]

    item = client.post(
        f"/categories/{category_id}/items",
        json={"label": "Rent", "amount": 1000, "split_mode": "income", "created_by": "partner"},
    )
    assert item.status_code == 201
    assert item.json()["split_mode"] == "income"

    transfer = client.post(f"/months/{month}/transfers", json={"amount": 300})
    assert transfer.status_code == 201
    assert transfer.json()["created_by"] == "me"

    expense = client.post(
        f"/months/{month}/expenses",
        json={"date": "2025-03-04", "description": "Groceries", "amount": 25.5, "created_by": "partner"},
    )
    assert expense.status_code == 201

    settlement = client.get(f"/months/{month}/settlement").json()
    assert settlement["fixed_cost_due"] == 400
    assert settlement["prepayment_this_month"] == 300
    assert settlement["fixed_cost_shortfall"] == 100
    assert settlement["private_balance_end"] == 125.5

    overview = client.get(f"/months/{month}").json()
    assert overview["history"]["total_count"] == 2
    assert len(overview["fixed_categories"][0]["items"]) == 1
    assert overview["transfers"][0]["amount"] == 300

    closed = client.post(f"/months/{month}/close")
    assert closed.status_code == 200
    assert closed.json()["private_balance_end"] == 125.5

    archive = client.get("/months/archive").json()
    assert [m["id"] for m in archive] == [month]


def test_legacy_half_split_mode_is_accepted(client, month):
    category_id = client.post(f"/months/{month}/categories", json={"label": "Old"}).json()["id"]
    resp = client.post(
        f"/categories/{category_id}/items",
        json={"label": "Internet", "amount": 40, "split_mode": "half"},
    )
    assert resp.status_code == 201
    assert resp.json()["split_mode"] == "income"


def test_patch_item(client, month):
    category_id = client.post(f"/months/{month}/categories", json={"label": "Car"}).json()["id"]
    item_id = client.post(
        f"/categories/{category_id}/items", json={"label": "Tax", "amount": 20}
    ).json()["id"]

    resp = client.patch(f"/items/{item_id}", json={"split_mode": "me", "amount": 22.5})
    assert resp.status_code == 200
    assert resp.json()["split_mode"] == "me"
    assert resp.json()["amount"] == 22.5
    assert resp.json()["label"] == "Tax"

    unchanged = client.patch(f"/items/{item_id}", json={})
    assert unchanged.status_code == 200
    assert unchanged.json()["amount"] == 22.5
    assert client.delete(f"/items/{item_id}").status_code == 204
    assert client.delete(f"/items/{item_id}").status_code == 404


def test_huge_amount_does_not_break_settlement(client, month):
    category_id = client.post(f"/months/{month}/categories", json={"label": "Estate"}).json()["id"]
    resp = client.post(
        f"/categories/{category_id}/items",
        json={"label": "Castle", "amount": 1e307, "split_mode": "me"},
    )
    assert resp.status_code == 201
    assert resp.json()["amount"] == 1e307

    settlement = client.get(f"/months/{month}/settlement")
    assert settlement.status_code == 200
    assert settlement.json()["fixed_cost_due"] == 1e307


@pytest.mark.parametrize(
    "payload",
    [
        {"label": "", "amount": 1},
        {"label": "Gym", "amount": -1},
        {"label": "Gym", "amount": 1, "split_mode": "quarter"},
        {"label": "Gym", "amount": 1, "created_by": "neighbour"},
    ],
)
def test_item_validation(client, month, payload):
    category_id = client.post(f"/months/{month}/categories", json={"label": "Sport"}).json()["id"]
    resp = client.post(f"/categories/{category_id}/items", json=payload)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_expense_update_and_delete(client, month):
    expense_id = client.post(
        f"/months/{month}/expenses",
        json={"date": "2025-03-04", "description": "Pharmacy", "amount": 9.99},
    ).json()["id"]
    resp = client.put(
        f"/expenses/{expense_id}",
        json={"date": "2025-03-05", "description": "Pharmacy (refill)", "amount": 12},
    )
    assert resp.status_code == 200
    assert resp.json()["date"] == "2025-03-05"
    assert client.get(f"/months/{month}/expenses").json()[0]["amount"] == 12
    assert client.delete(f"/expenses/{expense_id}").status_code == 204
    assert client.get(f"/months/{month}/expenses").json() == []


def test_blank_expense_description_is_rejected(client, month):
    resp = client.post(
        f"/months/{month}/expenses",
        json={"date": "2025-03-04", "description": "   ", "amount": 1},
    )
    assert resp.status_code == 422


def test_transfers_total(client, month):
    client.post(f"/months/{month}/transfers", json={"amount": 100.1, "description": "first"})
    second = client.post(f"/months/{month}/transfers", json={"amount": 0.2}).json()
    body = client.get(f"/months/{month}/transfers").json()
    assert body["total"] == 100.3
    assert len(body["transfers"]) == 2
    assert client.delete(f"/transfers/{second['id']}").status_code == 204
    assert client.get(f"/months/{month}/transfers").json()["total"] == 100.1


def test_closed_month_is_read_only(client, month):
    category_id = client.post(f"/months/{month}/categories", json={"label": "Home"}).json()["id"]
    assert client.post(f"/months/{month}/close").status_code == 200

    resp = client.post(f"/months/{month}/transfers", json={"amount": 5})
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"
    assert client.put(f"/months/{month}/incomes", json={"me": 1}).status_code == 409
    assert client.post(f"/categories/{category_id}/items", json={"label": "x", "amount": 1}).status_code == 409
    assert client.delete(f"/categories/{category_id}").status_code == 409
    assert client.post(f"/months/{month}/close").status_code == 409
    assert client.get(f"/months/{month}").status_code == 200


def test_missing_month_is_404(client):
    resp = client.get("/months/4242")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"
    assert client.post("/months/4242/close").status_code == 404


def test_incomes_validation(client, month):
    assert client.put(f"/months/{month}/incomes", json={}).status_code == 422
    assert client.put(f"/months/{month}/incomes", json={"me": -5}).status_code == 422
    resp = client.put(f"/months/{month}/incomes", json={"partner": 1234.567})
    assert {r["role"]: r["net_income"] for r in resp.json()} == {"me": 0, "partner": 1234.57}


def test_balance_start_can_be_negative(client, month):
    resp = client.put(f"/months/{month}/balance-start", json={"private_balance_start": -12.346})
    assert resp.status_code == 200
    assert resp.json()["private_balance_start"] == -12.35


def test_history_endpoint(client, month):
    for n in range(6):
        client.post(
            f"/months/{month}/expenses",
            json={"date": "2025-03-01", "description": f"Entry {n}", "amount": 1},
        )
    preview = client.get(f"/months/{month}/history").json()
    assert len(preview["latest"]) == 5
    assert preview["total_count"] == 6
    assert preview["full_month_list"] is None
    full = client.get(f"/months/{month}/history", params={"full": True}).json()
    assert len(full["full_month_list"]) == 6


def test_templates_flow(client):
    template = client.post("/templates", json={"label": "Insurance"})
    assert template.status_code == 201
    template_id = template.json()["id"]
    item = client.post(
        f"/templates/{template_id}/items", json={"label": "Liability", "amount": 8.5, "split_mode": "me"}
    ).json()
    patched = client.patch(f"/templates/items/{item['id']}", json={"amount": 9})
    assert patched.json()["amount"] == 9

    # the first month created afterwards starts with a copy
    overview = client.get("/months/current").json()
    categories = overview["fixed_categories"]
    assert categories[0]["label"] == "Insurance"
    assert categories[0]["from_template"] is True
    assert categories[0]["items"][0]["amount"] == 9

    listing = client.get("/templates").json()
    assert listing[0]["items"][0]["label"] == "Liability"
    assert client.delete(f"/templates/items/{item['id']}").status_code == 204
    assert client.delete(f"/templates/{template_id}").status_code == 204
    assert client.delete(f"/templates/{template_id}").status_code == 404
    assert client.post(f"/templates/{template_id}/items", json={"label": "x", "amount": 1}).status_code == 404


def test_admin_months(client):
    created = client.post("/admin/months", json={"year": 2024, "month": 11})
    assert created.status_code == 200
    november = created.json()
    assert november["status"] == "open"

    december = client.post("/admin/months", json={"year": 2024, "month": 12}).json()
    months = {m["id"]: m["status"] for m in client.get("/admin/months").json()}
    assert months == {november["id"]: "closed", december["id"]: "open"}

    reopened = client.post(f"/admin/months/{november['id']}/open").json()
    assert reopened["status"] == "open"
    assert client.post("/admin/months", json={"year": 2024, "month": 13}).status_code == 422


def test_reset_and_delete_in_development(client, month):
    client.post(f"/months/{month}/transfers", json={"amount": 50})
    reset = client.post(f"/months/{month}/reset")
    assert reset.status_code == 200
    assert client.get(f"/months/{month}/transfers").json()["total"] == 0

    assert client.delete(f"/months/{month}").status_code == 409
    client.post(f"/months/{month}/close")
    assert client.delete(f"/months/{month}").status_code == 204
    assert client.delete("/months").json() == {"deleted": 0}


def test_settlement_preview(client):
    payload = {
        "me": {"name": "Alex", "net_income": 2000},
        "partner": {"name": "Sam", "net_income": 3000},
        "fixed_categories": [
            {"label": "Home", "items": [{"label": "Rent", "amount": 1000, "split_mode": "income"}]}
        ],
        "private_expenses": [{"amount": 20}],
        "private_balance_start": -5,
        "prepayment_this_month": 500,
    }
    resp = client.post("/settlement/calculate", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["fixed_cost_overpayment"] == 100
    assert body["private_total_due_before_prepayment"] == 415
    assert body["private_balance_end"] == -85


def test_settlement_preview_rejects_non_finite(client):
    payload = {
        "me": {"name": "Alex"},
        "partner": {"name": "Sam"},
        "prepayment_this_month": -1,
    }
    assert client.post("/settlement/calculate", json=payload).status_code == 422


def test_production_refuses_dev_actions(settings):
    prod = settings.model_copy(update={"environment": "production"})
    with TestClient(create_app(settings_override=prod)) as client:
        month = client.get("/months/current").json()["month"]["id"]
        resp = client.post(f"/months/{month}/reset")
        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"
        assert client.delete("/months").status_code == 403


def test_auth_cookie(settings):
    secured = settings.model_copy(update={"admin_password": "s3cret"})
    with TestClient(create_app(settings_override=secured)) as client:
        assert client.get("/health").status_code == 200
        resp = client.get("/months/current")
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthorized"

        bad = client.post("/auth/login", json={"username": "admin", "password": "nope"})
        assert bad.status_code == 400
        forged = client.get("/months/current", headers={"cookie": "auth=ok"})
        assert forged.status_code == 401

        ok = client.post("/auth/login", json={"username": "admin", "password": "s3cret"})
        assert ok.status_code == 200
        assert ok.cookies.get("auth") not in (None, "ok")
        assert client.get("/months/current").status_code == 200

        client.post("/auth/logout")
        assert client.get("/months/current").status_code == 401
        assert client.get("/months/current", headers={"cookie": f"auth={auth_token(settings)}"}).status_code == 401


def test_unhandled_error_logs_traceback(caplog):
    try:
        raise RuntimeError("boom")
    except RuntimeError as err:
        exc = err

    resp = server_error_handler(None, exc)
    assert resp.status_code == 500
    assert json.loads(resp.body) == {"error": "internal_error", "detail": "An unexpected error occurred."}

    record = next(r for r in caplog.records if r.getMessage() == "unhandled exception")
    assert record.exc_info[0] is RuntimeError
    assert "RuntimeError: boom" in JsonFormatter().format(record)
