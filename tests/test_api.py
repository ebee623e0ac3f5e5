"""HTTP surface: identity, transactions, categories and evaluations."""

from datetime import date
from decimal import Decimal

import pytest


@pytest.mark.asyncio
async def test_missing_identity_is_unauthorized(client, catalog):
    response = await client.get("/api/v1/transactions")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_is_unauthorized(client, catalog):
    response = await client.get("/api/v1/transactions", headers={"X-User-Id": "424242"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_transaction_lifecycle(client, auth_headers, subcategories):
    response = await client.post(
        "/api/v1/transactions",
        json={
            "subcategory_id": subcategories["Uang Rekening Bank"],
            "amount": "2500000",
            "date": "2024-03-01",
            "description": "Setoran awal",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    created = response.json()
    assert created["account_type_name"] == "Aset"
    txn_id = created["id"]

    response = await client.patch(
        f"/api/v1/transactions/{txn_id}",
        json={"amount": "3000000", "is_bookmarked": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert Decimal(str(response.json()["amount"])) == Decimal("3000000")
    assert response.json()["is_bookmarked"] is True

    response = await client.get(
        "/api/v1/transactions/balance-at-date",
        params={"subcategory_id": subcategories["Uang Rekening Bank"], "date": "2024-03-31"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["balance"] == 3_000_000

    response = await client.get("/api/v1/transactions", params={"is_bookmarked": "true"}, headers=auth_headers)
    assert [t["id"] for t in response.json()] == [txn_id]

    response = await client.delete(f"/api/v1/transactions/{txn_id}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/v1/transactions/{txn_id}", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_other_users_transaction_is_forbidden(client, auth_headers, other_user, add_transaction):
    txn = await add_transaction("Makanan", 10_000, date(2024, 3, 2), owner=other_user)

    response = await client.get(f"/api/v1/transactions/{txn.id}", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_on_unknown_subcategory(client, auth_headers, catalog):
    response = await client.post(
        "/api/v1/transactions",
        json={"subcategory_id": 99999, "amount": "1", "date": "2024-03-01", "description": "x"},
        headers=auth_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_category_tree(client, auth_headers, catalog):
    response = await client.get("/api/v1/categories/tree", headers=auth_headers)
    assert response.status_code == 200
    names = {node["name"] for node in response.json()}
    assert "Pengeluaran" in names

    response = await client.get("/api/v1/categories/account-types/99999/categories", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_calculate_history_and_detail(client, auth_headers, add_transaction):
    await add_transaction("Uang Tunai", 1_000_000, date(2024, 2, 15))
    await add_transaction("Makanan", 250_000, date(2024, 3, 10))

    response = await client.post(
        "/api/v1/evaluations/calculate",
        json={"start_date": "2024-03-01", "end_date": "2024-03-30"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    results = {r["ratio_code"]: r for r in response.json()}
    assert results["LIQUIDITY_RATIO"]["value"] == pytest.approx(4.0)
    assert results["LIQUIDITY_RATIO"]["status"] == "IDEAL"
    assert results["LIQUIDITY_RATIO"]["is_unbounded"] is False

    response = await client.get(
        "/api/v1/evaluations/history",
        params={"start_date": "2024-03-01", "end_date": "2024-03-31"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    history = {s["ratio_code"]: s for s in response.json()}
    assert set(history) == set(results)

    response = await client.get(
        f"/api/v1/evaluations/{history['LIQUIDITY_RATIO']['id']}", headers=auth_headers
    )
    assert response.status_code == 200
    detail = response.json()
    assert detail["calculated_numerator"] == pytest.approx(1_000_000)
    assert detail["calculated_denominator"] == pytest.approx(250_000)
    assert detail["ideal_range_display"] == "≥ 3 Bulan"
    assert [c["name"] for c in detail["breakdown_components"]] == ["Aset Likuid", "Pengeluaran Bulanan"]


@pytest.mark.asyncio
async def test_calculate_rejects_bad_windows(client, auth_headers, catalog):
    response = await client.post(
        "/api/v1/evaluations/calculate",
        json={"start_date": "2024-03-31", "end_date": "2024-03-01"},
        headers=auth_headers,
    )
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/evaluations/calculate",
        json={"start_date": "2024-01-01", "end_date": "2024-12-31"},
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_evaluation_is_not_found(client, auth_headers, catalog):
    response = await client.get("/api/v1/evaluations/99999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_account(client, auth_headers, add_transaction):
    await add_transaction("Gaji", 5_000_000, date(2024, 3, 1))

    response = await client.delete("/api/v1/users/me", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get("/api/v1/transactions", headers=auth_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_patch_transaction_date(client, auth_headers, add_transaction):
    txn = await add_transaction("Makanan", 120_000, date(2024, 3, 2))

    response = await client.patch(
        f"/api/v1/transactions/{txn.id}",
        json={"date": "2024-03-28"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["date"] == "2024-03-28"
    assert Decimal(str(response.json()["amount"])) == Decimal("120000")
