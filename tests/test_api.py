from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import main
from store import LedgerStore


@pytest.fixture
def client():
    store = LedgerStore()
    main.app.dependency_overrides[main.get_store] = lambda: store
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def group_id(client):
    response = client.post("/groups", json={"name": "Road Trip"})
    assert response.status_code == 201
    group_id = response.json()["group_id"]
    for name in ("A", "B", "C"):
        assert client.post(f"/groups/{group_id}/participants", json={"name": name}).status_code == 201
    return group_id


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_create_and_list_groups(client):
    created = client.post("/groups", json={"name": "Flat"}).json()

    groups = client.get("/groups").json()

    assert created["group_id"].startswith("group_")
    assert groups == [{"group_id": created["group_id"], "name": "Flat", "participants": 0, "expenses": 0}]


def test_unknown_group_is_404(client):
    assert client.get("/groups/group_missing/balances").status_code == 404


def test_duplicate_participant_is_400(client, group_id):
    response = client.post(f"/groups/{group_id}/participants", json={"name": "A"})

    assert response.status_code == 400
    assert response.json()["detail"] == "A already exists!"


def test_post_expense_and_read_balances(client, group_id):
    response = client.post(f"/groups/{group_id}/expenses", json={
        "description": "Dinner",
        "amount": "100.00",
        "payer": "A",
        "split_among": ["A", "B", "C"],
    })

    assert response.status_code == 201
    body = response.json()
    assert body["expense_id"] == "E001"
    assert Decimal(body["share_per_person"]) == Decimal("33.33")

    balances = client.get(f"/groups/{group_id}/balances").json()
    assert {name: Decimal(v) for name, v in balances["balances"].items()} == {
        "A": Decimal("66.66"), "B": Decimal("-33.33"), "C": Decimal("-33.33"),
    }
    assert Decimal(balances["total"]) == 0


def test_participant_summary(client, group_id):
    client.post(f"/groups/{group_id}/expenses", json={
        "description": "Taxi", "amount": "10", "payer": "A", "split_among": ["A", "B"],
    })

    body = client.get(f"/groups/{group_id}/participants/B").json()

    assert body["status"] == "owes"
    assert body["summary"] == "B owes: $5.00"
    assert client.get(f"/groups/{group_id}/participants/Zoe").status_code == 404


@pytest.mark.parametrize("payload", [
    {"description": "x", "amount": "0", "payer": "A", "split_among": ["A"]},
    {"description": "x", "amount": "10", "payer": "Zoe", "split_among": ["A"]},
    {"description": "x", "amount": "10", "payer": "A", "split_among": []},
    {"description": "x", "amount": "1e40", "payer": "A", "split_among": ["A", "B"]},
])
def test_rejected_expense_is_400_and_changes_nothing(client, group_id, payload):
    response = client.post(f"/groups/{group_id}/expenses", json=payload)

    assert response.status_code == 400
    assert client.get(f"/groups/{group_id}/expenses").json() == []
    balances = client.get(f"/groups/{group_id}/balances").json()["balances"]
    assert all(Decimal(v) == 0 for v in balances.values())


def test_settlement_plan_is_read_only(client, group_id):
    client.post(f"/groups/{group_id}/expenses", json={
        "description": "Hotel", "amount": "90", "payer": "A", "split_among": ["A", "B", "C"],
    })

    plan = client.get(f"/groups/{group_id}/settlements").json()

    assert plan["settled"] is False
    assert [(t["from_participant"], t["to_participant"], Decimal(t["amount"]))
            for t in plan["transactions"]] == [("B", "A", Decimal("30")), ("C", "A", Decimal("30"))]
    assert client.get(f"/groups/{group_id}/settlements").json() == plan


def test_apply_settlements_zeroes_balances(client, group_id):
    client.post(f"/groups/{group_id}/expenses", json={
        "description": "Hotel", "amount": "100", "payer": "B", "split_among": ["A", "B", "C"],
    })

    applied = client.post(f"/groups/{group_id}/settlements/apply").json()

    assert len(applied["transactions"]) == 2
    assert all(Decimal(v) == 0 for v in applied["balances"].values())
    assert client.get(f"/groups/{group_id}/settlements").json() == {"settled": True, "transactions": []}


def test_residue_is_409(client, group_id):
    store = main.app.dependency_overrides[main.get_store]()
    store.get_ledger(group_id)._participants["A"].add_to_balance(Decimal("0.01"))

    assert client.get(f"/groups/{group_id}/settlements").status_code == 409
    assert client.post(f"/groups/{group_id}/settlements/apply").status_code == 409
    assert Decimal(client.get(f"/groups/{group_id}/balances").json()["total"]) == Decimal("0.01")
