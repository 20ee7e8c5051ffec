from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

STATUS_OK = 200
STATUS_CREATED = 201
STATUS_NO_CONTENT = 204


def _create(client: TestClient, name: str, price: int, entries: list[dict[str, Any]]) -> dict[str, Any]:
    r = client.post("/recipes", json={"name": name, "price": price, "entries": entries})
    assert r.status_code == STATUS_CREATED, r.text
    return r.json()


def test_healthz(client: TestClient) -> None:
    r = client.get("/healthz")
    assert r.status_code == STATUS_OK
    data = r.json()
    assert data["status"] == "ok"
    assert data["redis"] is True
    assert "version" in data


def test_request_id_is_echoed(client: TestClient) -> None:
    r = client.get("/healthz", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert client.get("/healthz").headers["X-Request-ID"]


def test_default_kinds_are_bootstrapped(client: TestClient) -> None:
    data = client.get("/kinds").json()
    assert {"COFFEE", "MILK", "SUGAR", "CHOCOLATE"} <= set(data["kinds"])


def test_register_kind(client: TestClient) -> None:
    r = client.post("/kinds", json={"name": "PUMPKIN_SPICE"})
    assert r.status_code == STATUS_CREATED
    assert "PUMPKIN_SPICE" in client.get("/kinds").json()["kinds"]
    r = client.post("/kinds", json={"name": "PUMPKIN_SPICE"})
    assert r.status_code == 409
    assert r.json()["error"] == "DuplicateKind"


def test_ingredient_crud(client: TestClient) -> None:
    r = client.post("/ingredients", json={"kind": "COFFEE", "amount": 10})
    assert r.status_code == STATUS_CREATED
    iid = r.json()["id"]

    assert client.get(f"/ingredients/{iid}").json()["amount"] == 10
    r = client.put(f"/ingredients/{iid}", json={"amount": 12})
    assert r.json() == {"id": iid, "kind": "COFFEE", "amount": 12, "recipe_id": None}
    assert [i["id"] for i in client.get("/ingredients").json()] == [iid]

    assert client.delete(f"/ingredients/{iid}").status_code == STATUS_NO_CONTENT
    r = client.get(f"/ingredients/{iid}")
    assert r.status_code == 404
    assert r.json()["category"] == "not_found"


def test_ingredient_validation(client: TestClient) -> None:
    r = client.post("/ingredients", json={"kind": "COFFEE", "amount": -1})
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidAmount"
    r = client.post("/ingredients", json={"kind": "UNICORN_DUST", "amount": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "UnknownKind"
    assert client.get("/ingredients").json() == []


def test_recipe_crud(client: TestClient) -> None:
    created = _create(client, "Latte", 4, [{"kind": "COFFEE", "amount": 10}, {"kind": "MILK", "amount": 2}])
    rid = created["id"]
    coffee_id = created["entries"][0]["id"]

    assert client.get(f"/recipes/{rid}").json()["name"] == "Latte"
    by_name = client.get("/recipes", params={"name": "Latte"}).json()
    assert [r["id"] for r in by_name] == [rid]

    r = client.put(
        f"/recipes/{rid}",
        json={"name": "Latte", "price": 5, "entries": [{"kind": "COFFEE", "amount": 12}, {"kind": "SUGAR", "amount": 1}]},
    )
    assert r.status_code == STATUS_OK
    entries = {e["kind"]: e for e in r.json()["entries"]}
    assert set(entries) == {"COFFEE", "SUGAR"}
    assert entries["COFFEE"]["id"] == coffee_id
    assert entries["COFFEE"]["amount"] == 12

    assert client.delete(f"/recipes/{rid}").status_code == STATUS_NO_CONTENT
    assert client.get(f"/recipes/{rid}").status_code == 404
    assert client.get(f"/ingredients/{coffee_id}").status_code == 404
    assert client.get("/recipes").json() == []


def test_recipe_errors(client: TestClient) -> None:
    _create(client, "Mocha", 5, [{"kind": "COFFEE", "amount": 1}])

    r = client.post("/recipes", json={"name": "Mocha", "price": 5, "entries": []})
    assert r.status_code == 409
    assert r.json()["error"] == "DuplicateName"

    r = client.post(
        "/recipes",
        json={"name": "Double", "price": 5, "entries": [{"kind": "COFFEE", "amount": 1}, {"kind": "COFFEE", "amount": 2}]},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "DuplicateIngredientKind"

    assert client.post("/recipes", json={"name": " ", "price": 5}).json()["error"] == "InvalidName"
    assert client.post("/recipes", json={"name": "Cheap", "price": -1}).json()["error"] == "InvalidPrice"
    assert client.get("/recipes", params={"name": "Nope"}).status_code == 404
    assert client.delete("/recipes/missing").status_code == 404
    assert [r["name"] for r in client.get("/recipes").json()] == ["Mocha"]


def test_recipe_entry_routes(client: TestClient) -> None:
    rid = _create(client, "Latte", 4, [{"kind": "COFFEE", "amount": 1}])["id"]

    r = client.post(f"/recipes/{rid}/entries", json={"kind": "MILK", "amount": 3})
    assert r.status_code == STATUS_CREATED
    milk = next(e for e in r.json()["entries"] if e["kind"] == "MILK")

    r = client.put(f"/recipes/{rid}/entries/{milk['id']}", json={"amount": 5})
    assert {e["kind"]: e["amount"] for e in r.json()["entries"]} == {"COFFEE": 1, "MILK": 5}

    r = client.delete(f"/recipes/{rid}/entries/{milk['id']}")
    assert r.status_code == STATUS_OK
    assert [e["kind"] for e in r.json()["entries"]] == ["COFFEE"]

    r = client.delete(f"/recipes/{rid}/entries/{milk['id']}")
    assert r.status_code == 404
    assert r.json()["error"] == "EntryNotFound"


def test_inventory_and_orders(client: TestClient) -> None:
    client.post("/inventory", json={"kind": "COFFEE", "amount": 10})
    r = client.post("/inventory", json={"kind": "MILK", "amount": 4})
    assert r.json() == {"kind": "MILK", "level": 4}
    _create(client, "Latte", 3, [{"kind": "COFFEE", "amount": 2}, {"kind": "MILK", "amount": 3}])

    r = client.post("/orders", json={"recipe": "Latte", "paid": 5})
    assert r.status_code == STATUS_CREATED
    assert r.json()["change"] == 2
    assert client.get("/inventory").json() == {"COFFEE": 8, "MILK": 1}

    r = client.post("/orders", json={"recipe": "Latte", "paid": 5})
    assert r.status_code == 409
    assert r.json()["error"] == "InsufficientInventory"

    r = client.post("/orders", json={"recipe": "Latte", "paid": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "InsufficientFunds"

    assert client.post("/orders", json={"recipe": "Nope", "paid": 9}).status_code == 404


def test_export_excel(client: TestClient) -> None:
    _create(client, "Mocha", 5, [{"kind": "COFFEE", "amount": 2}])
    r = client.get("/export/excel")
    assert r.status_code == STATUS_OK
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert "attachment" in r.headers["content-disposition"]
    assert r.content[:2] == b"PK"


def test_key_shaped_recipe_id_is_404(client: TestClient) -> None:
    rid = _create(client, "Latte", 4, [{"kind": "COFFEE", "amount": 1}])["id"]
    r = client.get(f"/recipes/{rid}:ingredients")
    assert r.status_code == 404
    assert r.json()["error"] == "NotFound"
