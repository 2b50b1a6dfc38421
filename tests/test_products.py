"""Product CRUD: validation, numeric coercion, id handling and ordering."""
from datetime import datetime, timezone

import pytest
from bson import ObjectId


def test_create_product_parses_numeric_text(client, db, product_payload):
    res = client.post("/products", json=product_payload(price="19.99", discount="2.5"))

    assert res.status_code == 201
    body = res.json()
    assert body["price"] == 19.99
    assert body["discount"] == 2.5
    assert body["category"] == "home-kit"
    assert "id" in body and "_id" not in body
    stored = db["product"].find_one({"_id": ObjectId(body["id"])})
    assert stored["price"] == 19.99
    assert isinstance(stored["price"], float)


def test_create_product_blank_discount_defaults_to_zero(client, product_payload):
    res = client.post("/products", json=product_payload(discount=""))

    assert res.status_code == 201
    assert res.json()["discount"] == 0


def test_create_product_missing_category_persists_nothing(client, db, product_payload):
    payload = product_payload()
    del payload["category"]

    res = client.post("/products", json=payload)

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert "category" in body["message"]
    assert db["product"].count_documents({}) == 0


def test_create_product_rejects_unknown_category(client, db, product_payload):
    res = client.post("/products", json=product_payload(category="basketball"))

    assert res.status_code == 400
    assert db["product"].count_documents({}) == 0


def test_create_product_rejects_negative_price(client, product_payload):
    res = client.post("/products", json=product_payload(price="-1"))
    assert res.status_code == 400


def test_create_product_rejects_non_numeric_price(client, product_payload):
    res = client.post("/products", json=product_payload(price="cheap"))
    assert res.status_code == 400


def test_create_product_rejects_blank_name(client, product_payload):
    res = client.post("/products", json=product_payload(name="   "))
    assert res.status_code == 400


def test_get_product_returns_envelope(client, create_product):
    created = create_product()

    res = client.get(f"/products/{created['id']}")

    assert res.status_code == 200
    assert res.json() == {"success": True, "product": created}


def test_get_missing_product_returns_404(client):
    missing = str(ObjectId())

    res = client.get(f"/products/{missing}")

    assert res.status_code == 404
    assert res.json()["id"] == missing


def test_get_malformed_id_returns_400(client):
    res = client.get("/products/not-an-id")

    assert res.status_code == 400
    assert res.json()["message"] == "Invalid product ID format"


def test_list_products_newest_first(client, db):
    for day, name in ((1, "oldest"), (2, "middle"), (3, "newest")):
        db["product"].insert_one({
            "name": name, "model": name, "price": 10.0, "discount": 0.0,
            "image": "https://cdn.example.com/x.jpg", "description": "d", "category": "retro",
            "createdAt": datetime(2024, 1, day, tzinfo=timezone.utc),
        })

    res = client.get("/products")

    assert res.status_code == 200
    assert [p["name"] for p in res.json()] == ["newest", "middle", "oldest"]


def test_list_products_created_through_api_newest_first(client, create_product):
    for name in ("first", "second", "third"):
        create_product(name=name)

    names = [p["name"] for p in client.get("/products").json()]

    assert names == ["third", "second", "first"]


def test_list_products_filters_by_category(client, create_product):
    create_product(name="Retro 86", category="retro")
    create_product(name="Boot X", category="football-boots")

    res = client.get("/products", params={"category": "retro"})

    assert [p["name"] for p in res.json()] == ["Retro 86"]


def test_list_products_empty(client):
    res = client.get("/products")

    assert res.status_code == 200
    assert res.json() == []


def test_update_product_is_partial(client, create_product):
    created = create_product()

    res = client.put(f"/api/products/{created['id']}", json={"price": "25.5"})

    assert res.status_code == 200
    product = res.json()["product"]
    assert product["price"] == 25.5
    assert product["name"] == created["name"]
    assert res.json()["message"] == "Product updated successfully"


def test_update_product_revalidates_numbers(client, create_product):
    created = create_product()

    res = client.put(f"/api/products/{created['id']}", json={"discount": "-3"})

    assert res.status_code == 400
    assert client.get(f"/products/{created['id']}").json()["product"]["discount"] == 0


def test_update_product_without_fields_returns_400(client, create_product):
    created = create_product()

    res = client.put(f"/api/products/{created['id']}", json={})

    assert res.status_code == 400


def test_update_missing_product_returns_404(client):
    res = client.put(f"/api/products/{ObjectId()}", json={"name": "Ghost"})
    assert res.status_code == 404


def test_delete_product_twice(client, create_product):
    created = create_product()

    first = client.delete(f"/api/products/{created['id']}")
    second = client.delete(f"/api/products/{created['id']}")

    assert first.status_code == 200
    assert first.json()["deletedProduct"]["id"] == created["id"]
    assert second.status_code == 404


def test_delete_malformed_id_returns_400(client):
    res = client.delete("/api/products/xyz")
    assert res.status_code == 400


@pytest.mark.parametrize("value", ["Infinity", "inf", "-inf", "NaN"])
def test_create_product_rejects_non_finite_price(client, db, product_payload, value):
    res = client.post("/products", json=product_payload(price=value))

    assert res.status_code == 400
    assert db["product"].count_documents({}) == 0
    assert client.get("/products").json() == []


def test_update_product_rejects_non_finite_discount(client, create_product):
    created = create_product()

    res = client.put(f"/api/products/{created['id']}", json={"discount": "Infinity"})

    assert res.status_code == 400
    assert client.get("/products").status_code == 200


def test_list_products_rejects_unknown_category(client, create_product):
    create_product()

    res = client.get("/products", params={"category": "basketball"})

    assert res.status_code == 400
    assert "category" in res.json()["message"]


def test_category_filter_is_documented(client):
    params = client.get("/openapi.json").json()["paths"]["/products"]["get"]["parameters"]

    category = next(p for p in params if p["name"] == "category")
    assert category["in"] == "query"
    assert category["required"] is False
