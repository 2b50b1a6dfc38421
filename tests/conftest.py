"""Shared fixtures: in-memory Mongo (mongomock), fixed settings and a TestClient.

get_db and get_settings are swapped through app.dependency_overrides, so no
test touches a real database or the process environment.
"""
import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from database import ensure_indexes, get_db
from main import app

ADMIN_USERNAME = "famadmin"
ADMIN_PASSWORD = "s3cret"


@pytest.fixture
def db():
    database = mongomock.MongoClient()["famsports_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def settings():
    return Settings(_env_file=None, admin_username=ADMIN_USERNAME, admin_password=ADMIN_PASSWORD)


@pytest.fixture
def client(db, settings):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def _product(**overrides):
    payload = {
        "name": "Argentina Home Jersey",
        "model": "arg-home-24",
        "price": "19.99",
        "description": "Replica home shirt",
        "image": "https://cdn.example.com/arg-home.jpg",
        "category": "home-kit",
    }
    payload.update(overrides)
    return payload


def _order(**overrides):
    payload = {
        "productId": "65a1f0c2e4b0a1b2c3d4e5f6",
        "productName": "Argentina Home Jersey",
        "quantity": "2",
        "totalPrice": "39.98",
        "buyerName": "Rahim Uddin",
        "buyerEmail": "rahim@example.com",
        "phone": "01700000000",
        "address": "12 Lake Road, Dhaka",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def product_payload():
    return _product


@pytest.fixture
def order_payload():
    return _order


@pytest.fixture
def create_product(client):
    def _create(**overrides):
        res = client.post("/products", json=_product(**overrides))
        assert res.status_code == 201, res.text
        return res.json()
    return _create


@pytest.fixture
def place_order(client):
    def _place(**overrides):
        res = client.post("/order", json=_order(**overrides))
        assert res.status_code == 201, res.text
        return res.json()
    return _place
