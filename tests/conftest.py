import asyncio

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from storefront.config.database import create_indexes, get_database
from storefront.config.settings import get_settings
from storefront.main import app

PASSWORD = "correct-horse-battery"


def run(coro):
    """Drive a database coroutine from synchronous test code."""
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(get_settings(), "bcrypt_rounds", 4)


@pytest.fixture
def db():
    database = AsyncMongoMockClient()["storefront_test"]
    run(create_indexes(database))
    app.dependency_overrides[get_database] = lambda: database
    yield database
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(db):
    """Factory for clients with their own cookie jar."""
    def factory():
        return TestClient(app)
    return factory


@pytest.fixture
def client(make_client):
    return make_client()


def signup(client, name="Jane Doe", email="jane@shop.io", password=PASSWORD):
    response = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def make_admin(db, user):
    run(db.users.update_one({"_id": ObjectId(user["_id"])}, {"$set": {"is_admin": True}}))


@pytest.fixture
def customer(make_client):
    """Logged-in client and the sanitized user behind it."""
    c = make_client()
    user = signup(c)
    return c, user


@pytest.fixture
def other_customer(make_client):
    c = make_client()
    user = signup(c, name="John Roe", email="john@shop.io")
    return c, user


@pytest.fixture
def admin(make_client, db):
    c = make_client()
    user = signup(c, name="Ada Admin", email="admin@shop.io")
    make_admin(db, user)
    return c, user


def create_product(admin_client, brand_id, category_id, **overrides):
    body = {
        "title": "Trail Runner",
        "description": "Lightweight running shoe",
        "price": 120.0,
        "discount_percentage": 10,
        "brand": brand_id,
        "category": category_id,
        "stock_quantity": 5,
        "thumbnail": "https://cdn.shop.io/trail.png",
        "images": ["https://cdn.shop.io/trail-1.png"],
    }
    body.update(overrides)
    response = admin_client.post("/products", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def catalog(admin):
    """A brand, a category and one product in stock."""
    admin_client, _ = admin
    brand = admin_client.post("/brands", json={"name": "Acme"}).json()
    category = admin_client.post("/categories", json={"name": "Shoes"}).json()
    product = create_product(admin_client, brand["_id"], category["_id"])
    return {"brand": brand, "category": category, "product": product}


ADDRESS = {
    "street": "1 Main Street",
    "city": "Springfield",
    "state": "IL",
    "phone_number": "+1 555 0100",
    "postal_code": "62701",
    "country": "USA",
    "type": "Home",
}
