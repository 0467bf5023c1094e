import pytest
from bson import ObjectId

from conftest import ADDRESS, create_product, run
from storefront.routes import orders as order_routes


@pytest.fixture
def address(customer):
    client, _ = customer
    response = client.post("/address", json=ADDRESS)
    assert response.status_code == 201
    return response.json()


def place_order(client, product_id, address_id, quantity=2, payment_mode="cod"):
    return client.post(
        "/orders",
        json={
            "items": [{"product": product_id, "quantity": quantity}],
            "address": address_id,
            "payment_mode": payment_mode,
        },
    )


def test_create_order_snapshots_items_and_decrements_stock(customer, catalog, address, db):
    client, user = customer
    product = catalog["product"]

    response = place_order(client, product["_id"], address["_id"])

    assert response.status_code == 201
    order = response.json()
    assert order["user"] == user["_id"]
    assert order["status"] == "Pending"
    assert order["payment_mode"] == "COD"
    assert order["total"] == 240.0
    assert order["items"] == [{
        "product": product["_id"],
        "title": "Trail Runner",
        "thumbnail": product["thumbnail"],
        "price": 120.0,
        "quantity": 2,
        "total_price": 240.0,
    }]
    assert order["address"]["city"] == "Springfield"

    stored = run(db.products.find_one({"_id": ObjectId(product["_id"])}))
    assert stored["stock_quantity"] == 3


def test_create_order_with_insufficient_stock_returns_400(customer, catalog, address):
    client, _ = customer

    response = place_order(client, catalog["product"]["_id"], address["_id"], quantity=6)

    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["message"]


def test_create_order_with_unknown_product_returns_404(customer, catalog, address):
    client, _ = customer

    response = place_order(client, str(ObjectId()), address["_id"])

    assert response.status_code == 404


def test_create_order_with_someone_elses_address_returns_404(other_customer, catalog, address):
    client, _ = other_customer

    response = place_order(client, catalog["product"]["_id"], address["_id"])

    assert response.status_code == 404
    assert response.json() == {"message": "Address not found"}


def test_create_order_rejects_unknown_payment_mode(customer, catalog, address):
    client, _ = customer

    response = place_order(client, catalog["product"]["_id"], address["_id"], payment_mode="barter")

    assert response.status_code == 400


def test_create_order_requires_login(client, catalog):
    response = place_order(client, catalog["product"]["_id"], str(ObjectId()))

    assert response.status_code == 401


def test_user_orders_visible_to_owner_and_admin_only(customer, other_customer, admin, catalog, address):
    client, user = customer
    place_order(client, catalog["product"]["_id"], address["_id"], quantity=1)

    own = client.get(f"/orders/user/{user['_id']}")
    assert own.status_code == 200
    assert len(own.json()) == 1

    other_client, _ = other_customer
    assert other_client.get(f"/orders/user/{user['_id']}").status_code == 403

    admin_client, _ = admin
    assert len(admin_client.get(f"/orders/user/{user['_id']}").json()) == 1


def test_admin_lists_all_orders_with_total_header(customer, admin, catalog, address):
    client, _ = customer
    place_order(client, catalog["product"]["_id"], address["_id"], quantity=1)
    place_order(client, catalog["product"]["_id"], address["_id"], quantity=1)
    admin_client, _ = admin

    response = admin_client.get("/orders", params={"limit": 1})

    assert response.status_code == 200
    assert response.headers["X-Total-Count"] == "2"
    assert len(response.json()) == 1
    assert client.get("/orders").status_code == 403


def test_customer_can_cancel_pending_order(customer, catalog, address):
    client, _ = customer
    order = place_order(client, catalog["product"]["_id"], address["_id"]).json()

    response = client.patch(f"/orders/{order['_id']}", json={"status": "cancelled"})

    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"


def test_customer_cannot_dispatch_order(customer, catalog, address):
    client, _ = customer
    order = place_order(client, catalog["product"]["_id"], address["_id"]).json()

    response = client.patch(f"/orders/{order['_id']}", json={"status": "Dispatched"})

    assert response.status_code == 403


def test_admin_updates_status_and_customer_cannot_cancel_afterwards(customer, admin, catalog, address):
    client, _ = customer
    order = place_order(client, catalog["product"]["_id"], address["_id"]).json()
    admin_client, _ = admin

    dispatched = admin_client.patch(f"/orders/{order['_id']}", json={"status": "out for delivery"})

    assert dispatched.status_code == 200
    assert dispatched.json()["status"] == "Out for delivery"
    assert client.patch(f"/orders/{order['_id']}", json={"status": "Cancelled"}).status_code == 400


def test_update_order_with_invalid_status_is_rejected(admin, customer, catalog, address):
    client, _ = customer
    order = place_order(client, catalog["product"]["_id"], address["_id"]).json()
    admin_client, _ = admin

    response = admin_client.patch(f"/orders/{order['_id']}", json={"status": "Lost"})

    assert response.status_code == 400


def test_cancelling_order_restores_stock(customer, catalog, address, db):
    client, _ = customer
    product_id = catalog["product"]["_id"]
    order = place_order(client, product_id, address["_id"], quantity=2).json()

    response = client.patch(f"/orders/{order['_id']}", json={"status": "Cancelled"})

    assert response.status_code == 200
    stored = run(db.products.find_one({"_id": ObjectId(product_id)}))
    assert stored["stock_quantity"] == 5


def test_cancelled_order_cannot_be_changed(customer, admin, catalog, address, db):
    client, _ = customer
    product_id = catalog["product"]["_id"]
    order = place_order(client, product_id, address["_id"], quantity=2).json()
    client.patch(f"/orders/{order['_id']}", json={"status": "Cancelled"})
    admin_client, _ = admin

    response = admin_client.patch(f"/orders/{order['_id']}", json={"status": "Cancelled"})

    assert response.status_code == 400
    assert response.json() == {"message": "A cancelled order cannot be changed"}
    stored = run(db.products.find_one({"_id": ObjectId(product_id)}))
    assert stored["stock_quantity"] == 5


def test_stock_sold_out_during_checkout_rolls_back_reserved_items(customer, admin, catalog, address, db, monkeypatch):
    client, _ = customer
    admin_client, _ = admin
    first_id = catalog["product"]["_id"]
    second = create_product(
        admin_client, catalog["brand"]["_id"], catalog["category"]["_id"], title="Road Runner"
    )
    real_verify = order_routes.verify_products_exist

    async def verify_then_sell_out(product_ids, database):
        products = await real_verify(product_ids, database)
        # Another checkout takes the last pairs after the stock check
        await database.products.update_one(
            {"_id": ObjectId(second["_id"])}, {"$set": {"stock_quantity": 0}}
        )
        return products

    monkeypatch.setattr(order_routes, "verify_products_exist", verify_then_sell_out)

    response = client.post(
        "/orders",
        json={
            "items": [
                {"product": first_id, "quantity": 2},
                {"product": second["_id"], "quantity": 2},
            ],
            "address": address["_id"],
            "payment_mode": "COD",
        },
    )

    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["message"]
    assert run(db.products.find_one({"_id": ObjectId(first_id)}))["stock_quantity"] == 5
    assert run(db.products.find_one({"_id": ObjectId(second["_id"])}))["stock_quantity"] == 0
    assert run(db.orders.count_documents({})) == 0


def test_order_timestamps_are_utc(customer, catalog, address):
    client, _ = customer

    order = place_order(client, catalog["product"]["_id"], address["_id"], quantity=1).json()

    assert order["created_at"].endswith("Z") or order["created_at"].endswith("+00:00")
