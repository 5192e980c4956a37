import pytest

from tests.helpers import register_verified_customer

GUEST = {"customer_email": "guest@example.com", "customer_name": "Ama Mensah", "customer_phone": "0240000000"}


@pytest.fixture
def express(client, super_headers):
    response = client.post("/delivery-options", json={"name": "Express", "amount": 15}, headers=super_headers)
    return response.json()


def place_order(client, items, headers=None, **extra):
    payload = {"items": items, **extra}
    return client.post("/orders", json=payload, headers=headers or {})


def test_guest_order_snapshots_prices_and_decrements_stock(client, super_headers, make_product, express):
    cake = make_product(price=19.99, stock=10)
    response = place_order(
        client,
        [{"product_id": cake["id"], "quantity": 2, "metadata": {"message": "Happy birthday"}}],
        delivery_option_id=express["id"],
        **GUEST,
    )
    assert response.status_code == 201
    order = response.json()
    assert order["reference"].startswith("ORD-")
    assert order["quantity"] == 2
    assert order["subtotal"] == "39.98"
    assert order["delivery_cost"] == "15.00"
    assert order["total_price"] == "54.98"
    assert order["delivery_option_name"] == "Express"
    assert order["status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["items"][0]["price"] == "19.99"
    assert order["items"][0]["metadata"] == {"message": "Happy birthday"}
    assert client.get(f"/products/{cake['id']}").json()["stock"] == 8

    client.put(f"/products/{cake['id']}", json={"price": 50}, headers=super_headers)
    fetched = client.get(f"/orders/reference/{order['reference']}").json()
    assert fetched["items"][0]["price"] == "19.99"


def test_guest_order_requires_contact_details(client, make_product):
    cake = make_product()
    response = place_order(client, [{"product_id": cake["id"], "quantity": 1}], customer_name="Ama")
    assert response.status_code == 400
    assert response.json() == {"error": '"customer_email" is required'}


def test_insufficient_stock_rolls_back(client, make_product):
    first = make_product(name="First", stock=5)
    second = make_product(name="Second", stock=1)
    response = place_order(
        client,
        [{"product_id": first["id"], "quantity": 2}, {"product_id": second["id"], "quantity": 3}],
        **GUEST,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient stock for product Second. Available: 1, Requested: 3"
    assert client.get(f"/products/{first['id']}").json()["stock"] == 5


def test_unknown_product_and_delivery_option(client, make_product):
    response = place_order(client, [{"product_id": 999, "quantity": 1}], **GUEST)
    assert response.status_code == 400
    assert response.json() == {"error": "Product with ID 999 not found"}

    cake = make_product()
    response = place_order(client, [{"product_id": cake["id"], "quantity": 1}], delivery_option_id=42, **GUEST)
    assert response.status_code == 400
    assert response.json() == {"error": "Delivery option not found"}


def test_guest_can_register_while_ordering(client, make_product, outbox):
    cake = make_product()
    response = place_order(
        client,
        [{"product_id": cake["id"], "quantity": 1}],
        register_customer=True,
        customer_password="GuestPass123",
        **GUEST,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["customer_registered"] is True
    assert body["user_id"] == body["customer_id"]
    assert any("verification code" in email["body"] for email in outbox.emails)


def test_customer_orders_and_cancels(client, customer, make_product):
    customer_id, headers = customer
    cake = make_product(stock=4)
    order = place_order(client, [{"product_id": cake["id"], "quantity": 3}], headers=headers).json()
    assert order["user_id"] == customer_id

    mine = client.get("/orders/my-orders", headers=headers).json()
    assert [row["id"] for row in mine] == [order["id"]]

    response = client.patch(f"/orders/{order['id']}/cancel", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["payment_status"] == "failed"
    assert client.get(f"/products/{cake['id']}").json()["stock"] == 4

    response = client.patch(f"/orders/{order['id']}/cancel", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Order is already cancelled"}


def test_customer_cannot_cancel_someone_elses_order(client, database, make_product):
    cake = make_product()
    order = place_order(client, [{"product_id": cake["id"], "quantity": 1}], **GUEST).json()
    _other_id, other_headers = register_verified_customer(client, database, email="kwame@example.com")
    response = client.patch(f"/orders/{order['id']}/cancel", headers=other_headers)
    assert response.status_code == 403


def test_admin_updates_status_and_notifies(client, super_headers, make_product, outbox):
    cake = make_product()
    order = place_order(client, [{"product_id": cake["id"], "quantity": 1}], **GUEST).json()

    response = client.put(
        f"/orders/{order['id']}",
        json={"status": "delivered", "payment_status": "completed"},
        headers=super_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "delivered"
    assert outbox.emails[-1]["subject"] == f"Order Status Update - {order['reference']}"
    assert outbox.sms[-1]["phone"] == GUEST["customer_phone"]

    response = client.patch(f"/orders/{order['id']}/cancel", headers=super_headers)
    assert response.json() == {"error": "Cannot cancel a delivered order"}

    stats = client.get("/orders/stats", headers=super_headers).json()
    assert stats["total_orders"] == 1
    assert stats["completed_orders"] == 1
    assert stats["completed_payments"] == 1
    assert stats["total_revenue"] == "19.99"


def test_admin_lists_and_filters_orders(client, super_headers, make_product):
    cake = make_product(stock=50)
    first = place_order(client, [{"product_id": cake["id"], "quantity": 1}], **GUEST).json()
    place_order(client, [{"product_id": cake["id"], "quantity": 2}], **GUEST)
    client.put(f"/orders/{first['id']}", json={"status": "processing"}, headers=super_headers)

    body = client.get("/orders", headers=super_headers).json()
    assert body["pagination"]["total"] == 2

    body = client.get("/orders?status=processing", headers=super_headers).json()
    assert [row["id"] for row in body["data"]] == [first["id"]]
    assert body["filters_applied"] == {"status": "processing"}

    rows = client.get("/orders/status/processing", headers=super_headers).json()
    assert [row["id"] for row in rows] == [first["id"]]
    assert client.get("/orders/status/lost", headers=super_headers).status_code == 400
    assert len(client.get("/orders/payment-status/pending", headers=super_headers).json()) == 2

    assert client.get("/orders").status_code == 401


def test_unknown_order(client):
    assert client.get("/orders/999").json() == {"error": "Order not found"}
    assert client.get("/orders/reference/ORD-0-000").status_code == 404


def test_my_orders_only_lists_customer_orders(client, customer, super_headers, make_product):
    customer_id, headers = customer
    cake = make_product()
    place_order(client, [{"product_id": cake["id"], "quantity": 1}], headers=headers)

    assert client.get("/orders/my-orders", headers=super_headers).json() == []
    mine = client.get("/orders/my-orders", headers=headers).json()
    assert [row["user_id"] for row in mine] == [customer_id]


def test_my_orders_limit(client, customer, make_product):
    _customer_id, headers = customer
    cake = make_product(stock=30)
    for _ in range(12):
        place_order(client, [{"product_id": cake["id"], "quantity": 1}], headers=headers)

    assert len(client.get("/orders/my-orders", headers=headers).json()) == 10
    assert len(client.get("/orders/my-orders?limit=500", headers=headers).json()) == 12


def test_update_rejects_null_status(client, super_headers, make_product):
    cake = make_product()
    order = place_order(client, [{"product_id": cake["id"], "quantity": 1}], **GUEST).json()

    response = client.put(f"/orders/{order['id']}", json={"status": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"status" must not be null'}

    response = client.put(f"/orders/{order['id']}", json={"delivery_address": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["delivery_address"] is None
