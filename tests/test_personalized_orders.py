import pytest

from app.core.email import EmailDeliveryError
from app.services import notifications

ORDER = {
    "custom_message": "Happy 30th, Ama!",
    "selected_colors": ["gold", "navy"],
    "product_type": "Cake",
    "metadata": {"tiers": 2},
    "amount": 150.5,
    "customer_email": "ama@example.com",
    "customer_name": "Ama Mensah",
    "delivery_address": "12 Palm Street",
}


@pytest.fixture
def order(client):
    response = client.post("/personalized-orders", json=ORDER)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_is_public_and_alerts_owner(order, outbox):
    assert order["amount"] == "150.50"
    assert order["reference"].startswith("PO-")
    assert order["order_status"] == "pending"
    assert order["delivery_status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["metadata"] == {"tiers": 2}
    assert order["customer_phone"] is None

    [email] = outbox.emails
    assert email["to"] == ["owner@example.com"]
    assert email["subject"] == f"New Personalized Order #{order['id']} - Cake"
    assert "Custom Message: Happy 30th, Ama!" in email["body"]
    assert "Customer Phone: N/A" in email["body"]


def test_create_validation(client):
    response = client.post("/personalized-orders", json={**ORDER, "amount": 0})
    assert response.status_code == 400
    assert response.json()["error"].startswith('"amount"')

    payload = {key: value for key, value in ORDER.items() if key != "custom_message"}
    response = client.post("/personalized-orders", json=payload)
    assert response.status_code == 400
    assert response.json()["error"].startswith('"custom_message"')


def test_create_survives_notification_failure(client, monkeypatch):
    def failing_send(subject, body, to, html=None):
        raise EmailDeliveryError("SMTP down")

    monkeypatch.setattr(notifications, "send_email", failing_send)
    response = client.post("/personalized-orders", json=ORDER)
    assert response.status_code == 201
    assert response.json()["customer_email"] == "ama@example.com"


def test_reads_require_admin_account(client, customer, order):
    _customer_id, headers = customer
    assert client.get("/personalized-orders").status_code == 401
    response = client.get(f"/personalized-orders/{order['id']}", headers=headers)
    assert response.status_code == 403


def test_list_filters(client, admin_headers, order):
    client.post("/personalized-orders", json={**ORDER, "product_type": "Card", "amount": 20})

    body = client.get("/personalized-orders", headers=admin_headers).json()
    assert body["pagination"]["total"] == 2

    body = client.get("/personalized-orders", params={"product_type": "Card"}, headers=admin_headers).json()
    assert [row["product_type"] for row in body["data"]] == ["Card"]

    body = client.get(
        "/personalized-orders", params={"sort_by": "amount", "sort_order": "asc"}, headers=admin_headers
    ).json()
    assert [row["amount"] for row in body["data"]] == ["20.00", "150.50"]

    response = client.get("/personalized-orders", params={"delivery_status": "lost"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_and_delete(client, super_headers, order):
    response = client.put(
        f"/personalized-orders/{order['id']}",
        json={"order_status": "processing", "delivery_status": "in_transit", "metadata": None},
        headers=super_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["order_status"] == "processing"
    assert body["delivery_status"] == "in_transit"
    assert body["metadata"] is None

    response = client.put(f"/personalized-orders/{order['id']}", json={"amount": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"amount" must not be null'}

    response = client.put(f"/personalized-orders/{order['id']}", json={}, headers=super_headers)
    assert response.status_code == 400

    response = client.delete(f"/personalized-orders/{order['id']}", headers=super_headers)
    assert response.json() == {"message": "Personalized order deleted successfully"}

    response = client.get(f"/personalized-orders/{order['id']}", headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Personalized order not found"}
