from app.queries import mailing_list as mailing_list_queries
from app.services import notifications


def test_subscribe_is_idempotent(client, super_headers):
    for email in ("Fan@Example.com", "fan@example.com"):
        response = client.post("/mailing-list", json={"email": email})
        assert response.status_code == 200
        assert response.json() == {"message": "Email added to mailing list successfully"}
    client.post("/mailing-list", json={"email": "later@example.com"})

    rows = client.get("/mailing-list", headers=super_headers).json()
    assert [row["email"] for row in rows] == ["later@example.com", "fan@example.com"]


def test_subscribe_rejects_invalid_email(client):
    response = client.post("/mailing-list", json={"email": "not-an-email"})
    assert response.status_code == 400
    assert "email" in response.json()["error"]


def test_listing_requires_admin_user_type(client, customer):
    _customer_id, headers = customer
    response = client.get("/mailing-list", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. Required user type: admin. Your type: customer"}
    assert client.get("/mailing-list").status_code == 401


def test_contact_us_sends_email(client, outbox):
    payload = {"name": "Ama", "email": "ama@example.com", "company": "", "message": "Do you deliver to Kumasi?"}
    response = client.post("/contact-us", json=payload)
    assert response.status_code == 200
    assert response.json() == {"message": "Message sent successfully"}
    assert len(outbox.emails) == 1
    email = outbox.emails[0]
    assert email["to"] == ["owner@example.com"]
    assert email["subject"] == "New Contact Form Submission from Ama"
    assert "Company: N/A" in email["body"]


def test_contact_us_validation(client, outbox):
    response = client.post("/contact-us", json={"name": "Ama", "email": "nope", "message": "Hi"})
    assert response.status_code == 400
    assert outbox.emails == []


def test_contact_us_delivery_failure(client, monkeypatch):
    monkeypatch.setattr(notifications, "send_email", lambda *args, **kwargs: False)
    response = client.post("/contact-us", json={"name": "Ama", "email": "ama@example.com", "message": "Hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "Email delivery is not configured"}


def test_subscribe_tolerates_concurrent_insert(client, super_headers, monkeypatch):
    assert client.post("/mailing-list", json={"email": "fan@example.com"}).status_code == 200

    # the lookup misses, as it would for a request racing the first insert
    monkeypatch.setattr(mailing_list_queries, "get_entry_by_email", lambda db, email: None)
    response = client.post("/mailing-list", json={"email": "fan@example.com"})
    assert response.status_code == 200
    assert response.json() == {"message": "Email added to mailing list successfully"}

    rows = client.get("/mailing-list", headers=super_headers).json()
    assert [row["email"] for row in rows] == ["fan@example.com"]
