from app.db.models import Customer
from tests.helpers import register_verified_customer


def test_register_sends_verification_and_blocks_login(client, database, outbox):
    response = client.post(
        "/customers/register",
        json={"email": "kofi@example.com", "password": "KofiPass123", "first_name": "Kofi", "phone": "0201112222"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "kofi@example.com"
    assert body["email_verified"] is False
    assert "password" not in body

    with database.session() as session:
        code = session.get(Customer, body["id"]).verification_code
    assert len(code) == 6
    assert code in outbox.emails[0]["body"]
    assert outbox.sms[0]["phone"] == "0201112222"

    response = client.post("/customers/login", json={"email": "kofi@example.com", "password": "KofiPass123"})
    assert response.status_code == 401
    assert response.json() == {"error": "Please verify your email before logging in"}


def test_register_duplicate_email(client, customer):
    response = client.post("/customers/register", json={"email": "jane@example.com", "password": "AnotherPass1"})
    assert response.status_code == 409


def test_verify_email_with_unknown_code(client):
    response = client.post("/customers/verify-email", json={"code": "000000"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or expired verification code"}


def test_login_errors(client, customer):
    assert client.post("/customers/login", json={}).json() == {"error": "Email and password required"}
    response = client.post("/customers/login", json={"email": "jane@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


def test_customer_reads_own_profile_only(client, database, customer):
    customer_id, headers = customer
    other_id, _ = register_verified_customer(client, database, email="ama@example.com")

    response = client.get(f"/customers/{customer_id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["email_verified"] is True

    response = client.get(f"/customers/{other_id}", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. You can only access your own profile."}


def test_customer_updates_profile_but_not_status(client, customer):
    customer_id, headers = customer
    response = client.put(f"/customers/{customer_id}", json={"city": "Accra"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["city"] == "Accra"

    response = client.put(f"/customers/{customer_id}", json={"is_active": False}, headers=headers)
    assert response.status_code == 403

    response = client.put(f"/customers/{customer_id}", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "At least one field must be provided for update"}


def test_admin_lists_updates_and_deletes_customers(client, super_headers, customer):
    customer_id, customer_headers = customer
    response = client.get("/customers", headers=super_headers)
    assert [row["id"] for row in response.json()] == [customer_id]

    assert client.get("/customers", headers=customer_headers).status_code == 403

    response = client.put(f"/customers/{customer_id}", json={"is_active": False}, headers=super_headers)
    assert response.json()["is_active"] is False
    response = client.post("/customers/login", json={"email": "jane@example.com", "password": "CustomerPass1"})
    assert response.status_code == 401

    response = client.delete(f"/customers/{customer_id}", headers=super_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Customer deleted"
    assert client.get(f"/customers/{customer_id}", headers=super_headers).status_code == 404


def test_password_reset_flow(client, database, customer, outbox):
    response = client.post("/customers/forgot-password", json={"email": "jane@example.com"})
    assert response.status_code == 200
    with database.session() as session:
        code = session.get(Customer, customer[0]).reset_code
    assert code in outbox.emails[-1]["body"]

    response = client.post("/customers/reset-password", json={"code": code, "password": "BrandNewPass1"})
    assert response.json() == {"message": "Password reset successfully"}

    response = client.post("/customers/login", json={"email": "jane@example.com", "password": "BrandNewPass1"})
    assert response.status_code == 200

    response = client.post("/customers/reset-password", json={"code": code, "password": "AnotherPass1"})
    assert response.status_code == 400


def test_forgot_password_for_unknown_email_is_neutral(client, outbox):
    response = client.post("/customers/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 200
    assert outbox.emails == []


def test_resend_verification(client, database, outbox):
    client.post("/customers/register", json={"email": "yaw@example.com", "password": "YawPass1234"})
    response = client.post("/customers/resend-verification", json={"email": "yaw@example.com"})
    assert response.json() == {"message": "Verification email sent successfully"}
    assert len(outbox.emails) == 2

    assert client.post("/customers/resend-verification", json={"email": "nobody@example.com"}).status_code == 404


def test_update_rejects_null_email(client, super_headers, customer):
    customer_id, headers = customer
    response = client.put(f"/customers/{customer_id}", json={"email": None}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"email" must not be null'}

    response = client.put(f"/customers/{customer_id}", json={"is_active": None}, headers=super_headers)
    assert response.status_code == 400

    response = client.put(f"/customers/{customer_id}", json={"city": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["city"] is None
