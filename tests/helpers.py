from app.db.models import Customer

SUPER_ADMIN = {"username": "superadmin", "email": "superadmin@example.com", "password": "SuperSecret123"}


class Outbox:
    """Collects messages instead of delivering them."""

    def __init__(self) -> None:
        self.emails = []
        self.sms = []

    def send_email(self, subject, body, to, html=None):
        self.emails.append({"subject": subject, "body": body, "to": list(to)})
        return True

    def send_sms(self, phone, message):
        self.sms.append({"phone": phone, "message": message})
        return True


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def login_user(client, username, password):
    response = client.post("/users/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def register_verified_customer(client, database, email="jane@example.com", password="CustomerPass1"):
    response = client.post(
        "/customers/register",
        json={"email": email, "password": password, "first_name": "Jane", "last_name": "Doe"},
    )
    assert response.status_code == 201, response.text
    customer_id = response.json()["id"]
    with database.session() as session:
        code = session.get(Customer, customer_id).verification_code
    assert client.post("/customers/verify-email", json={"code": code}).status_code == 200
    login = client.post("/customers/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return customer_id, bearer(login.json()["token"])
