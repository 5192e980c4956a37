import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-characters"
os.environ["CONTACT_RECIPIENT"] = "owner@example.com"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings

get_settings.cache_clear()

from app.db.models import Base
from app.db.session import Database
from app.main import create_app
from app.services import notifications
from app.services.users import ensure_super_admin
from tests.helpers import SUPER_ADMIN, Outbox, bearer, login_user, register_verified_customer


@pytest.fixture
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr(notifications, "send_email", box.send_email)
    monkeypatch.setattr(notifications, "send_sms", box.send_sms)
    return box


@pytest.fixture
def database():
    database = Database("sqlite://")
    Base.metadata.create_all(bind=database.engine)
    with database.session() as session:
        ensure_super_admin(session, SUPER_ADMIN["username"], SUPER_ADMIN["email"], SUPER_ADMIN["password"])
    yield database
    database.close()


@pytest.fixture
def client(database, outbox):
    app = create_app(database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def super_headers(client):
    return bearer(login_user(client, SUPER_ADMIN["username"], SUPER_ADMIN["password"]))


@pytest.fixture
def admin_headers(client, super_headers):
    payload = {"username": "admin", "email": "admin@example.com", "password": "AdminPass123", "role": "admin"}
    response = client.post("/users", json=payload, headers=super_headers)
    assert response.status_code == 201, response.text
    return bearer(login_user(client, "admin", "AdminPass123"))


@pytest.fixture
def customer(client, database):
    return register_verified_customer(client, database)


@pytest.fixture
def product_type(client, super_headers):
    response = client.post(
        "/product-types",
        json={"name": "Cakes", "allowed_types": ["birthday", "wedding"]},
        headers=super_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_product(client, super_headers, product_type):
    def factory(name="Chocolate Cake", price=19.99, stock=10, **extra):
        payload = {"name": name, "price": price, "stock": stock, "product_type_id": product_type["id"], **extra}
        response = client.post("/products", json=payload, headers=super_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return factory
