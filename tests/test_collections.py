import pytest
from sqlalchemy import select

from app.db.models import CollectionProduct


@pytest.fixture
def cakes(make_product):
    return [make_product(name=name, price=price, stock=30) for name, price in (("Sponge", 10), ("Gateau", 20), ("Tart", 5))]


@pytest.fixture
def collection(client, super_headers, product_type, cakes):
    payload = {
        "name": "Summer Picks",
        "description": "Light bakes",
        "image": ["https://cdn.example.com/summer.jpg"],
        "product_type_id": product_type["id"],
        "products": [
            {"product_id": cakes[0]["id"], "position": 2},
            {"product_id": cakes[1]["id"], "position": 1},
        ],
    }
    response = client.post("/collections", json=payload, headers=super_headers)
    assert response.status_code == 201, response.text
    assert response.json()["message"] == "Collection created successfully"
    return response.json()["data"]


def test_create_collection_orders_products_by_position(collection, cakes, product_type):
    assert [item["id"] for item in collection["products"]] == [cakes[1]["id"], cakes[0]["id"]]
    assert [item["position"] for item in collection["products"]] == [1, 2]
    assert collection["products_count"] == 2
    assert collection["total_value"] == 30.0
    assert collection["product_type_name"] == product_type["name"]


def test_create_collection_validates_references(client, super_headers):
    response = client.post("/collections", json={"name": "Odd", "product_type_id": 999}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Product type not found"}

    response = client.post(
        "/collections", json={"name": "Odd", "products": [{"product_id": 999}]}, headers=super_headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Product with ID 999 does not exist"

    response = client.post("/collections", json={"description": "no name"}, headers=super_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


def test_collection_without_products(client, super_headers):
    response = client.post("/collections", json={"name": "Empty"}, headers=super_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["products"] == []
    assert data["total_value"] == 0.0


def test_list_collections_filters(client, super_headers, collection):
    client.post("/collections", json={"name": "Winter", "is_active": False}, headers=super_headers)

    body = client.get("/collections?sort_by=name&sort_order=asc").json()
    assert body["message"] == "Collections retrieved successfully"
    assert [row["name"] for row in body["data"]] == ["Summer Picks", "Winter"]
    assert body["pagination"]["total"] == 2

    assert [row["name"] for row in client.get("/collections?is_active=false").json()["data"]] == ["Winter"]
    assert [row["name"] for row in client.get("/collections?search=light").json()["data"]] == ["Summer Picks"]
    assert [row["name"] for row in client.get("/collections?occasion=birthday").json()["data"]] == ["Summer Picks"]
    assert client.get("/collections?occasion=graduation").json()["data"] == []


def test_update_replaces_membership(client, super_headers, collection, cakes):
    response = client.put(
        f"/collections/{collection['id']}",
        json={"name": "Tarts Only", "products": [{"product_id": cakes[2]["id"]}, {"product_id": cakes[0]["id"], "position": 3}]},
        headers=super_headers,
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["name"] == "Tarts Only"
    assert [item["id"] for item in data["products"]] == [cakes[2]["id"], cakes[0]["id"]]

    response = client.put(f"/collections/{collection['id']}", json={}, headers=super_headers)
    assert response.status_code == 400


def test_membership_operations(client, super_headers, collection, cakes):
    collection_id = collection["id"]
    tart = cakes[2]

    response = client.post(f"/collections/{collection_id}/products", json={"product_id": tart["id"]}, headers=super_headers)
    assert response.status_code == 201
    assert response.json()["message"] == "Product added to collection successfully"
    assert response.json()["data"]["products"][0]["id"] == tart["id"]

    response = client.post(f"/collections/{collection_id}/products", json={"product_id": tart["id"]}, headers=super_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Product is already in this collection"

    response = client.put(
        f"/collections/{collection_id}/products/{tart['id']}", json={"position": 9}, headers=super_headers
    )
    assert response.json()["message"] == "Product position updated successfully"
    assert response.json()["data"]["products"][-1]["id"] == tart["id"]

    response = client.delete(f"/collections/{collection_id}/products/{tart['id']}", headers=super_headers)
    assert response.json()["message"] == "Product removed from collection successfully"
    assert response.json()["data"]["products_count"] == 2

    response = client.delete(f"/collections/{collection_id}/products/{tart['id']}", headers=super_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Product is not in this collection"


def test_bulk_add(client, super_headers, make_product):
    created = client.post("/collections", json={"name": "Bulk"}, headers=super_headers).json()["data"]
    first = make_product(name="One", stock=30)
    second = make_product(name="Two", stock=30)
    payload = {"products": [{"product_id": first["id"], "position": 1}, {"product_id": second["id"], "position": 0}]}

    response = client.post(f"/collections/{created['id']}/products/bulk", json=payload, headers=super_headers)
    assert response.status_code == 201
    assert response.json()["message"] == "Products added to collection successfully"
    assert [item["id"] for item in response.json()["data"]["products"]] == [second["id"], first["id"]]


def test_delete_collection(client, super_headers, customer, collection):
    _customer_id, headers = customer
    assert client.delete(f"/collections/{collection['id']}", headers=headers).status_code == 403

    response = client.delete(f"/collections/{collection['id']}", headers=super_headers)
    assert response.json()["message"] == "Collection deleted successfully"
    assert response.json()["data"]["id"] == collection["id"]
    assert client.get(f"/collections/{collection['id']}").status_code == 404


def test_update_rejects_null_name(client, super_headers, collection):
    response = client.put(f"/collections/{collection['id']}", json={"name": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json()["errors"] == ['"name" must not be null']

    response = client.put(f"/collections/{collection['id']}", json={"is_active": None}, headers=super_headers)
    assert response.status_code == 400

    response = client.put(f"/collections/{collection['id']}", json={"description": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


def test_delete_collection_soft_deletes_membership(client, database, super_headers, collection):
    assert client.delete(f"/collections/{collection['id']}", headers=super_headers).status_code == 200
    with database.session() as session:
        rows = session.scalars(
            select(CollectionProduct).where(CollectionProduct.collection_id == collection["id"])
        ).all()
        assert len(rows) == 2
        assert all(row.is_deleted and row.deleted_at is not None for row in rows)
