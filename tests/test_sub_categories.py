import pytest

from app.db.models import Product


@pytest.fixture
def sponges(client, super_headers, product_type):
    response = client.post(
        "/sub-categories", json={"name": "Sponges", "product_type_id": product_type["id"]}, headers=super_headers
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_sub_category(sponges, product_type):
    assert sponges["name"] == "Sponges"
    assert sponges["product_type_id"] == product_type["id"]
    assert sponges["created_at"]


def test_create_requires_known_product_type(client, super_headers):
    response = client.post("/sub-categories", json={"name": "Ghost", "product_type_id": 999}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product type not found"}


def test_name_is_unique_within_product_type(client, super_headers, product_type, sponges):
    response = client.post(
        "/sub-categories", json={"name": "Sponges", "product_type_id": product_type["id"]}, headers=super_headers
    )
    assert response.status_code == 409
    assert response.json() == {"error": "Sub-category with this name already exists for this product type"}

    other = client.post("/product-types", json={"name": "Pastries"}, headers=super_headers).json()
    response = client.post(
        "/sub-categories", json={"name": "Sponges", "product_type_id": other["id"]}, headers=super_headers
    )
    assert response.status_code == 201


def test_mutations_require_admin(client, customer, product_type, sponges):
    _customer_id, headers = customer
    payload = {"name": "Tarts", "product_type_id": product_type["id"]}
    assert client.post("/sub-categories", json=payload, headers=headers).status_code == 403
    assert client.post("/sub-categories", json=payload).status_code == 401
    assert client.delete(f"/sub-categories/{sponges['id']}", headers=headers).status_code == 403

    assert client.get("/sub-categories").status_code == 200
    assert client.get(f"/sub-categories/{sponges['id']}").status_code == 200


def test_list_filters_and_sorting(client, super_headers, product_type, sponges):
    other = client.post("/product-types", json={"name": "Pastries"}, headers=super_headers).json()
    client.post("/sub-categories", json={"name": "Tarts", "product_type_id": other["id"]}, headers=super_headers)
    client.post(
        "/sub-categories", json={"name": "Layer Cakes", "product_type_id": product_type["id"]}, headers=super_headers
    )

    body = client.get("/sub-categories", params={"sort_by": "name", "sort_order": "asc"}).json()
    assert [row["name"] for row in body["data"]] == ["Layer Cakes", "Sponges", "Tarts"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 3, "pages": 1}

    body = client.get("/sub-categories", params={"product_type_id": other["id"]}).json()
    assert [row["name"] for row in body["data"]] == ["Tarts"]

    body = client.get("/sub-categories", params={"search": "sponge"}).json()
    assert [row["id"] for row in body["data"]] == [sponges["id"]]

    response = client.get("/sub-categories", params={"limit": 101})
    assert response.status_code == 400


def test_update_sub_category(client, super_headers, product_type, sponges):
    client.post(
        "/sub-categories", json={"name": "Tarts", "product_type_id": product_type["id"]}, headers=super_headers
    )

    response = client.put(f"/sub-categories/{sponges['id']}", json={"name": "Tarts"}, headers=super_headers)
    assert response.status_code == 409

    response = client.put(f"/sub-categories/{sponges['id']}", json={"product_type_id": 999}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product type not found"}

    response = client.put(f"/sub-categories/{sponges['id']}", json={"name": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"name" must not be null'}

    response = client.put(f"/sub-categories/{sponges['id']}", json={"name": "Chiffons"}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Chiffons"

    response = client.put("/sub-categories/999", json={"name": "Nothing"}, headers=super_headers)
    assert response.json() == {"error": "Sub-category not found"}


def test_products_link_to_sub_category(client, super_headers, make_product, sponges):
    product = make_product(sub_category_id=sponges["id"])
    assert product["sub_category_id"] == sponges["id"]
    make_product(name="Plain Loaf")

    body = client.get("/products", params={"sub_category_id": sponges["id"]}).json()
    assert [row["id"] for row in body["products"]] == [product["id"]]
    assert body["filters_applied"] == {"sub_category_id": sponges["id"]}

    response = client.put(f"/products/{product['id']}", json={"sub_category_id": 999}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Sub-category not found"}

    response = client.put(f"/products/{product['id']}", json={"sub_category_id": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["sub_category_id"] is None


def test_create_product_with_unknown_sub_category(client, super_headers, product_type):
    payload = {"name": "Orphan", "price": 5, "product_type_id": product_type["id"], "sub_category_id": 999}
    response = client.post("/products", json=payload, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Sub-category not found"}


def test_delete_detaches_products(client, database, super_headers, product_type, make_product, sponges):
    product = make_product(sub_category_id=sponges["id"])

    response = client.delete(f"/sub-categories/{sponges['id']}", headers=super_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Sub-category deleted"
    assert response.json()["subCategory"]["id"] == sponges["id"]

    assert client.get(f"/sub-categories/{sponges['id']}").json() == {"error": "Sub-category not found"}
    assert client.get(f"/products/{product['id']}").json()["sub_category_id"] is None
    with database.session() as session:
        assert session.get(Product, product["id"]).sub_category_id is None

    response = client.post(
        "/sub-categories", json={"name": "Sponges", "product_type_id": product_type["id"]}, headers=super_headers
    )
    assert response.status_code == 201


def test_deleting_product_type_removes_its_sub_categories(client, super_headers, product_type, sponges):
    assert client.delete(f"/product-types/{product_type['id']}", headers=super_headers).status_code == 200
    assert client.get(f"/sub-categories/{sponges['id']}").status_code == 404
    assert client.get("/sub-categories").json()["pagination"]["total"] == 0
