from app.db.models import Product, ProductType


def test_empty_list_pagination(client):
    response = client.get("/product-types?page=1&limit=20")
    assert response.status_code == 200
    assert response.json() == {"data": [], "pagination": {"page": 1, "limit": 20, "total": 0, "pages": 0}}


def test_create_requires_admin_role(client, customer):
    _customer_id, headers = customer
    response = client.post("/product-types", json={"name": "Flowers"}, headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Access denied. Required role: admin or superAdmin. Your role: customer"


def test_create_and_conflict(client, super_headers, product_type):
    assert product_type["name"] == "Cakes"
    assert product_type["allowed_types"] == ["birthday", "wedding"]

    response = client.post("/product-types", json={"name": "Cakes"}, headers=super_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Product type with this name already exists"}


def test_list_filters_and_pagination(client, super_headers, product_type, make_product):
    client.post("/product-types", json={"name": "Flowers", "allowed_types": ["valentine"]}, headers=super_headers)
    client.post("/product-types", json={"name": "Hampers"}, headers=super_headers)
    make_product(name="Budget Cake", price=5)

    response = client.get("/product-types?sort_by=name&sort_order=asc&limit=2")
    body = response.json()
    assert [row["name"] for row in body["data"]] == ["Cakes", "Flowers"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    response = client.get("/product-types?occasion=valentine")
    assert [row["name"] for row in response.json()["data"]] == ["Flowers"]

    response = client.get("/product-types?minPrice=1&maxPrice=10")
    assert [row["name"] for row in response.json()["data"]] == ["Cakes"]

    response = client.get("/product-types?limit=500")
    assert response.status_code == 400


def test_update_product_type(client, super_headers, product_type):
    response = client.put(
        f"/product-types/{product_type['id']}", json={"allowed_types": ["graduation"]}, headers=super_headers
    )
    assert response.status_code == 200
    assert response.json()["allowed_types"] == ["graduation"]

    response = client.put("/product-types/999", json={"name": "Ghost"}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product type not found"}


def test_delete_cascades_to_products(client, super_headers, product_type, make_product):
    product = make_product()

    response = client.delete(f"/product-types/{product_type['id']}", headers=super_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Product type deleted"
    assert response.json()["productType"]["id"] == product_type["id"]

    assert client.get(f"/products/{product['id']}").status_code == 404
    assert client.get("/product-types").json()["pagination"]["total"] == 0

    response = client.post("/product-types", json={"name": "Cakes"}, headers=super_headers)
    assert response.status_code == 201


def test_update_rejects_null_name(client, super_headers, product_type):
    response = client.put(f"/product-types/{product_type['id']}", json={"name": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"name" must not be null'}

    response = client.put(f"/product-types/{product_type['id']}", json={"allowed_types": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Cakes"


def test_delete_marks_type_and_products_deleted_in_storage(client, database, super_headers, product_type, make_product):
    first = make_product()
    second = make_product(name="Carrot Cake")

    assert client.delete(f"/product-types/{product_type['id']}", headers=super_headers).status_code == 200
    with database.session() as session:
        stored = session.get(ProductType, product_type["id"])
        assert stored.is_deleted is True
        assert stored.deleted_at is not None
        for product_id in (first["id"], second["id"]):
            product = session.get(Product, product_id)
            assert product.is_deleted is True
            assert product.deleted_at is not None
