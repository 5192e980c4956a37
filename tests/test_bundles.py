import pytest
from sqlalchemy import select

from app.db.models import Bundle, BundleProduct


@pytest.fixture
def cakes(make_product):
    return make_product(name="Sponge", price=19.99, stock=30), make_product(name="Gateau", price=39.99, stock=30)


@pytest.fixture
def bundle(client, super_headers, cakes):
    sponge, gateau = cakes
    payload = {
        "name": "Party Pack",
        "discount_percentage": 10.5,
        "products": [{"product_id": sponge["id"], "quantity": 2}, {"product_id": gateau["id"]}],
    }
    response = client.post("/bundles", json=payload, headers=super_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_bundle_envelope(client, bundle):
    assert bundle["name"] == "Party Pack"
    assert bundle["discount_percentage"] == "10.50"
    assert bundle["products_count"] == 2
    assert bundle["total_value"] == 79.97
    assert {item["quantity"] for item in bundle["products"]} == {1, 2}


def test_bundle_price(client, bundle):
    response = client.get(f"/bundles/{bundle['id']}/price")
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Bundle price calculated successfully"
    assert body["data"] == {
        "bundle_id": bundle["id"],
        "original_price": 79.97,
        "discount_percentage": 10.5,
        "discount_amount": 8.4,
        "final_price": 71.57,
        "products_count": 2,
    }


def test_bundle_errors_use_envelope(client, super_headers, cakes):
    response = client.get("/bundles/999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Bundle not found"}

    response = client.post("/bundles", json={"name": "Empty", "products": []}, headers=super_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert body["errors"]

    response = client.post(
        "/bundles", json={"name": "Ghost", "products": [{"product_id": 999}]}, headers=super_headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Product with ID 999 does not exist"
    assert client.get("/bundles").json()["pagination"]["total"] == 0


def test_bundle_mutations_require_admin(client, customer, cakes):
    _customer_id, headers = customer
    response = client.post(
        "/bundles", json={"name": "Mine", "products": [{"product_id": cakes[0]["id"]}]}, headers=headers
    )
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_list_bundles(client, super_headers, bundle, cakes):
    client.post(
        "/bundles",
        json={"name": "Solo", "is_active": False, "products": [{"product_id": cakes[0]["id"]}]},
        headers=super_headers,
    )
    body = client.get("/bundles?sort_by=name&sort_order=asc").json()
    assert [row["name"] for row in body["data"]] == ["Party Pack", "Solo"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}

    body = client.get("/bundles?is_active=false").json()
    assert [row["name"] for row in body["data"]] == ["Solo"]


def test_membership_operations(client, super_headers, bundle, cakes, make_product):
    sponge, _gateau = cakes
    extra = make_product(name="Cupcake", price=3, stock=30)
    bundle_id = bundle["id"]

    response = client.post(f"/bundles/{bundle_id}/products", json={"product_id": extra["id"]}, headers=super_headers)
    assert response.status_code == 201
    assert response.json()["data"]["products_count"] == 3

    response = client.post(f"/bundles/{bundle_id}/products", json={"product_id": extra["id"]}, headers=super_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Product is already in this bundle"

    response = client.put(
        f"/bundles/{bundle_id}/products/{sponge['id']}", json={"quantity": 5}, headers=super_headers
    )
    line = next(item for item in response.json()["data"]["products"] if item["product_id"] == sponge["id"])
    assert line["quantity"] == 5

    response = client.delete(f"/bundles/{bundle_id}/products/{extra['id']}", headers=super_headers)
    assert response.json()["data"]["products_count"] == 2

    response = client.delete(f"/bundles/{bundle_id}/products/{extra['id']}", headers=super_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Product is not in this bundle"

    response = client.post(f"/bundles/{bundle_id}/products", json={"product_id": extra["id"]}, headers=super_headers)
    assert response.status_code == 201


def test_bulk_add_is_all_or_nothing(client, super_headers, bundle, make_product):
    extra = make_product(name="Cupcake", price=3, stock=30)
    payload = {"products": [{"product_id": extra["id"]}, {"product_id": 999}]}
    response = client.post(f"/bundles/{bundle['id']}/products/bulk", json=payload, headers=super_headers)
    assert response.status_code == 404
    assert client.get(f"/bundles/{bundle['id']}").json()["data"]["products_count"] == 2


def test_update_and_delete_bundle(client, super_headers, bundle):
    response = client.put(f"/bundles/{bundle['id']}", json={"is_active": False}, headers=super_headers)
    assert response.json()["data"]["is_active"] is False

    response = client.delete(f"/bundles/{bundle['id']}", headers=super_headers)
    assert response.json()["message"] == "Bundle deleted successfully"
    assert response.json()["data"]["products_count"] == 2
    assert client.get(f"/bundles/{bundle['id']}").status_code == 404


def test_stats_and_similar_products(client, super_headers, bundle, cakes):
    stats = client.get("/bundles/stats/overview").json()["data"]
    assert stats == {
        "total_bundles": 1,
        "active_bundles": 1,
        "inactive_bundles": 0,
        "average_products_per_bundle": 2,
        "total_bundle_value": 79.97,
    }

    sponge, gateau = cakes
    rows = client.get(f"/bundles/similar-products/{sponge['id']}").json()["data"]
    assert [(row["id"], row["shared_bundles_count"]) for row in rows] == [(gateau["id"], 1)]


def test_update_rejects_null_name(client, super_headers, bundle):
    response = client.put(f"/bundles/{bundle['id']}", json={"name": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Validation error",
        "errors": ['"name" must not be null'],
    }

    response = client.put(f"/bundles/{bundle['id']}", json={"discount_percentage": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Party Pack"


def test_delete_bundle_soft_deletes_rows(client, database, super_headers, bundle, cakes):
    sponge, _gateau = cakes
    response = client.delete(f"/bundles/{bundle['id']}/products/{sponge['id']}", headers=super_headers)
    assert response.status_code == 200
    with database.session() as session:
        removed = session.scalar(select(BundleProduct).where(BundleProduct.product_id == sponge["id"]))
        assert removed.is_deleted is True
        assert removed.deleted_at is not None

    assert client.delete(f"/bundles/{bundle['id']}", headers=super_headers).status_code == 200
    with database.session() as session:
        stored = session.get(Bundle, bundle["id"])
        assert stored.is_deleted is True
        assert stored.deleted_at is not None
        lines = session.scalars(select(BundleProduct).where(BundleProduct.bundle_id == bundle["id"])).all()
        assert len(lines) == 2
        assert all(line.is_deleted and line.deleted_at is not None for line in lines)
