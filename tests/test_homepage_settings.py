import pytest


@pytest.fixture
def section(client, super_headers, make_product):
    first = make_product(name="Sponge", stock=30)
    second = make_product(name="Gateau", stock=30)
    payload = {
        "section_name": "featured",
        "section_title": "Featured Cakes",
        "section_position": 1,
        "section_images": ["https://cdn.example.com/hero.jpg"],
        "product_ids": [second["id"], first["id"]],
    }
    response = client.post("/homepage-settings", json=payload, headers=super_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"], first, second


def test_create_expands_products_in_stored_order(section):
    data, first, second = section
    assert data["section_name"] == "featured"
    assert data["is_active"] is True
    assert [product["id"] for product in data["products"]] == [second["id"], first["id"]]


def test_deleted_products_are_dropped(client, super_headers, section):
    data, first, second = section
    client.delete(f"/products/{first['id']}", headers=super_headers)

    body = client.get(f"/homepage-settings/{data['id']}").json()["data"]
    assert body["product_ids"] == [second["id"], first["id"]]
    assert [product["id"] for product in body["products"]] == [second["id"]]


def test_duplicate_section_name(client, super_headers, section):
    payload = {"section_name": "featured", "section_title": "Again", "section_position": 2}
    response = client.post("/homepage-settings", json=payload, headers=super_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Homepage setting with this section name already exists"}


def test_invalid_section_image(client, super_headers):
    payload = {"section_name": "hero", "section_title": "Hero", "section_position": 0, "section_images": ["ftp://x"]}
    response = client.post("/homepage-settings", json=payload, headers=super_headers)
    assert response.status_code == 400
    assert "section_images" in response.json()["error"]


def test_list_orders_by_position_and_filters(client, super_headers, section):
    client.post(
        "/homepage-settings",
        json={"section_name": "hero", "section_title": "Hero", "section_position": 0, "is_active": False},
        headers=super_headers,
    )
    rows = client.get("/homepage-settings").json()["data"]
    assert [row["section_name"] for row in rows] == ["hero", "featured"]

    rows = client.get("/homepage-settings?is_active=true").json()["data"]
    assert [row["section_name"] for row in rows] == ["featured"]


def test_update_and_delete(client, super_headers, section):
    data, _first, _second = section

    response = client.put(
        f"/homepage-settings/{data['id']}", json={"section_title": "Our Favourites", "product_ids": []}, headers=super_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["section_title"] == "Our Favourites"
    assert response.json()["data"]["products"] == []

    response = client.delete(f"/homepage-settings/{data['id']}", headers=super_headers)
    assert response.json() == {"message": "Homepage setting deleted", "id": data["id"]}

    response = client.get(f"/homepage-settings/{data['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Homepage setting not found"}


def test_mutations_require_admin(client, customer):
    _customer_id, headers = customer
    payload = {"section_name": "hero", "section_title": "Hero", "section_position": 0}
    assert client.post("/homepage-settings", json=payload, headers=headers).status_code == 403


def test_update_rejects_null_for_required_columns(client, super_headers, section):
    data, _first, _second = section

    for field in ("section_title", "section_position", "is_active"):
        response = client.put(f"/homepage-settings/{data['id']}", json={field: None}, headers=super_headers)
        assert response.status_code == 400
        assert response.json() == {"error": f'"{field}" must not be null'}

    response = client.put(
        f"/homepage-settings/{data['id']}", json={"section_description": None}, headers=super_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["section_title"] == "Featured Cakes"
