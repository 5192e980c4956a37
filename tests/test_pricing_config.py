def test_create_and_list_pricing_configs(client, super_headers, product_type):
    response = client.post(
        "/pricing-config",
        json={"min_price": 10, "max_price": 50.5, "product_type_id": product_type["id"]},
        headers=super_headers,
    )
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["min_price"] == "10.00"
    assert created["max_price"] == "50.50"

    client.post("/pricing-config", json={"min_price": 0, "max_price": 5}, headers=super_headers)

    rows = client.get("/pricing-config").json()
    assert [row["min_price"] for row in rows] == ["0.00", "10.00"]

    rows = client.get(f"/pricing-config?product_type_id={product_type['id']}").json()
    assert [row["id"] for row in rows] == [created["id"]]


def test_invalid_product_type_filter(client):
    response = client.get("/pricing-config?product_type_id=abc")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid product_type_id"}


def test_create_rejects_inverted_range(client, super_headers):
    response = client.post("/pricing-config", json={"min_price": 20, "max_price": 10}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "max_price must be greater than or equal to min_price"}


def test_create_requires_known_product_type(client, super_headers):
    response = client.post("/pricing-config", json={"product_type_id": 999}, headers=super_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product type not found"}


def test_update_checks_merged_range(client, super_headers):
    created = client.post("/pricing-config", json={"min_price": 5, "max_price": 15}, headers=super_headers).json()

    response = client.put(f"/pricing-config/{created['id']}", json={"min_price": 20}, headers=super_headers)
    assert response.status_code == 400

    response = client.put(f"/pricing-config/{created['id']}", json={"max_price": 30}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["max_price"] == "30.00"


def test_mutations_require_admin(client, customer):
    _customer_id, headers = customer
    assert client.post("/pricing-config", json={"min_price": 1}, headers=headers).status_code == 403
    assert client.post("/pricing-config", json={"min_price": 1}).status_code == 401


def test_delete_pricing_config(client, super_headers):
    created = client.post("/pricing-config", json={"min_price": 1}, headers=super_headers).json()

    response = client.delete(f"/pricing-config/{created['id']}", headers=super_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Pricing config deleted"
    assert response.json()["pricingConfig"]["id"] == created["id"]

    assert client.get(f"/pricing-config/{created['id']}").json() == {"error": "Pricing config not found"}
    assert client.get("/pricing-config").json() == []


def test_update_rejects_null_min_price(client, super_headers):
    created = client.post("/pricing-config", json={"min_price": 5, "max_price": 15}, headers=super_headers).json()

    response = client.put(f"/pricing-config/{created['id']}", json={"min_price": None}, headers=super_headers)
    assert response.status_code == 400
    assert response.json() == {"error": '"min_price" must not be null'}

    response = client.put(f"/pricing-config/{created['id']}", json={"max_price": None}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["max_price"] is None
    assert response.json()["min_price"] == "5.00"
