import pytest


@pytest.fixture
def make_product(client, auth_headers):
    def _make(**overrides):
        payload = {"name": "Widget", "price": 19.99, "category": "Producto", "sku": "W-1", "stock": 3}
        payload.update(overrides)
        response = client.post("/api/products", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make


def test_create_product(make_product):
    product = make_product(category="Consultoría")
    assert product["price"] == 19.99
    assert product["category"] == "Consultoría"
    assert product["isActive"] is True
    assert product["stock"] == 3


def test_duplicate_sku_is_rejected(client, auth_headers, make_product):
    make_product()
    response = client.post("/api/products", json={"name": "Otro", "price": 1, "sku": "W-1"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "SKU already exists", "field": "sku"}


def test_products_without_sku_do_not_conflict(make_product):
    make_product(sku="")
    assert make_product(name="Gadget", sku=None)["sku"] is None


def test_invalid_category(client, auth_headers):
    response = client.post("/api/products", json={"name": "X1", "price": 1, "category": "Hardware"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "category"


def test_list_products_filters(client, auth_headers, make_product):
    make_product(name="Widget", sku="W-1")
    make_product(name="Soporte anual", sku="S-1", category="Servicio", isActive=False)

    services = client.get("/api/products", params={"category": "Servicio"}, headers=auth_headers).json()
    assert [p["name"] for p in services["data"]] == ["Soporte anual"]

    active = client.get("/api/products", params={"isActive": "true"}, headers=auth_headers).json()
    assert [p["name"] for p in active["data"]] == ["Widget"]

    found = client.get("/api/products", params={"search": "s-1"}, headers=auth_headers).json()
    assert found["meta"]["total"] == 1


def test_stock_subtract_floors_at_zero(client, auth_headers, make_product):
    product = make_product(stock=3)
    response = client.patch(
        f"/api/products/{product['id']}/stock",
        json={"quantity": 5, "operation": "subtract"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["stock"] == 0


@pytest.mark.parametrize("operation, expected", [("add", 8), ("set", 5)])
def test_stock_add_and_set(client, auth_headers, make_product, operation, expected):
    product = make_product(stock=3)
    response = client.patch(
        f"/api/products/{product['id']}/stock",
        json={"quantity": 5, "operation": operation},
        headers=auth_headers,
    )
    assert response.json()["data"]["stock"] == expected


def test_stock_update_rejects_bad_input(client, auth_headers, make_product):
    product = make_product()
    url = f"/api/products/{product['id']}/stock"
    assert client.patch(url, json={"quantity": -1, "operation": "add"}, headers=auth_headers).status_code == 400
    assert client.patch(url, json={"quantity": 1, "operation": "double"}, headers=auth_headers).status_code == 400
    assert client.patch("/api/products/999/stock", json={"quantity": 1, "operation": "add"}, headers=auth_headers).status_code == 404


def test_update_and_delete_product(client, auth_headers, make_product):
    product = make_product()
    url = f"/api/products/{product['id']}"

    response = client.put(url, json={"name": "Widget Pro", "price": 25, "isActive": False, "sku": None}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Widget Pro"
    assert data["isActive"] is False
    assert data["sku"] is None

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_update_keeps_fields_missing_from_body(client, auth_headers, make_product):
    product = make_product(stock=50, sku="W-1", category="Licencia", description="Anual")
    response = client.put(
        f"/api/products/{product['id']}", json={"name": "Widget 2", "price": 12}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Widget 2"
    assert data["price"] == 12.0
    assert data["stock"] == 50
    assert data["sku"] == "W-1"
    assert data["category"] == "Licencia"
    assert data["description"] == "Anual"
    assert data["isActive"] is True


def test_update_accepts_snake_case_active_flag(client, auth_headers, make_product):
    product = make_product()
    response = client.put(f"/api/products/{product['id']}", json={"is_active": False}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["isActive"] is False


def test_stock_cannot_grow_past_limit(client, auth_headers, make_product):
    product = make_product(stock=1_000_000_000)
    response = client.patch(
        f"/api/products/{product['id']}/stock", json={"quantity": 1, "operation": "add"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "quantity"
