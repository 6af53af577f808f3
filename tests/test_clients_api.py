def test_clients_require_auth(client):
    assert client.get("/api/clients").status_code == 401
    assert client.post("/api/clients", json={"name": "Cliente"}).status_code == 401


def test_create_client(client, auth_headers):
    response = client.post(
        "/api/clients",
        json={"name": "Cliente Uno", "email": "Uno@Acme.com", "phone": "555-123-4567", "industry": "Retail"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "uno@acme.com"
    assert data["phone"] == "5551234567"
    assert data["industry"] == "Retail"
    assert "createdAt" in data


def test_create_client_invalid_name(client, auth_headers):
    response = client.post("/api/clients", json={"name": "X"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "name"


def test_create_client_rejects_non_object_body(client, auth_headers):
    response = client.post("/api/clients", json=["Cliente"], headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_clients_with_search_and_pagination(client, auth_headers, make_client):
    make_client(name="Alfa", email="alfa@acme.com", industry="Salud")
    make_client(name="Beta", email="beta@acme.com", industry="Retail")
    make_client(name="Gamma", email="gamma@acme.com", industry="Retail")

    response = client.get("/api/clients", params={"limit": 2}, headers=auth_headers)
    body = response.json()
    assert response.status_code == 200
    assert len(body["data"]) == 2
    assert body["meta"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
    # mais recentes primeiro
    assert body["data"][0]["name"] == "Gamma"

    retail = client.get("/api/clients", params={"search": "retail"}, headers=auth_headers).json()
    assert {c["name"] for c in retail["data"]} == {"Beta", "Gamma"}


def test_list_clients_rejects_bad_limit(client, auth_headers):
    response = client.get("/api/clients", params={"limit": 500}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "limit"


def test_get_update_delete_client(client, auth_headers, make_client):
    created = make_client()
    url = f"/api/clients/{created['id']}"

    assert client.get(url, headers=auth_headers).json()["data"]["name"] == "Cliente Uno"

    updated = client.put(url, json={"name": "Cliente Dos", "industry": "Salud"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Cliente Dos"
    # PUT substitui o registro inteiro
    assert updated.json()["data"]["email"] is None

    deleted = client.delete(url, headers=auth_headers)
    assert deleted.status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_missing_client_returns_404(client, auth_headers):
    response = client.get("/api/clients/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Client not found"}


def test_client_with_sales_cannot_be_deleted(client, auth_headers, make_client, make_sale):
    created = make_client()
    make_sale(created["id"])
    response = client.delete(f"/api/clients/{created['id']}", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Client has sales and cannot be deleted"
