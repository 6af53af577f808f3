def test_create_sale_embeds_client(client, make_client, make_sale):
    owner = make_client()
    sale = make_sale(owner["id"], amount=99.995, description="<b>Consultoría</b>", date="2024-03-10T10:00:00Z")
    assert sale["amount"] == 100.0
    assert sale["description"] == "Consultoría"
    assert sale["status"] == "paid"
    assert sale["clientId"] == owner["id"]
    assert sale["client"]["name"] == "Cliente Uno"
    assert sale["date"].startswith("2024-03-10T10:00:00")


def test_create_sale_defaults_status_to_pending(client, auth_headers, make_client):
    owner = make_client()
    response = client.post("/api/sales", json={"clientId": owner["id"], "amount": 10}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["data"]["status"] == "pending"


def test_create_sale_for_missing_client(client, auth_headers):
    response = client.post("/api/sales", json={"client": 42, "amount": 10}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Client not found", "field": "client"}


def test_create_sale_rejects_out_of_range_dates(client, auth_headers, make_client):
    owner = make_client()
    for date in ("1999-12-31", "2999-01-01"):
        response = client.post(
            "/api/sales", json={"client": owner["id"], "amount": 10, "date": date}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["field"] == "date"


def test_create_sale_rejects_negative_amount(client, auth_headers, make_client):
    owner = make_client()
    response = client.post("/api/sales", json={"client": owner["id"], "amount": -5}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "amount"


def test_list_sales_filters(client, auth_headers, make_client, make_sale):
    first = make_client()
    second = make_client(name="Cliente Dos", email="dos@acme.com")
    make_sale(first["id"], date="2024-01-15", status="paid")
    make_sale(first["id"], date="2024-02-15", status="pending")
    make_sale(second["id"], date="2024-03-15", status="cancelled")

    everything = client.get("/api/sales", headers=auth_headers).json()
    assert everything["meta"]["total"] == 3
    # ordenado por data, mais recente primeiro
    assert everything["data"][0]["status"] == "cancelled"

    by_client = client.get("/api/sales", params={"client": first["id"]}, headers=auth_headers).json()
    assert by_client["meta"]["total"] == 2

    by_status = client.get("/api/sales", params={"status": "pending"}, headers=auth_headers).json()
    assert [s["status"] for s in by_status["data"]] == ["pending"]

    by_range = client.get(
        "/api/sales", params={"from": "2024-02-01", "to": "2024-03-31"}, headers=auth_headers
    ).json()
    assert by_range["meta"]["total"] == 2


def test_list_sales_rejects_bad_filters(client, auth_headers):
    assert client.get("/api/sales", params={"status": "refunded"}, headers=auth_headers).status_code == 400
    assert client.get("/api/sales", params={"from": "yesterday"}, headers=auth_headers).status_code == 400


def test_update_and_delete_sale(client, auth_headers, make_client, make_sale):
    owner = make_client()
    other = make_client(name="Cliente Dos", email="dos@acme.com")
    sale = make_sale(owner["id"])
    url = f"/api/sales/{sale['id']}"

    response = client.put(
        url, json={"client": other["id"], "amount": 250, "status": "cancelled"}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["amount"] == 250.0
    assert data["status"] == "cancelled"
    assert data["client"]["name"] == "Cliente Dos"

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_create_sale_rejects_unrepresentable_numbers(client, auth_headers, make_client):
    owner = make_client()
    infinite = client.post(
        "/api/sales",
        content='{"client": Infinity, "amount": 10}',
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert infinite.status_code == 400
    assert infinite.json()["field"] == "client"

    cases = [
        ({"client": 2**63, "amount": 10}, "client"),
        ({"client": owner["id"], "amount": int("9" * 400)}, "amount"),
    ]
    for payload, field in cases:
        response = client.post("/api/sales", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["field"] == field


def test_ids_beyond_64_bits_are_rejected(client, auth_headers):
    huge = "99999999999999999999"
    for url in (f"/api/clients/{huge}", f"/api/sales/{huge}", f"/api/products/{huge}"):
        response = client.get(url, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["success"] is False

    response = client.get("/api/sales", params={"client": huge}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "client"
