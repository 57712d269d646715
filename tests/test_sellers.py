STORE_FORM = {
    "store_name": "Byte Bazaar",
    "address": "12 MG Road, Bengaluru",
    "owner_name": "Ravi Kumar",
    "phone_number": "9876543210",
}


def register_store(client, seller):
    return client.post(f"/api/seller/store?id={seller.id}", json=STORE_FORM, headers=seller.headers)


def test_dashboard_redirects_to_login_without_session(client, supabase):
    resp = client.get("/api/seller/dashboard", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/api/seller/login"
    assert supabase.calls == []


def test_pages_redirect_to_store_registration(client, seller):
    for path in ("/api/seller/dashboard", "/api/seller/products", "/api/seller/products/add"):
        resp = client.get(path, headers=seller.headers, follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == f"/api/seller/store?id={seller.id}"


def test_registered_store_round_trips_to_dashboard(client, supabase, seller):
    resp = register_store(client, seller)
    assert resp.status_code == 200
    assert resp.json()["next"] == "/seller/dashboard"

    dashboard = client.get("/api/seller/dashboard", headers=seller.headers)

    assert dashboard.status_code == 200
    store = dashboard.json()["store"]
    assert store["seller_id"] == seller.id
    for field, value in STORE_FORM.items():
        assert store[field] == value


def test_register_store_requires_every_field(client, supabase, seller):
    resp = client.post(
        f"/api/seller/store?id={seller.id}",
        json={**STORE_FORM, "owner_name": ""},
        headers=seller.headers,
    )

    assert resp.status_code == 422
    assert resp.json()["detail"] == "All fields are required"
    assert supabase.rows("stores") == []


def test_register_store_rejects_bad_phone_number(client, supabase, seller):
    resp = client.post(
        f"/api/seller/store?id={seller.id}",
        json={**STORE_FORM, "phone_number": "12345"},
        headers=seller.headers,
    )

    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please enter a valid 10-digit phone number"


def test_register_store_insert_failure_is_generic(client, supabase, seller):
    supabase.fail("stores", action="insert", code="23505", message="duplicate key value")

    resp = register_store(client, seller)

    assert resp.status_code == 500
    assert resp.json()["detail"] == "An error occurred"


def test_add_product_and_list_inventory(client, supabase, seller):
    register_store(client, seller)

    resp = client.post(
        "/api/seller/products",
        json={"name": "Pixel 8", "category": "phone", "price": "59999.50", "stock": "4"},
        headers=seller.headers,
    )
    assert resp.status_code == 200
    product = resp.json()["product"]
    assert product["price"] == 59999.5
    assert product["stock"] == 4
    assert resp.json()["next"] == "/seller/products"

    inventory = client.get("/api/seller/products", headers=seller.headers).json()
    assert [p["name"] for p in inventory["products"]] == ["Pixel 8"]
    assert inventory["store"]["store_name"] == "Byte Bazaar"


def test_add_product_rejects_non_positive_price(client, supabase, seller):
    register_store(client, seller)

    for price in ("0", "-10", "abc"):
        resp = client.post(
            "/api/seller/products",
            json={"name": "Pixel 8", "category": "phone", "price": price, "stock": "4"},
            headers=seller.headers,
        )
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Price must be a positive number"

    assert supabase.rows("products") == []
    assert ("products", "insert") not in supabase.calls


def test_add_product_rejects_negative_stock(client, supabase, seller):
    register_store(client, seller)

    resp = client.post(
        "/api/seller/products",
        json={"name": "Pixel 8", "category": "phone", "price": "10", "stock": "-1"},
        headers=seller.headers,
    )

    assert resp.status_code == 422
    assert resp.json()["detail"] == "Stock must be a non-negative integer"


def test_add_product_without_store_redirects(client, supabase, seller):
    resp = client.post(
        "/api/seller/products",
        json={"name": "Pixel 8", "category": "phone", "price": "10", "stock": "1"},
        headers=seller.headers,
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert supabase.rows("products") == []


def test_dashboard_counts_products_by_category(client, supabase, seller):
    register_store(client, seller)
    items = [
        ("Pixel 8", "phone"),
        ("iPhone 15", "phone"),
        ("ThinkPad X1", "laptop"),
        ("USB-C Cable", "accessories"),
        ("Charger", "accessories"),
        ("Case", "accessories"),
    ]
    for name, category in items:
        client.post(
            "/api/seller/products",
            json={"name": name, "category": category, "price": "100", "stock": "2"},
            headers=seller.headers,
        )

    data = client.get("/api/seller/dashboard", headers=seller.headers).json()

    assert data["total_products"] == 6
    assert data["counts"] == {"phone": 2, "laptop": 1, "accessories": 3}
    assert len(data["recent_products"]) == 5
    assert data["recent_products"][0]["name"] == "Case"


def test_dashboard_degrades_when_products_fail(client, supabase, seller):
    register_store(client, seller)
    supabase.fail("products")

    data = client.get("/api/seller/dashboard", headers=seller.headers).json()

    assert data["state"] == "loading"


def test_add_product_page_shows_store_name(client, seller):
    register_store(client, seller)

    data = client.get("/api/seller/products/add", headers=seller.headers).json()

    assert data["store_name"] == "Byte Bazaar"
    assert data["categories"] == ["phone", "laptop", "accessories"]
