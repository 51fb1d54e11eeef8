import pytest
from fastapi.testclient import TestClient

from conftest import make_product
from storefront.main import create_app
from storefront.services import storage


@pytest.fixture
def client(ctx):
    with TestClient(create_app(ctx=ctx)) as test_client:
        yield test_client


@pytest.fixture
def auth(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "buyer@example.com", "password": "secret123", "name": "Buyer"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_health_reports_backends(client):
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["config"]["dbType"] == "sqlite"
    assert client.get("/api/config").json() == {"storageType": "local", "reviewStore": "local", "dbType": "sqlite"}


def test_signup_login_and_me(client, auth):
    login = client.post("/api/auth/login", json={"email": "buyer@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user"]["name"] == "Buyer"

    me = client.get("/api/auth/me", headers=auth).json()["user"]
    assert me["email"] == "buyer@example.com"
    assert "createdAt" in me


def test_login_with_wrong_password(client, auth):
    response = client.post("/api/auth/login", json={"email": "buyer@example.com", "password": "nope!!"})
    assert response.status_code == 401
    assert "error" in response.json()


def test_duplicate_signup_is_a_conflict(client, auth):
    response = client.post(
        "/api/auth/signup",
        json={"email": "buyer@example.com", "password": "secret123", "name": "Again"},
    )
    assert response.status_code == 409


def test_protected_routes_need_a_token(client):
    assert client.get("/api/cart").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.post("/api/products/1/reviews", json={"rating": 5, "content": "x"}).status_code == 401


def test_products_are_camel_case(client, ctx):
    product_id = make_product(ctx, name="Lamp", price=3000, stock=4, category="Home")

    products = client.get("/api/products", params={"category": "Home"}).json()["products"]
    assert [p["id"] for p in products] == [product_id]
    assert products[0]["imageUrl"] == "/images/Lamp.jpg"
    assert "createdAt" in products[0]

    detail = client.get(f"/api/products/{product_id}").json()["product"]
    assert detail["name"] == "Lamp"


def test_missing_product_is_404_json(client):
    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_review_round_trip(client, ctx, auth):
    product_id = make_product(ctx)
    assert client.get(f"/api/products/{product_id}/reviews").json() == {"reviews": []}

    response = client.post(
        f"/api/products/{product_id}/reviews",
        json={"rating": 4, "content": "Solid", "imageUrls": ["/uploads/a.png"]},
        headers=auth,
    )
    assert response.status_code == 201
    review = response.json()["review"]
    assert review["userName"] == "Buyer"
    assert review["imageUrls"] == ["/uploads/a.png"]

    listed = client.get(f"/api/products/{product_id}/reviews").json()["reviews"]
    assert [r["id"] for r in listed] == [review["id"]]


def test_review_with_bad_rating(client, ctx, auth):
    product_id = make_product(ctx)
    response = client.post(f"/api/products/{product_id}/reviews", json={"rating": 9, "content": "x"}, headers=auth)
    assert response.status_code == 400


def test_cart_and_checkout(client, ctx, auth):
    a = make_product(ctx, name="A", price=1000, stock=5)
    b = make_product(ctx, name="B", price=500, stock=1)

    first = client.post("/api/cart", json={"productId": a, "quantity": 2}, headers=auth)
    assert first.status_code == 201
    client.post("/api/cart", json={"productId": b}, headers=auth)

    items = client.get("/api/cart", headers=auth).json()["items"]
    assert [(i["productName"], i["quantity"]) for i in items] == [("A", 2), ("B", 1)]

    item_id = first.json()["item"]["id"]
    assert client.put(f"/api/cart/{item_id}", json={"quantity": 3}, headers=auth).json()["item"]["quantity"] == 3
    assert client.put(f"/api/cart/{item_id}", json={"quantity": 9}, headers=auth).status_code == 400
    client.put(f"/api/cart/{item_id}", json={"quantity": 2}, headers=auth)

    placed = client.post("/api/orders", headers=auth)
    assert placed.status_code == 201
    order = placed.json()["order"]
    assert order["totalAmount"] == 2500
    assert order["status"] == "pending"
    assert {i["productName"] for i in order["items"]} == {"A", "B"}

    assert client.get("/api/cart", headers=auth).json() == {"items": []}
    assert [o["id"] for o in client.get("/api/orders", headers=auth).json()["orders"]] == [order["id"]]


def test_checkout_with_empty_cart(client, auth):
    response = client.post("/api/orders", headers=auth)
    assert response.status_code == 400
    assert response.json() == {"error": "Cart is empty"}


def test_remove_missing_cart_item(client, auth):
    assert client.delete("/api/cart/12345", headers=auth).status_code == 404
    assert client.delete("/api/cart", headers=auth).json() == {"success": True}


def test_upload_and_serve_local_file(client, auth):
    response = client.post(
        "/api/upload",
        files={"file": ("photo.png", b"\x89PNG-data", "image/png")},
        headers=auth,
    )
    assert response.status_code == 200
    file_url = response.json()["fileUrl"]
    assert file_url.startswith("/uploads/") and file_url.endswith(".png")
    assert client.get(file_url).content == b"\x89PNG-data"


def test_upload_without_file(client, auth):
    response = client.post("/api/upload", headers=auth)
    assert response.status_code == 400
    assert response.json() == {"error": "Please choose a file"}


def test_upload_rejects_non_image(client, auth):
    response = client.post(
        "/api/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth,
    )
    assert response.status_code == 400


def test_presigned_url_needs_s3(client, auth):
    response = client.post("/api/upload/presigned", json={"fileName": "a.png", "fileType": "image/png"}, headers=auth)
    assert response.status_code == 500
    assert "error" in response.json()


def test_upload_reads_at_most_one_byte_past_the_limit(client, auth, monkeypatch):
    seen = []
    real_save = storage.save_upload

    def recording_save(ctx, data, name, mime):
        seen.append(len(data))
        return real_save(ctx, data, name, mime)

    monkeypatch.setattr(storage, "MAX_UPLOAD_BYTES", 10)
    monkeypatch.setattr(storage, "save_upload", recording_save)

    response = client.post(
        "/api/upload",
        files={"file": ("big.png", b"x" * 1000, "image/png")},
        headers=auth,
    )
    assert response.status_code == 400
    assert seen == [11]


def test_unknown_route_uses_the_error_shape(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
