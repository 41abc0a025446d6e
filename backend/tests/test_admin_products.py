import asyncio
import json


def test_widget_lifecycle(client, admin_headers):
    res = client.post(
        "/products",
        json={"name": "Widget", "price": 10, "available": True},
        headers=admin_headers,
    )
    assert res.status_code == 201
    widget = res.json()
    assert widget["active"] is True
    assert isinstance(widget["id"], int)
    assert widget["createdAt"]

    assert widget["id"] in [p["id"] for p in client.get("/products").json()]

    res = client.delete(f"/products/{widget['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["active"] is False

    assert widget["id"] not in [p["id"] for p in client.get("/products").json()]
    # soft delete keeps the record
    res = client.get(f"/products/{widget['id']}")
    assert res.status_code == 200
    assert res.json()["active"] is False


def test_mutations_require_token(client):
    assert client.post("/products", json={"name": "x"}).status_code == 401
    assert client.put("/products/1", json={"name": "x"}).status_code == 401
    assert client.delete("/products/1").status_code == 401
    assert client.post("/import", json=[]).status_code == 401
    res = client.post("/products", json={"name": "x"}, headers={"Authorization": "Basic abc"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid token"}


def test_auto_ids_are_unique(client, admin_headers):
    ids = {
        client.post("/products", json={"name": f"p{i}"}, headers=admin_headers).json()["id"]
        for i in range(5)
    }
    assert len(ids) == 5


def test_duplicate_caller_id_rejected(client, admin_headers):
    assert client.post("/products", json={"id": 42, "name": "a"}, headers=admin_headers).status_code == 201
    res = client.post("/products", json={"id": 42, "name": "b"}, headers=admin_headers)
    assert res.status_code == 400


def test_update_is_partial_and_keeps_id(client, admin_headers):
    created = client.post(
        "/products",
        json={"id": 5, "name": "Lamp", "price": 20, "category": "home", "available": True},
        headers=admin_headers,
    ).json()
    res = client.put("/products/5", json={"price": 25, "id": 999}, headers=admin_headers)
    assert res.status_code == 200
    updated = res.json()
    assert updated["id"] == 5
    assert updated["price"] == 25
    assert updated["name"] == "Lamp"
    assert updated["category"] == "home"
    assert updated["createdAt"] == created["createdAt"]


def test_update_and_delete_unknown_404(client, admin_headers):
    assert client.put("/products/404", json={"name": "x"}, headers=admin_headers).status_code == 404
    assert client.delete("/products/404", headers=admin_headers).status_code == 404


def test_import_replaces_collection(client, admin_headers, settings):
    client.post("/products", json={"name": "gone after import"}, headers=admin_headers)
    records = [
        {"id": 10, "name": "A", "available": True, "createdAt": "2024-01-01T00:00:00+00:00"},
        {"id": 11, "name": "B", "available": False, "active": False},
        {"name": "C"},
    ]
    res = client.post("/import", json=records, headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"ok": True, "count": 3}

    everything = client.get("/products", params={"all": "true"}, headers=admin_headers).json()
    assert len(everything) == 3
    assert {p["name"] for p in everything} == {"A", "B", "C"}
    assert all(p["createdAt"] for p in everything)

    with open(settings.catalog_file) as f:
        assert len(json.load(f)) == 3


def test_import_requires_array(client, admin_headers):
    res = client.post("/import", json={"id": 1}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Array expected"}
    assert client.post("/import", json=[1, 2], headers=admin_headers).status_code == 400


def test_upload_image_stored_locally(client, admin_headers):
    res = client.post(
        "/upload-image",
        files={"image": ("photo.png", b"\x89PNG fake", "image/png")},
        headers=admin_headers,
    )
    assert res.status_code == 200
    url = res.json()["url"]
    assert url.startswith("/images/") and url.endswith(".png")

    served = client.get(url)
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"


def test_upload_image_requires_file(client, admin_headers):
    res = client.post("/upload-image", data={"other": "x"}, headers=admin_headers)
    assert res.status_code == 400


def test_upload_image_size_limit(make_client):
    client = make_client(MAX_UPLOAD_BYTES=10)
    token = client.post("/auth/login", json={"username": "admin", "password": "admin123"}).json()["token"]
    res = client.post(
        "/upload-image",
        files={"image": ("big.jpg", b"x" * 11, "image/jpeg")},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "File too large"}


def test_upload_requires_token(client):
    res = client.post("/upload-image", files={"image": ("a.png", b"x", "image/png")})
    assert res.status_code == 401


def test_upload_image_saves_off_the_event_loop(client, admin_headers, monkeypatch):
    seen = {}

    def fake_save(data, filename, content_type=None):
        try:
            asyncio.get_running_loop()
            seen["on_loop"] = True
        except RuntimeError:
            seen["on_loop"] = False
        return "/images/fake.png"

    monkeypatch.setattr(client.app.state.images, "save", fake_save)
    res = client.post(
        "/upload-image",
        files={"image": ("photo.png", b"\x89PNG", "image/png")},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json() == {"url": "/images/fake.png"}
    assert seen == {"on_loop": False}
