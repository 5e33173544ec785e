"""
End-to-end checks through the HTTP surface, with default data seeded.
"""

ADMIN = {"email": "admin@mummatiffin.com", "password": "admin123"}
MANAGER = {"email": "manager@mummatiffin.com", "password": "manager123"}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email="asha@example.com", password="s3cret"):
    response = client.post("/api/register", json={"email": email, "password": password, "name": "Asha"})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def admin_token(client, credentials=ADMIN):
    response = client.post("/api/admin/login", json=credentials)
    assert response.status_code == 200, response.text
    return response.json()["token"]


def test_health_and_root(client):
    assert client.get("/health").json()["status"] == "operational"
    assert client.get("/").status_code == 200


def test_seeded_menu_filtered_by_city(client):
    menu = client.get("/api/menu", params={"city": "Delhi"}).json()["menu"]
    assert [item["id"] for item in menu] == ["b1", "d1", "l1"]

    everything = client.get("/api/menu").json()["menu"]
    assert {item["id"] for item in everything} == {"b1", "b2", "l1", "d1"}


def test_welcome_notification_is_public(client):
    notifications = client.get("/api/notifications").json()["notifications"]
    assert notifications[0]["target_city"] == "All"
    assert "Welcome" in notifications[0]["text"]


def test_register_twice_and_login_errors(client):
    register(client)

    duplicate = client.post("/api/register", json={"email": "asha@example.com", "password": "x"})
    assert duplicate.status_code == 400

    missing = client.post("/api/register", json={"email": "asha2@example.com"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "email & password required"}

    wrong = client.post("/api/login", json={"email": "asha@example.com", "password": "bad"})
    unknown = client.post("/api/login", json={"email": "ghost@example.com", "password": "bad"})
    assert wrong.status_code == unknown.status_code == 400
    assert wrong.json() == unknown.json() == {"error": "invalid credentials"}


def test_admin_login_returns_city(client):
    response = client.post("/api/admin/login", json=MANAGER)
    assert response.json()["admin"]["city"] == "Delhi"
    assert "password_hash" not in response.json()["admin"]


def test_protected_routes_require_valid_bearer_token(client):
    assert client.get("/api/orders").status_code == 401
    assert client.get("/api/orders", headers={"Authorization": "token-without-scheme"}).status_code == 401
    assert client.get("/api/orders", headers=bearer("not-a-jwt")).status_code == 401


def test_role_mismatch_is_forbidden(client):
    user_token = register(client)
    assert client.get("/api/admin/orders", headers=bearer(user_token)).status_code == 403

    token = admin_token(client)
    assert client.get("/api/orders", headers=bearer(token)).status_code == 403


def test_order_lifecycle(client):
    user_token = register(client)
    order = {
        "items": [{"id": "l1", "price": 85}],
        "total": 85,
        "address": {"name": "Home", "line": "12 MG Road", "city": "Delhi"},
        "date": "2026-10-20",
        "time": "13:00",
        "meal": "lunch",
    }
    created = client.post("/api/orders", json=order, headers=bearer(user_token))
    assert created.status_code == 200, created.text
    order_id = created.json()["orderId"]
    assert created.json()["ok"] is True

    latest = client.get("/api/notifications").json()["notifications"][0]
    assert latest == {**latest, "text": f"New order {order_id} placed", "target_city": "Delhi"}

    mine = client.get("/api/orders", headers=bearer(user_token)).json()["orders"]
    assert mine[0]["id"] == order_id
    assert mine[0]["status"] == "pending"
    assert mine[0]["address"]["city"] == "Delhi"
    assert mine[0]["items"] == order["items"]

    manager = admin_token(client, MANAGER)
    listed = client.get("/api/admin/orders", headers=bearer(manager)).json()["orders"]
    assert listed[0]["user_email"] == "asha@example.com"

    update = client.put(f"/api/admin/orders/{order_id}", json={"status": "delivered"}, headers=bearer(manager))
    assert update.status_code == 200
    latest = client.get("/api/notifications").json()["notifications"][0]
    assert latest["target_city"] == "All"

    mine = client.get("/api/orders", headers=bearer(user_token)).json()["orders"]
    assert mine[0]["status"] == "delivered"


def test_order_requires_items_and_address(client):
    user_token = register(client)
    response = client.post("/api/orders", json={"items": [], "address": {"city": "Delhi"}}, headers=bearer(user_token))
    assert response.status_code == 400
    assert response.json() == {"error": "items & address required"}


def test_order_with_non_text_city_is_announced(client):
    user_token = register(client)
    response = client.post(
        "/api/orders",
        json={"items": [{"id": "l1"}], "total": 85, "address": {"city": ["Delhi"]}},
        headers=bearer(user_token),
    )
    assert response.status_code == 200
    order_id = response.json()["orderId"]

    latest = client.get("/api/notifications").json()["notifications"][0]
    assert latest["text"] == f"New order {order_id} placed"
    assert latest["target_city"] == "All"


def test_scoped_admin_cannot_see_or_update_other_city(client):
    user_token = register(client)
    pune_order = client.post(
        "/api/orders",
        json={"items": [{"id": "b2"}], "total": 45, "address": {"city": "Pune"}},
        headers=bearer(user_token),
    ).json()["orderId"]

    manager = admin_token(client, MANAGER)
    assert client.get("/api/admin/orders", headers=bearer(manager)).json()["orders"] == []

    denied = client.put(f"/api/admin/orders/{pune_order}", json={"status": "preparing"}, headers=bearer(manager))
    assert denied.status_code == 403

    invalid = client.put(f"/api/admin/orders/{pune_order}", json={"status": "lost"}, headers=bearer(admin_token(client)))
    assert invalid.status_code == 400

    missing = client.put("/api/admin/orders/999", json={"status": "preparing"}, headers=bearer(admin_token(client)))
    assert missing.status_code == 404


def test_menu_crud(client):
    token = admin_token(client)

    created = client.post(
        "/api/admin/menu",
        json={"meal": "snack", "name_en": "Samosa", "price": 20, "city": "Delhi"},
        headers=bearer(token),
    )
    assert created.status_code == 200
    item_id = created.json()["id"]
    assert item_id.startswith("m")

    assert item_id in [i["id"] for i in client.get("/api/menu", params={"city": "Delhi"}).json()["menu"]]
    assert item_id not in [i["id"] for i in client.get("/api/menu", params={"city": "Pune"}).json()["menu"]]

    updated = client.put(f"/api/admin/menu/{item_id}", json={"id": "x1", "price": 25}, headers=bearer(token))
    assert updated.status_code == 200
    item = next(i for i in client.get("/api/menu").json()["menu"] if i["id"] == item_id)
    assert item["price"] == 25

    injected = client.put(f"/api/admin/menu/{item_id}", json={"price": 1, "evil": "x"}, headers=bearer(token))
    assert injected.status_code == 400

    assert client.delete(f"/api/admin/menu/{item_id}", headers=bearer(token)).json() == {"ok": True}
    assert client.delete(f"/api/admin/menu/{item_id}", headers=bearer(token)).status_code == 200
    assert item_id not in [i["id"] for i in client.get("/api/menu").json()["menu"]]


def test_menu_writes_need_admin(client):
    user_token = register(client)
    response = client.post("/api/admin/menu", json={"meal": "snack"}, headers=bearer(user_token))
    assert response.status_code == 403
    assert client.delete("/api/admin/menu/l1").status_code == 401


def test_admin_management_and_notifications(client):
    token = admin_token(client)

    created = client.post(
        "/api/admin/create",
        json={"email": "pune@mummatiffin.com", "password": "pw", "name": "Pune Desk", "city": "Pune"},
        headers=bearer(token),
    )
    assert created.json() == {"ok": True}
    duplicate = client.post(
        "/api/admin/create", json={"email": "pune@mummatiffin.com", "password": "pw"}, headers=bearer(token)
    )
    assert duplicate.status_code == 400

    admins = client.get("/api/admin/list", headers=bearer(token)).json()["admins"]
    assert [a["city"] for a in admins] == ["All", "Delhi", "Pune"]

    pune = admin_token(client, {"email": "pune@mummatiffin.com", "password": "pw"})
    posted = client.post(
        "/api/admin/notifications", json={"text": "Pune: rain delays", "target_city": "Pune"}, headers=bearer(pune)
    )
    assert posted.status_code == 200
    latest = client.get("/api/notifications", params={"limit": 1}).json()["notifications"]
    assert [(n["text"], n["target_city"]) for n in latest] == [("Pune: rain delays", "Pune")]


def test_addresses(client):
    user_token = register(client)
    saved = client.post(
        "/api/address",
        json={"name": "Home", "line": "12 MG Road", "landmark": "Near park", "pin": "110001", "city": "Delhi"},
        headers=bearer(user_token),
    )
    assert saved.json() == {"ok": True}

    addresses = client.get("/api/address", headers=bearer(user_token)).json()["addresses"]
    assert len(addresses) == 1
    assert addresses[0]["pin"] == "110001"

    other = register(client, "ravi@example.com")
    assert client.get("/api/address", headers=bearer(other)).json()["addresses"] == []
