def test_list_users_hides_password(client, admin_headers, viewer):
    response = client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    users = response.json()
    assert {u["email"] for u in users} == {"admin@example.com", "viewer@example.com"}
    assert all("password_hash" not in u for u in users)


def test_create_user_defaults_to_viewer(client, admin_headers):
    response = client.post(
        "/api/v1/users",
        json={"name": "New Person", "email": "new@example.com", "password": "pw12345"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["role"] == "viewer"

    login = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "pw12345"})
    assert login.status_code == 200


def test_duplicate_email_rejected(client, admin_headers, viewer):
    response = client.post(
        "/api/v1/users",
        json={"name": "Dup", "email": "viewer@example.com", "password": "pw"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_update_user_role_and_password(client, admin_headers, viewer):
    response = client.put(
        f"/api/v1/users/{viewer['_id']}",
        json={"role": "admin", "password": "changed"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    login = client.post("/api/v1/auth/login", json={"email": "viewer@example.com", "password": "changed"})
    assert login.status_code == 200


def test_delete_user(client, admin_headers, admin, viewer):
    assert client.delete(f"/api/v1/users/{viewer['_id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/v1/users/{viewer['_id']}", headers=admin_headers).status_code == 404
    # Admins cannot remove themselves
    assert client.delete(f"/api/v1/users/{admin['_id']}", headers=admin_headers).status_code == 400


def test_viewer_cannot_manage_users(client, viewer_headers):
    assert client.get("/api/v1/users", headers=viewer_headers).status_code == 403
