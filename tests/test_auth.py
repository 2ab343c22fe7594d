from datetime import timedelta

from app.core.config import settings
from app.core.security import create_jwt


def test_login_returns_token_usable_for_me(client, admin):
    response = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "admin@example.com"
    assert body["user"]["role"] == "admin"
    assert "password_hash" not in body["user"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == str(admin["_id"])


def test_login_rejects_bad_password(client, admin):
    response = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert response.status_code == 401


def test_login_unknown_user(client):
    response = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert response.status_code == 401


def test_me_requires_bearer_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_expired_token_rejected(client, admin):
    token = create_jwt({"sub": str(admin["_id"]), "role": "admin"}, expires_delta=timedelta(seconds=-10))
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_default_secret_key_is_long_enough_for_hs256():
    assert len(settings.SECRET_KEY.encode()) >= 32
