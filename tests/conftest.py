import asyncio
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.security import create_jwt, hash_password
from app.db.mongo import get_mongo_db
from main import app


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(scope="function")
def db():
    """A fresh in-memory database per test."""
    return AsyncMongoMockClient()["billing_hours_test"]


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with the database dependency overridden."""

    def get_test_db():
        return db

    app.dependency_overrides[get_mongo_db] = get_test_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def make_user(db, role: str, email: str, password: str = "secret123", name: str | None = None) -> dict:
    now = datetime.utcnow()
    doc = {
        "_id": ObjectId(),
        "name": name or role.title(),
        "email": email,
        "password_hash": hash_password(password),
        "role": role,
        "created_at": now,
        "updated_at": now,
        "last_login": None,
    }
    run(db["users"].insert_one(doc))
    return doc


def auth_header(user: dict) -> dict:
    token = create_jwt({"sub": str(user["_id"]), "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin", "admin@example.com", name="Ada Admin")


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def viewer(db):
    return make_user(db, "viewer", "viewer@example.com", name="Vic Viewer")


@pytest.fixture
def viewer_headers(viewer):
    return auth_header(viewer)
