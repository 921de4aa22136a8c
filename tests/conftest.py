# tests/conftest.py

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from database import SessionLocal, engine
from models import Base
from main import app


@pytest.fixture(autouse=True)
def reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def register_payload(username="alice", email=None, **overrides):
    payload = {
        "name": username.title(),
        "email": email or f"{username}@example.com",
        "phone": "555-0100",
        "username": username,
        "password": f"{username}-pass",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_user(client):
    """
    Registers a user through the API and returns (user, auth headers).
    """
    def _make(username="alice", **overrides):
        payload = register_payload(username, **overrides)
        res = client.post("/api/auth/register", json=payload)
        assert res.status_code == 201, res.text
        res = client.post(
            "/api/auth/login",
            json={"username": payload["username"], "password": payload["password"]},
        )
        assert res.status_code == 200, res.text
        body = res.json()
        return body["user"], {"Authorization": f"Bearer {body['access_token']}"}
    return _make
