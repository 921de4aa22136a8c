# tests/test_api.py

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from core.security import issue
from database import get_db
from main import app


TODO = {"title": "Ship release", "deadline": "2030-01-01T12:00:00Z"}


def assert_error(res, status_code):
    assert res.status_code == status_code, res.text
    body = res.json()
    assert body["success"] is False
    assert isinstance(body["error"], str) and body["error"]


# -------------------------------
# Auth
# -------------------------------

def test_health(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["message"] == "Todo API is running"


def test_register_returns_profile_without_password(client):
    res = client.post("/api/auth/register", json={
        "name": "Alice",
        "email": "alice@example.com",
        "phone": "555-0100",
        "username": "alice",
        "password": "correctpass",
        "profile_picture": "https://example.com/a.png",
    })
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["username"] == "alice"
    assert user["profile_picture"] == "https://example.com/a.png"
    assert "password" not in user


def test_register_missing_field(client):
    res = client.post("/api/auth/register", json={"username": "alice", "password": "pw"})
    assert_error(res, 400)


def test_register_duplicate_username(client, make_user):
    make_user("alice")
    res = client.post("/api/auth/register", json={
        "name": "Other", "email": "other@example.com", "phone": "1",
        "username": "alice", "password": "pw",
    })
    assert_error(res, 400)
    assert "Username" in res.json()["error"]


def test_login_wrong_password(client, make_user):
    make_user("alice")
    res = client.post("/api/auth/login", json={"username": "alice", "password": "wrongpass"})
    assert_error(res, 401)


def test_login_missing_password(client, make_user):
    make_user("alice")
    res = client.post("/api/auth/login", json={"username": "alice"})
    assert_error(res, 400)


def test_login_response_shape(client, make_user):
    user, _ = make_user("alice")
    assert set(user) == {"id", "username", "name", "email"}


def test_logout_is_stateless(client, make_user):
    _, headers = make_user("alice")
    res = client.post("/api/auth/logout", headers=headers)
    assert res.status_code == 200
    assert res.json()["success"] is True
    # the token keeps working until it expires
    assert client.get("/api/todos", headers=headers).status_code == 200


# -------------------------------
# Bearer guard
# -------------------------------

def test_protected_route_without_header(client):
    assert_error(client.get("/api/todos"), 401)


def test_protected_route_with_wrong_scheme(client, make_user):
    _, headers = make_user("alice")
    token = headers["Authorization"].split(" ", 1)[1]
    assert_error(client.get("/api/todos", headers={"Authorization": f"Basic {token}"}), 401)
    assert_error(client.get("/api/todos", headers={"Authorization": "Bearer "}), 401)


def test_protected_route_with_expired_token(client, make_user):
    user, _ = make_user("alice")
    token = issue(user["id"], expires_delta=timedelta(minutes=-1))
    res = client.get("/api/todos", headers={"Authorization": f"Bearer {token}"})
    assert_error(res, 401)
    assert res.json()["error"] == "Token expired"


def test_protected_route_with_garbage_token(client):
    res = client.get("/api/todos", headers={"Authorization": "Bearer abc.def.ghi"})
    assert_error(res, 401)


# -------------------------------
# Todos
# -------------------------------

def test_todo_lifecycle(client, make_user):
    _, headers = make_user("alice")

    res = client.post("/api/todos", json=TODO, headers=headers)
    assert res.status_code == 201
    body = res.json()
    assert body["message"]
    todo = body["todo"]
    assert todo["priority"] == 5
    assert todo["is_completed"] is False

    res = client.put(f"/api/todos/{todo['id']}", json={"is_completed": True}, headers=headers)
    assert res.status_code == 200
    assert res.json()["success"] is True

    fetched = client.get(f"/api/todos/{todo['id']}", headers=headers).json()
    assert fetched["is_completed"] is True
    assert fetched["title"] == TODO["title"]

    listed = client.get("/api/todos", headers=headers).json()
    assert [t["id"] for t in listed] == [todo["id"]]

    assert client.delete(f"/api/todos/{todo['id']}", headers=headers).status_code == 200
    assert_error(client.get(f"/api/todos/{todo['id']}", headers=headers), 404)


def test_create_todo_without_deadline(client, make_user):
    _, headers = make_user("alice")
    assert_error(client.post("/api/todos", json={"title": "No deadline"}, headers=headers), 400)


def test_create_todo_with_bad_priority_type(client, make_user):
    _, headers = make_user("alice")
    res = client.post("/api/todos", json={**TODO, "priority": "high"}, headers=headers)
    assert_error(res, 400)


def test_foreign_todo_is_hidden(client, make_user):
    _, alice = make_user("alice")
    _, bob = make_user("bob")
    todo_id = client.post("/api/todos", json=TODO, headers=alice).json()["todo"]["id"]

    assert_error(client.get(f"/api/todos/{todo_id}", headers=bob), 404)
    assert_error(client.put(f"/api/todos/{todo_id}", json={"title": "x"}, headers=bob), 404)
    assert_error(client.delete(f"/api/todos/{todo_id}", headers=bob), 404)
    assert client.get("/api/todos", headers=bob).json() == []

    missing = client.get("/api/todos/no-such-id", headers=bob).json()
    foreign = client.get(f"/api/todos/{todo_id}", headers=bob).json()
    assert missing == foreign

    assert client.get(f"/api/todos/{todo_id}", headers=alice).status_code == 200


# -------------------------------
# Users
# -------------------------------

def test_profile_statistics(client, make_user):
    _, headers = make_user("alice")
    ids = [client.post("/api/todos", json=TODO, headers=headers).json()["todo"]["id"] for _ in range(4)]
    for todo_id in ids[:2]:
        client.put(f"/api/todos/{todo_id}", json={"is_completed": True}, headers=headers)

    body = client.get("/api/users/profile", headers=headers).json()
    assert body["user"]["username"] == "alice"
    assert "password" not in body["user"]
    assert body["statistics"] == {"totalTodos": 4, "completedTodos": 2, "efficiency": 50}


def test_profile_of_deleted_account(client):
    token = issue("deleted-user-id")
    res = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert_error(res, 404)


def test_update_profile_email_conflict(client, make_user):
    _, alice = make_user("alice")
    make_user("bob")
    res = client.put("/api/users/profile", json={"email": "bob@example.com"}, headers=alice)
    assert_error(res, 400)


def test_change_password_flow(client, make_user):
    _, headers = make_user("alice")

    res = client.put("/api/users/change-password",
                     json={"currentPassword": "wrong", "newPassword": "fresh"}, headers=headers)
    assert_error(res, 401)

    res = client.put("/api/users/change-password",
                     json={"currentPassword": "alice-pass"}, headers=headers)
    assert_error(res, 400)

    res = client.put("/api/users/change-password",
                     json={"currentPassword": "alice-pass", "newPassword": "fresh"}, headers=headers)
    assert res.status_code == 200

    assert client.post("/api/auth/login", json={"username": "alice", "password": "fresh"}).status_code == 200
    assert_error(client.post("/api/auth/login", json={"username": "alice", "password": "alice-pass"}), 401)


# -------------------------------
# Error boundary
# -------------------------------

def test_unknown_route(client):
    res = client.get("/api/nothing-here")
    assert_error(res, 404)
    assert res.json()["error"] == "Route not found"


def test_unexpected_error_is_generic_500(make_user):
    _, headers = make_user("alice")

    def broken_db():
        raise RuntimeError("secret internals")

    app.dependency_overrides[get_db] = broken_db
    try:
        res = TestClient(app, raise_server_exceptions=False).get("/api/todos", headers=headers)
    finally:
        app.dependency_overrides.clear()

    assert_error(res, 500)
    assert "secret" not in res.json()["error"]


def parse_timestamp(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_deadline_with_offset_round_trips_to_same_instant(client, make_user):
    _, headers = make_user("alice")
    sent = "2030-01-01T12:00:00+05:00"

    created = client.post("/api/todos", json={"title": "Offset", "deadline": sent}, headers=headers)
    assert created.status_code == 201
    todo_id = created.json()["todo"]["id"]

    fetched = client.get(f"/api/todos/{todo_id}", headers=headers).json()
    deadline = parse_timestamp(fetched["deadline"])
    assert deadline == parse_timestamp(sent)
    assert deadline.utcoffset() == timedelta(0)
    assert parse_timestamp(fetched["created_at"]).tzinfo is not None

    client.put(f"/api/todos/{todo_id}", json={"deadline": "2030-03-01T08:00:00-04:00"}, headers=headers)
    fetched = client.get(f"/api/todos/{todo_id}", headers=headers).json()
    assert parse_timestamp(fetched["deadline"]) == datetime(2030, 3, 1, 12, 0, tzinfo=timezone.utc)
