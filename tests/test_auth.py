# tests/test_auth.py

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import select

from task_manager.core.jwt import JWTSigner, create_access_token
from task_manager.modules.auth.model import User

from .conftest import TEST_SECRET, auth


def test_register_returns_public_fields_and_token(client) -> None:
    res = client.post(
        "/api/users/register",
        json={"name": "Ann", "email": "a@x.com", "password": "secret1"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"

    user = body["data"]["user"]
    assert set(user) == {"id", "name", "email", "createdAt"}
    assert user["name"] == "Ann"
    assert user["email"] == "a@x.com"
    assert "password" not in res.text
    assert "hashed_password" not in res.text

    assert JWTSigner(TEST_SECRET).verify(body["data"]["token"]) == str(user["id"])


def test_password_is_stored_hashed(client, database, register) -> None:
    register(password="secret1")

    with database.SessionLocal() as db:
        user = db.scalars(select(User)).one()
    assert user.hashed_password != "secret1"
    assert user.hashed_password.startswith("$2")


def test_register_then_login_with_same_credentials(client, register) -> None:
    register(email="a@x.com", password="secret1")

    res = client.post("/api/users/login", json={"email": "a@x.com", "password": "secret1"})

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["email"] == "a@x.com"

    me = client.get("/api/users/me", headers=auth(body["data"]["token"]))
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "a@x.com"


def test_duplicate_email_is_rejected(client, register) -> None:
    register(email="a@x.com")

    res = client.post(
        "/api/users/register",
        json={"name": "Other", "email": "a@x.com", "password": "another1"},
    )

    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "message": "User with this email already exists",
        "data": None,
    }


def test_email_is_normalized_for_uniqueness_and_login(client, register) -> None:
    register(email="Ann@Example.COM")

    dup = client.post(
        "/api/users/register",
        json={"name": "Ann", "email": "ann@example.com", "password": "secret1"},
    )
    assert dup.status_code == 400

    res = client.post("/api/users/login", json={"email": " ANN@example.com ", "password": "secret1"})
    assert res.status_code == 200
    assert res.json()["data"]["user"]["email"] == "ann@example.com"


def test_wrong_password_and_unknown_email_fail_identically(client, register) -> None:
    register(email="a@x.com", password="secret1")

    wrong_password = client.post("/api/users/login", json={"email": "a@x.com", "password": "nope123"})
    unknown_email = client.post("/api/users/login", json={"email": "b@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "success": False,
        "message": "Invalid email or password",
        "data": None,
    }


def test_register_validation_messages(client) -> None:
    short_password = client.post(
        "/api/users/register",
        json={"name": "Ann", "email": "a@x.com", "password": "123"},
    )
    assert short_password.status_code == 400
    assert short_password.json()["message"] == "Password must be at least 6 characters long"

    short_name = client.post(
        "/api/users/register",
        json={"name": " A ", "email": "a@x.com", "password": "secret1"},
    )
    assert short_name.status_code == 400
    assert short_name.json()["message"] == "Name must be between 2 and 50 characters"

    bad_email = client.post(
        "/api/users/register",
        json={"name": "Ann", "email": "not-an-email", "password": "secret1"},
    )
    assert bad_email.status_code == 400
    assert bad_email.json()["success"] is False
    assert bad_email.json()["data"] is None


def test_login_requires_password(client) -> None:
    res = client.post("/api/users/login", json={"email": "a@x.com", "password": ""})

    assert res.status_code == 400
    assert res.json()["message"] == "Password is required"


def test_me_requires_token(client) -> None:
    res = client.get("/api/users/me")

    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "message": "Not authorized to access this route. Please login.",
        "data": None,
    }


def test_only_exact_bearer_header_is_accepted(client, register) -> None:
    token = register()

    for header in (token, f"bearer {token}", f"Token {token}", f"Bearer  {token}", "Bearer "):
        res = client.get("/api/users/me", headers={"Authorization": header})
        assert res.status_code == 401, header
        assert res.json()["message"] == "Not authorized to access this route. Please login."


def test_expired_and_tampered_tokens_look_the_same(client, register) -> None:
    token = register()
    user_id = JWTSigner(TEST_SECRET).verify(token)

    expired = create_access_token(
        {"sub": user_id, "type": "access"},
        secret=TEST_SECRET,
        expires_delta=timedelta(seconds=-5),
    )
    forged = JWTSigner("some-other-secret").issue(user_id)
    garbage = token.rsplit(".", 1)[0] + ".invalidsignature"

    responses = [client.get("/api/users/me", headers=auth(t)) for t in (expired, forged, garbage)]

    assert {r.status_code for r in responses} == {401}
    assert {r.json()["message"] for r in responses} == {"Not authorized. Token verification failed."}


def test_token_for_vanished_user_is_rejected(client, database, register) -> None:
    token = register()

    with database.SessionLocal() as db:
        db.delete(db.scalars(select(User)).one())
        db.commit()

    res = client.get("/api/tasks", headers=auth(token))

    assert res.status_code == 401
    assert res.json()["message"] == "User not found. Token may be invalid."
