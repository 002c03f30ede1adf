"""Tests for login/logout and the session cookie."""
from collections import defaultdict
from datetime import datetime, timedelta

import pytest
from werkzeug.security import generate_password_hash

from app.catalog import create_app
from app.catalog.auth import SessionUser, get_session
from app.catalog.constants import ROLE_ADMIN, ROLE_USER
from app.catalog.db import session_scope
from app.catalog.models import Base, User


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add_all(
            [
                User(username="user", password_hash=generate_password_hash("user"), role=ROLE_USER, is_active=True),
                User(username="admin", password_hash=generate_password_hash("admin"), role=ROLE_ADMIN, is_active=True),
                User(username="gone", password_hash=generate_password_hash("gone"), role=ROLE_ADMIN, is_active=False),
            ]
        )
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def test_login_wrong_password(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    assert r.json == {"error": "Invalid credentials"}
    assert "session=" not in (r.headers.get("Set-Cookie") or "")


def test_login_unknown_user(client):
    r = client.post("/api/auth/login", json={"username": "nobody", "password": "x"})
    assert r.status_code == 401


def test_login_inactive_user(client):
    r = client.post("/api/auth/login", json={"username": "gone", "password": "gone"})
    assert r.status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"username": "admin"},
        {"password": "admin"},
        {"username": "", "password": "admin"},
        {"username": 1, "password": "admin"},
    ],
)
def test_login_requires_username_and_password(client, body):
    r = client.post("/api/auth/login", json=body)
    assert r.status_code == 400
    assert r.json == {"error": "Username and password required"}


def test_login_non_json_body(client):
    r = client.post("/api/auth/login", data="username=admin", content_type="text/plain")
    assert r.status_code == 400


def test_login_success_sets_session(client):
    r = client.post("/api/auth/login", json={"username": "user", "password": "user"})
    assert r.status_code == 200
    assert r.json["user"]["username"] == "user"
    assert r.json["user"]["role"] == "USER"
    assert "password" not in r.json["user"]
    assert "session=" in (r.headers.get("Set-Cookie") or "")

    r = client.get("/api/auth/session")
    assert r.status_code == 200
    assert r.json["user"]["username"] == "user"


def test_session_endpoint_without_login(client):
    r = client.get("/api/auth/session")
    assert r.status_code == 200
    assert r.json == {"user": None}


def test_logout_clears_session(client):
    client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert client.get("/api/v1/sections").status_code == 200

    r = client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json == {"ok": True}

    assert client.get("/api/v1/sections").status_code == 401


def test_logout_without_session(client):
    r = client.post("/api/auth/logout")
    assert r.status_code == 200


def test_login_rate_limited(client):
    for _ in range(5):
        r = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
        assert r.status_code == 401
    r = client.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert r.status_code == 429


def test_stale_login_attempts_are_pruned(app):
    attempts = defaultdict(list)
    attempts["203.0.113.9"].append(datetime.utcnow() - timedelta(hours=1))
    app.extensions["login_attempts"] = attempts

    client = app.test_client()
    r = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
    assert r.status_code == 401
    assert "203.0.113.9" not in attempts
    assert len(attempts["127.0.0.1"]) == 1


def test_tampered_cookie_is_no_session(client):
    client.set_cookie("session", "eyJ1c2VyIjp7ImlkIjoyLCJyb2xlIjoiQURNSU4ifX0.forged.signature")
    r = client.get("/api/v1/sections")
    assert r.status_code == 401


def test_malformed_session_payload_is_no_session(client):
    with client.session_transaction() as sess:
        sess["user"] = {"id": "not-a-number", "username": "admin", "role": "ADMIN"}
    assert client.get("/api/v1/sections").status_code == 401

    with client.session_transaction() as sess:
        sess["user"] = {"id": 2, "username": "admin", "role": "ROOT"}
    assert client.get("/api/v1/sections").status_code == 401

    with client.session_transaction() as sess:
        sess["user"] = "admin"
    assert client.get("/api/v1/sections").status_code == 401


def test_get_session_reads_identity(app):
    with app.test_request_context():
        from flask import session

        assert get_session() is None
        session["user"] = {"id": 2, "username": "admin", "role": "ADMIN"}
        assert get_session() == SessionUser(id=2, username="admin", role="ADMIN")


def test_pluggable_user_directory(app):
    class StaticDirectory:
        def verify(self, username, password):
            if username == "svc" and password == "token":
                return SessionUser(id=99, username="svc", role=ROLE_ADMIN)
            return None

    app.extensions["user_directory"] = StaticDirectory()
    client = app.test_client()
    assert client.post("/api/auth/login", json={"username": "admin", "password": "admin"}).status_code == 401
    r = client.post("/api/auth/login", json={"username": "svc", "password": "token"})
    assert r.status_code == 200
    assert r.json["user"] == {"id": 99, "username": "svc", "role": "ADMIN"}
