from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Protocol

from flask import Blueprint, current_app, g, request, session
from sqlalchemy import select
from werkzeug.security import check_password_hash

from app.catalog.constants import ROLES, Messages
from app.catalog.db import db_session
from app.catalog.errors import error_response
from app.catalog.models import User

bp = Blueprint("auth", __name__)

SESSION_KEY = "user"

_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds


@dataclass(frozen=True)
class SessionUser:
    id: int
    username: str
    role: str


class UserDirectory(Protocol):
    def verify(self, username: str, password: str) -> SessionUser | None:
        """Return the identity when the credentials match, otherwise None."""
        ...


class DatabaseUserDirectory:
    """Users table with werkzeug password hashes."""

    def verify(self, username: str, password: str) -> SessionUser | None:
        s = db_session()
        user = s.scalars(select(User).where(User.username == username)).one_or_none()
        if not user or not user.is_active or not check_password_hash(user.password_hash, password):
            return None
        return SessionUser(id=user.id, username=user.username, role=user.role)


def user_directory() -> UserDirectory:
    directory = current_app.extensions.get("user_directory")
    if directory is None:
        directory = DatabaseUserDirectory()
        current_app.extensions["user_directory"] = directory
    return directory


def _login_attempts() -> dict[str, list[datetime]]:
    # per app instance
    return current_app.extensions.setdefault("login_attempts", defaultdict(list))


def _check_rate_limit(ip: str) -> bool:
    attempts = _login_attempts()
    now = datetime.utcnow()
    cutoff = now - timedelta(seconds=_LOGIN_RATE_WINDOW)
    # Prune every client, not just this one, so IPs that never return are dropped.
    for key in list(attempts):
        recent = [t for t in attempts[key] if t > cutoff]
        if recent:
            attempts[key] = recent
        else:
            del attempts[key]
    return len(attempts.get(ip, ())) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _login_attempts()[ip].append(datetime.utcnow())


def get_session() -> SessionUser | None:
    """
    Reads the identity from the signed session cookie.
    Anything that is not the expected structure counts as logged out.
    """
    data = session.get(SESSION_KEY)
    if not isinstance(data, dict):
        return None
    try:
        user = SessionUser(id=int(data["id"]), username=str(data["username"]), role=str(data["role"]))
    except (KeyError, TypeError, ValueError):
        return None
    if user.role not in ROLES:
        return None
    return user


def login(username: str, password: str) -> SessionUser | None:
    user = user_directory().verify(username, password)
    if user is None:
        return None
    session.clear()
    session[SESSION_KEY] = asdict(user)
    session.permanent = True  # PERMANENT_SESSION_LIFETIME (one day)
    return user


def logout() -> None:
    session.clear()


def load_current_user() -> None:
    """
    Resolves g.current_user from the session cookie.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    g.current_user = get_session()


@bp.post("/login")
def login_post():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return error_response(Messages.CREDENTIALS_REQUIRED, 400)

    ip = request.remote_addr or "unknown"
    if _check_rate_limit(ip):
        current_app.logger.warning("Login rate limited (ip=%s request_id=%s)", ip, getattr(g, "request_id", None))
        return error_response(Messages.TOO_MANY_ATTEMPTS, 429)
    _record_attempt(ip)

    user = login(username, password)
    if user is None:
        current_app.logger.warning("Login failed (username=%s request_id=%s)", username, getattr(g, "request_id", None))
        return error_response(Messages.INVALID_CREDENTIALS, 401)

    _login_attempts()[ip].clear()
    current_app.logger.info("Login ok (user_id=%s role=%s)", user.id, user.role)
    return {"user": asdict(user)}


@bp.post("/logout")
def logout_post():
    logout()
    return {"ok": True}


@bp.get("/session")
def session_get():
    user = get_session()
    return {"user": asdict(user) if user else None}
