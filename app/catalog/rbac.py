"""
Request gate: the single enforcement point for authentication and role-based
write authorization. Runs before every handler; handlers and services do not
repeat these checks.
"""
from __future__ import annotations

import enum

from flask import current_app, g, request

from app.catalog.auth import SessionUser
from app.catalog.constants import API_V1_PREFIX, AUTH_PREFIX, ROLE_ADMIN, WRITE_METHODS, Messages
from app.catalog.errors import error_response


class GateDecision(enum.Enum):
    PASS = "pass"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def evaluate_request(method: str, path: str, user: SessionUser | None) -> GateDecision:
    if _under(path, AUTH_PREFIX):
        return GateDecision.PASS
    if _under(path, API_V1_PREFIX):
        if user is None:
            return GateDecision.UNAUTHENTICATED
        if method.upper() in WRITE_METHODS and user.role != ROLE_ADMIN:
            return GateDecision.UNAUTHORIZED
    return GateDecision.PASS


def gate_request():
    """before_request hook; returns a response only when the request is rejected."""
    user: SessionUser | None = g.get("current_user")
    decision = evaluate_request(request.method, request.path, user)
    if decision is GateDecision.UNAUTHENTICATED:
        current_app.logger.warning(
            "Unauthenticated %s %s (request_id=%s)", request.method, request.path, getattr(g, "request_id", None)
        )
        return error_response(Messages.UNAUTHORIZED, 401)
    if decision is GateDecision.UNAUTHORIZED:
        current_app.logger.warning(
            "Forbidden %s %s user_id=%s role=%s (request_id=%s)",
            request.method,
            request.path,
            user.id,
            user.role,
            getattr(g, "request_id", None),
        )
        return error_response(Messages.FORBIDDEN, 403)
    return None
