"""
Domain error taxonomy and the single place that maps it onto HTTP responses.

Services raise these; handlers never build error responses by hand. The request
gate produces 401/403 on its own and does not go through this module.
"""
from __future__ import annotations

from typing import Any

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from app.catalog.constants import Messages


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(CatalogError):
    status_code = 404


class ValidationError(CatalogError):
    status_code = 400


class ConstraintViolationError(CatalogError):
    """The store rejected a write (foreign key or unique constraint)."""

    status_code = 409


class ChatUnavailableError(CatalogError):
    status_code = 503


class ChatUpstreamError(CatalogError):
    status_code = 502


def error_response(message: str, status: int, details: list[dict[str, Any]] | None = None):
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CatalogError)
    def _catalog_error(e: CatalogError):  # type: ignore[no-redef]
        if e.status_code >= 500:
            app.logger.error("%s (request_id=%s): %s", type(e).__name__, getattr(g, "request_id", None), e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):  # type: ignore[no-redef]
        if request.path.startswith("/api") and (e.code or 500) >= 400:
            message = Messages.NOT_FOUND if e.code == 404 else (e.name or "Error")
            return error_response(message, e.code or 500)
        return e

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):  # type: ignore[no-redef]
        app.logger.exception("Unhandled error (request_id=%s)", getattr(g, "request_id", None))
        return error_response(Messages.INTERNAL_SERVER_ERROR, 500)
