"""
Central constants for the catalog application.
"""
from __future__ import annotations

# Roles (closed set)
ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ROLES = frozenset({ROLE_USER, ROLE_ADMIN})

# URL namespaces
AUTH_PREFIX = "/api/auth"
API_V1_PREFIX = "/api/v1"

# Methods that mutate resources; admin only under API_V1_PREFIX
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class Messages:
    INTERNAL_SERVER_ERROR = "Internal Server Error"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden: Admin access required"
    NOT_FOUND = "Not found"
    VALIDATION_FAILED = "Validation failed"
    CONSTRAINT_VIOLATION = "Request conflicts with existing data"

    PRODUCT_NOT_FOUND = "Product not found"
    SECTION_NOT_FOUND = "Section not found"
    SECTION_IN_USE = "Section still has products"
    SECTION_NAME_TAKEN = "A section with this name already exists"
    PRODUCT_NAME_TAKEN = "A product with this name already exists"

    CREDENTIALS_REQUIRED = "Username and password required"
    INVALID_CREDENTIALS = "Invalid credentials"
    TOO_MANY_ATTEMPTS = "Too many login attempts. Please wait 5 minutes."

    CHAT_UNAVAILABLE = "Chat is not configured"
    CHAT_UPSTREAM_FAILED = "Chat service failed to respond"
