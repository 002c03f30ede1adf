from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.catalog.constants import Messages
from app.catalog.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def violations_from(exc: PydanticValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{"field": ..., "message": ...}]."""
    return [{"field": _field_name(tuple(err.get("loc") or ())), "message": err.get("msg", "")} for err in exc.errors()]


def validate_payload(schema: type[M], payload: Any) -> M:
    """
    Validate a decoded JSON body against a schema.

    Raises ValidationError with per-field details; callers never see a partially
    validated payload.
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            Messages.VALIDATION_FAILED,
            details=[{"field": "body", "message": "Request body must be a JSON object"}],
        )
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(Messages.VALIDATION_FAILED, details=violations_from(e)) from e
