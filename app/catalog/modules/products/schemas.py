from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


def require_number(value: Any) -> Any:
    # bool is an int subclass; numeric strings are not numbers either
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Price must be a number")
    return value


def require_integer(value: Any) -> Any:
    """Ints, and floats without a fractional part (JSON 3.0 is the integer 3)."""
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Section ID must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Section ID must be an integer")
        return int(value)
    return value


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: StrictStr = Field(..., min_length=1)
    # Infinity/NaN parse from JSON but cannot be serialized back
    price: float = Field(..., gt=0, allow_inf_nan=False)
    section_id: int = Field(..., alias="sectionId", gt=0)

    @field_validator("price", mode="before")
    @classmethod
    def price_is_number(cls, v: Any) -> Any:
        return require_number(v)

    @field_validator("section_id", mode="before")
    @classmethod
    def section_id_is_integer(cls, v: Any) -> Any:
        return require_integer(v)


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[StrictStr] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    section_id: Optional[int] = Field(default=None, alias="sectionId", gt=0)

    @field_validator("price", mode="before")
    @classmethod
    def price_is_number(cls, v: Any) -> Any:
        return require_number(v)

    @field_validator("section_id", mode="before")
    @classmethod
    def section_id_is_integer(cls, v: Any) -> Any:
        return require_integer(v)
