from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from app.catalog.constants import Messages
from app.catalog.db import FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION, integrity_kind
from app.catalog.errors import ConstraintViolationError, NotFoundError
from app.catalog.modules.products import repository
from app.catalog.modules.sections import repository as section_repository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.catalog.modules.products.models import Product
    from app.catalog.modules.products.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def _require_section(s: "Session", section_id: int) -> None:
    if section_repository.find_by_id(s, section_id) is None:
        raise NotFoundError(Messages.SECTION_NOT_FOUND)


def _translate_write_error(s: "Session", e: IntegrityError) -> Exception:
    """
    The section pre-check is not atomic with the write; a section deleted in
    between surfaces here as a foreign key violation.
    """
    s.rollback()
    kind = integrity_kind(e)
    if kind == FOREIGN_KEY_VIOLATION:
        return NotFoundError(Messages.SECTION_NOT_FOUND)
    if kind == UNIQUE_VIOLATION:
        return ConstraintViolationError(Messages.PRODUCT_NAME_TAKEN)
    return ConstraintViolationError(Messages.CONSTRAINT_VIOLATION)


def list_products(s: "Session") -> list["Product"]:
    return repository.find_all(s)


def get_product(s: "Session", product_id: int) -> "Product":
    product = repository.find_by_id(s, product_id)
    if product is None:
        raise NotFoundError(Messages.PRODUCT_NOT_FOUND)
    return product


def create_product(s: "Session", data: "ProductCreate") -> "Product":
    _require_section(s, data.section_id)
    try:
        product = repository.create(s, name=data.name, price=data.price, section_id=data.section_id)
    except IntegrityError as e:
        raise _translate_write_error(s, e) from e
    logger.info("product.create id=%s name=%s section_id=%s", product.id, product.name, product.section_id)
    return product


def update_product(s: "Session", product_id: int, data: "ProductUpdate") -> "Product":
    product = get_product(s, product_id)
    fields = data.model_dump(exclude_none=True)
    if "section_id" in fields:
        _require_section(s, fields["section_id"])
    if not fields:
        return product
    try:
        repository.update(s, product, fields)
    except IntegrityError as e:
        raise _translate_write_error(s, e) from e
    logger.info("product.edit id=%s fields=%s", product.id, sorted(fields))
    return product


def delete_product(s: "Session", product_id: int) -> None:
    product = get_product(s, product_id)
    repository.delete(s, product)
    logger.info("product.delete id=%s", product_id)
