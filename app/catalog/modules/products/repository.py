"""
Persistence primitives for products. No business rules here.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.catalog.modules.products.models import Product


def find_all(s: Session) -> list[Product]:
    return list(s.scalars(select(Product).order_by(Product.id.asc())))


def find_by_id(s: Session, product_id: int) -> Product | None:
    return s.get(Product, product_id)


def create(s: Session, *, name: str, price: float, section_id: int) -> Product:
    product = Product(name=name, price=price, section_id=section_id)
    s.add(product)
    s.flush()
    return product


def update(s: Session, product: Product, fields: dict[str, Any]) -> Product:
    for key, value in fields.items():
        setattr(product, key, value)
    s.flush()
    return product


def delete(s: Session, product: Product) -> None:
    s.delete(product)
    s.flush()
