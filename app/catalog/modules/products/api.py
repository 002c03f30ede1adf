from __future__ import annotations

from flask import Blueprint, request

from app.catalog.db import db_session
from app.catalog.modules.products.models import Product
from app.catalog.modules.products.schemas import ProductCreate, ProductUpdate
from app.catalog.modules.products.service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from app.catalog.validation import validate_payload

bp = Blueprint("products", __name__)


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "sectionId": product.section_id,
    }


@bp.get("/products")
def products_list():
    s = db_session()
    return [product_to_dict(p) for p in list_products(s)]


@bp.get("/products/<int:product_id>")
def product_detail(product_id: int):
    s = db_session()
    return product_to_dict(get_product(s, product_id))


@bp.post("/products")
def products_create():
    s = db_session()
    data = validate_payload(ProductCreate, request.get_json(silent=True))
    product = create_product(s, data)
    s.commit()
    return product_to_dict(product), 201


@bp.put("/products/<int:product_id>")
def product_update(product_id: int):
    s = db_session()
    data = validate_payload(ProductUpdate, request.get_json(silent=True))
    product = update_product(s, product_id, data)
    s.commit()
    return product_to_dict(product)


@bp.delete("/products/<int:product_id>")
def product_delete(product_id: int):
    s = db_session()
    delete_product(s, product_id)
    s.commit()
    return "", 204
