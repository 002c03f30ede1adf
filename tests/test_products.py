"""Tests for Products module."""
import pytest
from sqlalchemy import func, select
from werkzeug.security import generate_password_hash

from app.catalog import create_app
from app.catalog.constants import ROLE_ADMIN, ROLE_USER
from app.catalog.db import session_scope
from app.catalog.errors import ConstraintViolationError, NotFoundError
from app.catalog.models import Base, Product, Section, User
from app.catalog.modules.products.schemas import ProductCreate, ProductUpdate
from app.catalog.modules.products.service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add_all(
            [
                User(username="user", password_hash=generate_password_hash("user"), role=ROLE_USER, is_active=True),
                User(username="admin", password_hash=generate_password_hash("admin"), role=ROLE_ADMIN, is_active=True),
            ]
        )
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def section_id(app):
    with session_scope(app) as s:
        section = Section(name="Electronics")
        s.add(section)
        s.flush()
        return section.id


def _login(client, username="admin"):
    r = client.post("/api/auth/login", json={"username": username, "password": username})
    assert r.status_code == 200


def _product_count(app) -> int:
    with session_scope(app) as s:
        return s.scalar(select(func.count()).select_from(Product))


def _payload(**kw):
    return ProductCreate.model_validate({"name": "Laptop", "price": 999.99, "sectionId": 1, **kw})


# ---------- Service ----------
def test_create_and_get(app, section_id):
    with session_scope(app) as s:
        product_id = create_product(s, _payload(sectionId=section_id)).id
    with session_scope(app) as s:
        p = get_product(s, product_id)
        assert (p.name, p.price, p.section_id) == ("Laptop", 999.99, section_id)


def test_create_with_missing_section_writes_nothing(app):
    with session_scope(app) as s:
        with pytest.raises(NotFoundError) as exc_info:
            create_product(s, _payload(sectionId=12345))
    assert exc_info.value.message == "Section not found"
    assert _product_count(app) == 0


def test_get_missing_product(app):
    with session_scope(app) as s:
        with pytest.raises(NotFoundError) as exc_info:
            get_product(s, 1)
    assert exc_info.value.message == "Product not found"


def test_update_checks_section(app, section_id):
    with session_scope(app) as s:
        product_id = create_product(s, _payload(sectionId=section_id)).id
    with session_scope(app) as s:
        with pytest.raises(NotFoundError) as exc_info:
            update_product(s, product_id, ProductUpdate.model_validate({"sectionId": 999}))
    assert exc_info.value.message == "Section not found"
    with session_scope(app) as s:
        assert get_product(s, product_id).section_id == section_id


def test_update_missing_product_before_section(app):
    with session_scope(app) as s:
        with pytest.raises(NotFoundError) as exc_info:
            update_product(s, 77, ProductUpdate.model_validate({"sectionId": 999}))
    assert exc_info.value.message == "Product not found"


def test_update_partial(app, section_id):
    with session_scope(app) as s:
        other = Section(name="Books")
        s.add(other)
        s.flush()
        other_id = other.id
        product_id = create_product(s, _payload(sectionId=section_id)).id
    with session_scope(app) as s:
        p = update_product(s, product_id, ProductUpdate.model_validate({"price": 899.0, "sectionId": other_id}))
        assert (p.name, p.price, p.section_id) == ("Laptop", 899.0, other_id)


def test_duplicate_product_name(app, section_id):
    with session_scope(app) as s:
        create_product(s, _payload(sectionId=section_id))
    with session_scope(app) as s:
        with pytest.raises(ConstraintViolationError):
            create_product(s, _payload(sectionId=section_id, price=1))
    assert _product_count(app) == 1


def test_delete(app, section_id):
    with session_scope(app) as s:
        product_id = create_product(s, _payload(sectionId=section_id)).id
    with session_scope(app) as s:
        delete_product(s, product_id)
    with session_scope(app) as s:
        assert list_products(s) == []
        with pytest.raises(NotFoundError):
            delete_product(s, product_id)


# ---------- HTTP ----------
def test_products_require_auth(client):
    assert client.get("/api/v1/products").status_code == 401
    assert client.delete("/api/v1/products/1").status_code == 401


def test_non_admin_write_forbidden(client, section_id):
    _login(client, "user")
    assert client.get("/api/v1/products").status_code == 200
    r = client.post("/api/v1/products", json={"name": "Laptop", "price": 1, "sectionId": section_id})
    assert r.status_code == 403


def test_electronics_laptop_scenario(client):
    _login(client)
    r = client.post("/api/v1/sections", json={"name": "Electronics"})
    assert r.status_code == 201
    n = r.json["id"]

    r = client.post("/api/v1/products", json={"name": "Laptop", "price": 999.99, "sectionId": n})
    assert r.status_code == 201
    product_id = r.json["id"]

    r = client.get(f"/api/v1/products/{product_id}")
    assert r.status_code == 200
    assert r.json == {"id": product_id, "name": "Laptop", "price": 999.99, "sectionId": n}


def test_negative_price_rejected(client):
    _login(client)
    r = client.post("/api/v1/products", json={"name": "X", "price": -1, "sectionId": 1})
    assert r.status_code == 400
    assert r.json["error"] == "Validation failed"
    assert "price" in [d["field"] for d in r.json["details"]]


def test_create_with_unknown_section(client, app):
    _login(client)
    r = client.post("/api/v1/products", json={"name": "X", "price": 1, "sectionId": 999})
    assert r.status_code == 404
    assert r.json == {"error": "Section not found"}
    assert _product_count(app) == 0


def test_update_and_delete_over_http(client, section_id):
    _login(client)
    product_id = client.post(
        "/api/v1/products", json={"name": "Laptop", "price": 999.99, "sectionId": section_id}
    ).json["id"]

    r = client.put(f"/api/v1/products/{product_id}", json={"price": 949.5})
    assert r.status_code == 200
    assert r.json["price"] == 949.5
    assert r.json["name"] == "Laptop"

    r = client.put(f"/api/v1/products/{product_id}", json={"sectionId": 999})
    assert r.status_code == 404
    assert r.json == {"error": "Section not found"}

    r = client.put("/api/v1/products/999", json={"price": 1})
    assert r.status_code == 404
    assert r.json == {"error": "Product not found"}

    assert client.delete(f"/api/v1/products/{product_id}").status_code == 204
    assert client.delete(f"/api/v1/products/{product_id}").status_code == 404
    assert client.get("/api/v1/products").json == []


def test_invalid_json_body(client):
    _login(client)
    r = client.post("/api/v1/products", data="not json", content_type="application/json")
    assert r.status_code == 400
    assert r.json["details"] == [{"field": "body", "message": "Request body must be a JSON object"}]


def test_login_then_user_write_scenario(client, section_id):
    assert client.post("/api/auth/login", json={"username": "user", "password": "wrong"}).status_code == 401
    r = client.post("/api/auth/login", json={"username": "user", "password": "user"})
    assert r.status_code == 200
    assert "session=" in (r.headers.get("Set-Cookie") or "")
    r = client.post("/api/v1/products", json={"name": "Laptop", "price": 1, "sectionId": section_id})
    assert r.status_code == 403


def test_infinite_price_rejected(client, section_id):
    _login(client)
    body = '{"name": "X", "price": Infinity, "sectionId": %d}' % section_id
    r = client.post("/api/v1/products", data=body, content_type="application/json")
    assert r.status_code == 400
    assert [d["field"] for d in r.json["details"]] == ["price"]

    r = client.get("/api/v1/products")
    assert r.status_code == 200
    assert r.json == []


def test_whole_float_section_id_over_http(client, section_id):
    _login(client)
    r = client.post("/api/v1/products", json={"name": "Laptop", "price": 10, "sectionId": float(section_id)})
    assert r.status_code == 201
    assert r.json["sectionId"] == section_id


def test_update_with_nulls_changes_nothing(client, section_id):
    _login(client)
    created = client.post("/api/v1/products", json={"name": "Laptop", "price": 10, "sectionId": section_id}).json
    r = client.put(f"/api/v1/products/{created['id']}", json={"name": None, "price": None, "sectionId": None})
    assert r.status_code == 200
    assert r.json == created
