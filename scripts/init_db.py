import os
import sys
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.catalog.constants import ROLE_ADMIN, ROLE_USER  # noqa: E402
from app.catalog.models import Product, Section, User  # noqa: E402
from scripts._db_utils import script_session  # noqa: E402

SAMPLE_CATALOG = {
    "Electronics": [("Laptop", 999.99), ("Smartphone", 699.99)],
    "Books": [("TypeScript Handbook", 29.99), ("Clean Code", 39.99)],
    "Clothing": [("T-Shirt", 19.99)],
}


def ensure_user(s: Session, username: str, password: str, role: str) -> User:
    """Create the user if missing. Never overwrites an existing password."""
    user = s.scalars(select(User).where(User.username == username)).one_or_none()
    if not user:
        user = User(username=username, password_hash=generate_password_hash(password), role=role, is_active=True)
        s.add(user)
    return user


def seed_catalog(s: Session) -> bool:
    """Insert the sample sections/products unless any section exists. Returns True when seeded."""
    if s.scalars(select(Section.id).limit(1)).first() is not None:
        return False
    for section_name, products in SAMPLE_CATALOG.items():
        section = Section(name=section_name)
        s.add(section)
        s.flush()
        for name, price in products:
            s.add(Product(name=name, price=price, section_id=section.id))
    return True


def seed_only(*, database_url: str | None = None) -> None:
    """
    Seed users and the sample catalog in an idempotent way.
    """
    user_password = os.environ.get("SEED_USER_PASSWORD") or "change-me"
    admin_password = os.environ.get("SEED_ADMIN_PASSWORD") or "change-me"

    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///catalog.db").strip()

    with script_session(db_url) as s:
        ensure_user(s, "user", user_password, ROLE_USER)
        ensure_user(s, "admin", admin_password, ROLE_ADMIN)
        seeded = seed_catalog(s)

    print("Initialized database (seed_only).")
    print("Users: user, admin (passwords from SEED_USER_PASSWORD / SEED_ADMIN_PASSWORD)")
    print("Sample catalog: " + ("inserted" if seeded else "already present, skipped"))


def main() -> None:
    seed_only(database_url=None)


if __name__ == "__main__":
    main()
