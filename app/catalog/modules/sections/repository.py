"""
Persistence primitives for sections. No business rules here.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.catalog.modules.sections.models import Section


def find_all(s: Session) -> list[Section]:
    return list(s.scalars(select(Section).order_by(Section.id.asc())))


def find_by_id(s: Session, section_id: int) -> Section | None:
    return s.get(Section, section_id)


def create(s: Session, *, name: str) -> Section:
    section = Section(name=name)
    s.add(section)
    s.flush()
    return section


def update(s: Session, section: Section, fields: dict[str, Any]) -> Section:
    for key, value in fields.items():
        setattr(section, key, value)
    s.flush()
    return section


def delete(s: Session, section: Section) -> None:
    s.delete(section)
    s.flush()
