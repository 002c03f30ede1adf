from __future__ import annotations

from flask import Blueprint, request

from app.catalog.db import db_session
from app.catalog.modules.sections.models import Section
from app.catalog.modules.sections.schemas import SectionCreate, SectionUpdate
from app.catalog.modules.sections.service import (
    create_section,
    delete_section,
    get_section,
    list_sections,
    update_section,
)
from app.catalog.validation import validate_payload

bp = Blueprint("sections", __name__)


def section_to_dict(section: Section) -> dict:
    return {"id": section.id, "name": section.name}


@bp.get("/sections")
def sections_list():
    s = db_session()
    return [section_to_dict(x) for x in list_sections(s)]


@bp.get("/sections/<int:section_id>")
def section_detail(section_id: int):
    s = db_session()
    return section_to_dict(get_section(s, section_id))


@bp.post("/sections")
def sections_create():
    s = db_session()
    data = validate_payload(SectionCreate, request.get_json(silent=True))
    section = create_section(s, data)
    s.commit()
    return section_to_dict(section), 201


@bp.put("/sections/<int:section_id>")
def section_update(section_id: int):
    s = db_session()
    data = validate_payload(SectionUpdate, request.get_json(silent=True))
    section = update_section(s, section_id, data)
    s.commit()
    return section_to_dict(section)


@bp.delete("/sections/<int:section_id>")
def section_delete(section_id: int):
    s = db_session()
    delete_section(s, section_id)
    s.commit()
    return "", 204
