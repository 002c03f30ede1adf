from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from app.catalog.constants import Messages
from app.catalog.db import FOREIGN_KEY_VIOLATION, integrity_kind
from app.catalog.errors import ConstraintViolationError, NotFoundError
from app.catalog.modules.sections import repository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.catalog.modules.sections.models import Section
    from app.catalog.modules.sections.schemas import SectionCreate, SectionUpdate

logger = logging.getLogger(__name__)


def list_sections(s: "Session") -> list["Section"]:
    return repository.find_all(s)


def get_section(s: "Session", section_id: int) -> "Section":
    section = repository.find_by_id(s, section_id)
    if section is None:
        raise NotFoundError(Messages.SECTION_NOT_FOUND)
    return section


def create_section(s: "Session", data: "SectionCreate") -> "Section":
    try:
        section = repository.create(s, name=data.name)
    except IntegrityError as e:
        s.rollback()
        raise ConstraintViolationError(Messages.SECTION_NAME_TAKEN) from e
    logger.info("section.create id=%s name=%s", section.id, section.name)
    return section


def update_section(s: "Session", section_id: int, data: "SectionUpdate") -> "Section":
    section = get_section(s, section_id)
    fields = data.model_dump(exclude_none=True)
    if not fields:
        return section
    try:
        repository.update(s, section, fields)
    except IntegrityError as e:
        s.rollback()
        raise ConstraintViolationError(Messages.SECTION_NAME_TAKEN) from e
    logger.info("section.edit id=%s fields=%s", section.id, sorted(fields))
    return section


def delete_section(s: "Session", section_id: int) -> None:
    """
    Delete a section. Dependent products are not checked here: the products
    foreign key (ON DELETE RESTRICT) makes the store reject the delete.
    """
    section = get_section(s, section_id)
    try:
        repository.delete(s, section)
    except IntegrityError as e:
        s.rollback()
        if integrity_kind(e) == FOREIGN_KEY_VIOLATION:
            raise ConstraintViolationError(Messages.SECTION_IN_USE) from e
        raise ConstraintViolationError(Messages.CONSTRAINT_VIOLATION) from e
    logger.info("section.delete id=%s", section_id)
