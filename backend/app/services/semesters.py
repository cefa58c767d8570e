from __future__ import annotations

import logging
import re
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidInputError, ResourceNotFoundError
from app.models.app_settings import GLOBAL_SETTINGS_TYPE, AppSettings
from app.models.semester import Semester

logger = logging.getLogger(__name__)

ACTIVE = "active"
INACTIVE = "inactive"
ALL_SEMESTER_NUMBERS = [1, 2, 3, 4, 5, 6, 7, 8]
_SEMESTER_PATTERN = re.compile(r"^Semester\s+([1-8])$")
_ANY_NUMBER = re.compile(r"(\d+)")


def current_academic_year(today: date | None = None) -> str:
    today = today or date.today()
    start = today.year if today.month >= 7 else today.year - 1
    return f"{start}-{str(start + 1)[-2:]}"


def current_semester_period(today: date | None = None) -> str:
    today = today or date.today()
    return "odd" if today.month >= 7 else "even"


def semester_numbers_for_period(period: str) -> list[int]:
    if period == "odd":
        return [1, 3, 5, 7]
    if period == "even":
        return [2, 4, 6, 8]
    return list(ALL_SEMESTER_NUMBERS)


def default_semesters(include_all: bool = False, today: date | None = None) -> list[str]:
    numbers = ALL_SEMESTER_NUMBERS if include_all else semester_numbers_for_period(current_semester_period(today))
    return [f"Semester {number}" for number in numbers]


def parse_semester_string(value: str | None) -> dict:
    if not value:
        return {"number": None, "is_valid": False, "type": None}
    match = _SEMESTER_PATTERN.match(value)
    if match is None:
        return {"number": None, "is_valid": False, "type": None}
    number = int(match.group(1))
    return {"number": number, "is_valid": True, "type": "odd" if number % 2 == 1 else "even"}


def format_semester_name(value: str) -> str:
    parsed = parse_semester_string(value)
    if parsed["is_valid"]:
        return f"Semester {parsed['number']}"

    match = _ANY_NUMBER.search(value or "")
    if match and 1 <= int(match.group(1)) <= 8:
        return f"Semester {int(match.group(1))}"

    logger.warning('Invalid semester format: "%s". Expected "Semester X" where X is 1-8', value)
    return value


def academic_period_info(today: date | None = None) -> dict:
    period = current_semester_period(today)
    return {
        "academic_year": current_academic_year(today),
        "period": period,
        "semester_numbers": semester_numbers_for_period(period),
        "default_semesters": default_semesters(today=today),
        "all_semesters": default_semesters(include_all=True),
    }


def list_semesters(db: Session) -> list[Semester]:
    return list(db.execute(select(Semester).order_by(Semester.created_at.desc())).scalars())


def get_global_settings(db: Session) -> AppSettings:
    settings_row = db.execute(
        select(AppSettings).where(AppSettings.type == GLOBAL_SETTINGS_TYPE)
    ).scalar_one_or_none()
    if settings_row is None:
        settings_row = AppSettings(type=GLOBAL_SETTINGS_TYPE, active_semester_ids=[])
        db.add(settings_row)
        db.flush()
    return settings_row


def _validated_name(db: Session, name: str, *, exclude_id: str | None = None) -> str:
    normalized = format_semester_name(name.strip())
    if not parse_semester_string(normalized)["is_valid"]:
        raise InvalidInputError(f'Invalid semester name "{name}". Expected "Semester X" where X is 1-8')
    existing = db.execute(select(Semester).where(Semester.name == normalized)).scalar_one_or_none()
    if existing is not None and existing.id != exclude_id:
        raise ConflictError(f"{normalized} already exists")
    return normalized


def create_semester(db: Session, name: str) -> Semester:
    semester = Semester(name=_validated_name(db, name), status=INACTIVE)
    db.add(semester)
    db.flush()
    return semester


def rename_semester(db: Session, semester_id: str, name: str) -> Semester:
    semester = db.get(Semester, semester_id)
    if semester is None:
        raise ResourceNotFoundError("Semester", semester_id)
    semester.name = _validated_name(db, name, exclude_id=semester.id)
    return semester


def delete_semester(db: Session, semester_id: str) -> None:
    semester = db.get(Semester, semester_id)
    if semester is None:
        raise ResourceNotFoundError("Semester", semester_id)
    if semester.status == ACTIVE:
        raise ConflictError("Cannot delete the active semester")
    db.delete(semester)


def activate_semester(db: Session, semester_id: str) -> Semester:
    """Make one semester active; every other semester row is rewritten inactive."""
    target = db.get(Semester, semester_id)
    if target is None:
        raise ResourceNotFoundError("Semester", semester_id)

    for semester in db.execute(select(Semester)).scalars():
        semester.status = ACTIVE if semester.id == target.id else INACTIVE

    settings_row = get_global_settings(db)
    settings_row.current_semester_id = target.id
    settings_row.current_semester_name = target.name
    settings_row.active_semester_ids = [target.id]
    logger.info("Activated %s", target.name)
    return target


def active_semester(db: Session) -> Semester | None:
    active = db.execute(
        select(Semester).where(Semester.status == ACTIVE).order_by(Semester.name)
    ).scalars().first()
    if active is not None:
        return active
    return db.execute(select(Semester).order_by(Semester.created_at.desc())).scalars().first()


def determine_current_semesters(semesters: list[Semester], today: date | None = None) -> list[Semester]:
    numbers = set(semester_numbers_for_period(current_semester_period(today)))
    matching = [
        semester
        for semester in semesters
        if parse_semester_string(semester.name)["number"] in numbers
    ]
    if matching:
        return matching
    latest = sorted(semesters, key=lambda item: item.created_at, reverse=True)
    return latest[:1]


def auto_activate_semesters(db: Session, today: date | None = None) -> list[Semester]:
    semesters = list_semesters(db)
    current = determine_current_semesters(semesters, today)
    current_ids = {semester.id for semester in current}
    for semester in semesters:
        semester.status = ACTIVE if semester.id in current_ids else INACTIVE

    settings_row = get_global_settings(db)
    settings_row.active_semester_ids = [semester.id for semester in current]
    if current:
        settings_row.current_semester_id = current[0].id
        settings_row.current_semester_name = current[0].name
    logger.info("Auto-activated %d semester(s) for the %s period", len(current), current_semester_period(today))
    return current
