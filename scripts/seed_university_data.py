"""Seed a SuperAdmin, departments, semesters and the example import datasets.

Run:
  PYTHONPATH=backend python scripts/seed_university_data.py
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import func, select

from app.core.config import get_settings
from app.core.security import get_password_hash
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.department import Department
from app.models.semester import Semester
from app.models.teacher import Teacher
from app.models.user import User, UserRole
from app.services.importers import (
    EXAMPLE_DATASETS,
    extract_records,
    import_course_record,
    import_room_record,
    import_teacher_record,
)
from app.services.semesters import auto_activate_semesters, default_semesters

logger = logging.getLogger("seed")

DEFAULT_PASSWORD = os.getenv("SEED_DEFAULT_PASSWORD", "CampusAdmin123!")
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "superadmin@university.edu").strip().lower()
DEPARTMENTS = [
    ("Computer Science", "Engineering"),
    ("Electrical Engineering", "Engineering"),
    ("Mechanical Engineering", "Engineering"),
    ("Common", "Science"),
]


def upsert_admin(session) -> User:
    user = session.execute(select(User).where(User.email == ADMIN_EMAIL)).scalar_one_or_none()
    if user is None:
        user = User(name="Super Admin", email=ADMIN_EMAIL, role=UserRole.super_admin)
        session.add(user)
    user.hashed_password = get_password_hash(DEFAULT_PASSWORD)
    user.is_active = True
    return user


def seed_departments(session) -> None:
    for name, category in DEPARTMENTS:
        exists = session.execute(select(Department).where(Department.name == name)).scalar_one_or_none()
        if exists is None:
            session.add(Department(name=name, category=category))
    session.flush()


def seed_semesters(session) -> None:
    for name in default_semesters(include_all=True):
        if session.execute(select(Semester).where(Semester.name == name)).scalar_one_or_none() is None:
            session.add(Semester(name=name))
    session.flush()
    auto_activate_semesters(session)


def seed_examples(session) -> dict[str, int]:
    settings = get_settings()
    loaders = {
        "teachers": lambda record: import_teacher_record(
            session,
            record,
            email_domain=settings.generated_email_domain,
            default_max_hours=settings.default_max_hours,
        ),
        "courses": lambda record: import_course_record(session, record, fallback_department="Computer Science"),
        "rooms": lambda record: import_room_record(session, record),
    }
    loaded: dict[str, int] = {}
    for kind, load in loaders.items():
        results = [load(record) for record in extract_records(EXAMPLE_DATASETS[kind], kind)]
        failures = [item for item in results if not item["success"]]
        for failure in failures:
            logger.warning("Skipped %s record: %s", kind, failure["error"])
        loaded[kind] = len(results) - len(failures)
    return loaded


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        upsert_admin(session)
        seed_departments(session)
        seed_semesters(session)
        loaded = seed_examples(session)
        session.commit()
        teacher_count = session.execute(select(func.count(Teacher.id))).scalar_one()

    logger.info("Seeded admin %s (password from SEED_DEFAULT_PASSWORD)", ADMIN_EMAIL)
    logger.info("Loaded example data: %s; %d teacher(s) in total", loaded, teacher_count)


if __name__ == "__main__":
    main()
