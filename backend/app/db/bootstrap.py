from __future__ import annotations

import logging

from sqlalchemy import inspect

from app.core.exceptions import ConfigurationError
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role", "department_id"},
    "teachers": {"id", "email", "department", "max_hours", "load_hours", "teacher_code", "assigned_courses"},
    "courses": {
        "id",
        "code",
        "semester",
        "department",
        "faculty_list",
        "lecture_hours",
        "tutorial_hours",
        "practical_hours",
        "is_common_course",
    },
    "departments": {"id", "name", "hod_id"},
    "colleges": {"id", "code", "type", "status"},
    "rooms": {"id", "number", "faculty", "capacity", "free_timings"},
    "batches": {"id", "name", "branch_id", "semester", "student_count"},
    "semesters": {"id", "name", "status"},
    "settings": {"id", "type", "active_semester_ids"},
}


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise ConfigurationError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise ConfigurationError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
