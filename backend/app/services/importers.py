from __future__ import annotations

from collections.abc import Callable
from datetime import date
import logging
import math
import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import ImportFormatError
from app.models.college import College
from app.models.course import Course, CourseType
from app.models.room import ROOM_FACULTIES, Room
from app.models.teacher import Teacher
from app.services.catalog import (
    add_course_to_teacher,
    common_department_ids,
    find_teacher,
    is_common_department,
    resolve_department,
)
from app.services.weekly_hours import format_weekly_hours, parse_weekly_hours

logger = logging.getLogger(__name__)

IMPORT_KINDS = ("teachers", "courses", "rooms")
RECORD_KEYS: dict[str, tuple[str, ...]] = {
    "teachers": ("teachers", "faculty"),
    "courses": ("courses",),
    "rooms": ("rooms",),
}
DEPARTMENT_ALIASES = {
    "Mechanical": "Mechanical Engineering",
    "Electrical": "Electrical Engineering",
    "Civil": "Civil Engineering",
    "Agricultural": "Agricultural Engineering",
    "Footwear": "Footwear Technology",
}
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def extract_records(payload: Any, kind: str) -> list[Any]:
    """Return the record list of an uploaded JSON document.

    A top-level list is taken as-is; an object must carry its records under
    one of the keys accepted for ``kind`` (``teachers``/``faculty``,
    ``courses`` or ``rooms``).
    """
    if kind not in RECORD_KEYS:
        raise ImportFormatError(f"Unknown import kind: {kind}")
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in RECORD_KEYS[kind]:
            records = payload.get(key)
            if isinstance(records, list):
                return records
    expected = " or ".join(f"'{key}'" for key in RECORD_KEYS[kind])
    raise ImportFormatError(
        f"Invalid JSON format. Expected a list or an object with a {expected} array.",
        details={"kind": kind},
    )


def _field(record: dict, *names: str, default: Any = None) -> Any:
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return default


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _failure(record: Any, error: str) -> dict:
    return {"success": False, "error": error, "item": record}


def generated_email(name: str, domain: str) -> str:
    return f"{_NON_ALNUM.sub('', name).lower()}@{domain}"


def import_teacher_record(db: Session, record: Any, *, email_domain: str, default_max_hours: int) -> dict:
    if not isinstance(record, dict):
        return _failure(record, "Record must be an object")
    name = _text(record.get("name"))
    if not name:
        return _failure(record, "Missing name field")

    department = _text(record.get("department"))
    department = DEPARTMENT_ALIASES.get(department, department)
    email = _text(record.get("email")).lower() or generated_email(name, email_domain)

    expertise = record.get("expertise")
    if isinstance(expertise, str):
        expertise = [expertise]
    elif not isinstance(expertise, list):
        expertise = []

    values = {
        "name": name,
        "email": email,
        "department": department or None,
        "expertise": [str(item) for item in expertise],
        "qualification": _text(record.get("qualification")) or "Not specified",
        "experience": _int(record.get("experience")),
        "active": record.get("active") is not False,
        "employee_id": _text(_field(record, "employeeId", "employee_id", "id")) or None,
        "phone_number": _text(_field(record, "phoneNumber", "phone_number", "phone")) or None,
        "address": _text(record.get("address")) or None,
        "joining_date": _text(_field(record, "joiningDate", "joining_date")) or date.today().isoformat(),
        "designation": _text(record.get("designation")) or "Faculty",
    }

    teacher = db.execute(select(Teacher).where(Teacher.email == email)).scalar_one_or_none()
    action = "updated"
    if teacher is None:
        teacher = Teacher(max_hours=default_max_hours, role="Faculty", status="available", assigned_courses={})
        db.add(teacher)
        action = "created"
    for field_name, value in values.items():
        setattr(teacher, field_name, value)
    db.flush()
    return {"success": True, "action": action, "id": teacher.id, "name": name, "item": record}


def import_course_record(
    db: Session,
    record: Any,
    *,
    fallback_department: str | None = None,
    forced_department: str | None = None,
) -> dict:
    """Upsert one course keyed by code, semester and department.

    ``forced_department`` pins every record to one department (HOD imports);
    such imports may not create common courses.
    """
    if not isinstance(record, dict):
        return _failure(record, "Record must be an object")
    code = _text(record.get("code")).upper()
    title = _text(record.get("title"))
    semester = _text(record.get("semester"))
    if not code or not title or not semester:
        return _failure(record, "Missing required fields (code, title, or semester)")

    common_ids = common_department_ids(db)
    if forced_department:
        if is_common_department(_text(record.get("department")), common_ids) or record.get("isCommonCourse") is True:
            return _failure(record, "Common courses can only be imported by a SuperAdmin")
        department = forced_department
    else:
        department = resolve_department(db, _field(record, "department")) or resolve_department(db, fallback_department)
    if not department:
        return _failure(record, "No department specified in course data and no target department provided")

    hours = parse_weekly_hours(
        record.get("weeklyHours", record.get("weekly_hours")),
        {
            "lecture_hours": _field(record, "lectureHours", "lecture_hours"),
            "tutorial_hours": _field(record, "tutorialHours", "tutorial_hours"),
            "practical_hours": _field(record, "practicalHours", "practical_hours"),
        },
    )
    is_common = record.get("isCommonCourse") is True or is_common_department(department, common_ids)

    teachers = list(db.execute(select(Teacher)).scalars())
    faculty_reference = _text(record.get("faculty"))
    assigned = find_teacher(teachers, faculty_reference) if faculty_reference else None

    prerequisites = record.get("prerequisites")
    values = {
        "code": code,
        "title": title,
        "semester": semester,
        "department": department,
        "lecture_hours": hours.lecture,
        "tutorial_hours": hours.tutorial,
        "practical_hours": hours.practical,
        "weekly_hours": format_weekly_hours(hours.lecture, hours.tutorial, hours.practical),
        "credits": _int(record.get("credits")) or math.ceil(hours.total / 3),
        "type": _text(record.get("type")) or CourseType.core.value,
        "description": _text(record.get("description")) or None,
        "prerequisites": [str(item) for item in prerequisites] if isinstance(prerequisites, list) else [],
        "is_common_course": is_common,
        "active": record.get("active") is not False,
    }

    course = db.execute(
        select(Course).where(
            Course.code == code,
            Course.semester == semester,
            Course.department == department,
        )
    ).scalars().first()
    action = "updated"
    if course is None:
        course = Course(faculty_list=[])
        db.add(course)
        action = "created"
    for field_name, value in values.items():
        setattr(course, field_name, value)
    if assigned is not None:
        faculty_list = list(course.faculty_list or [])
        if assigned.id not in faculty_list:
            faculty_list.insert(0, assigned.id)
        course.faculty_list = faculty_list
        course.faculty_id = faculty_list[0]
    db.flush()

    if assigned is not None:
        add_course_to_teacher(assigned, course.id, semester)
    elif faculty_reference:
        logger.info("No teacher matched %r for course %s", faculty_reference, code)

    return {
        "success": True,
        "action": action,
        "id": course.id,
        "code": code,
        "title": title,
        "department": department,
        "faculty_id": assigned.id if assigned is not None else None,
        "item": record,
    }


def known_room_faculties(db: Session) -> list[str]:
    names = list(ROOM_FACULTIES)
    for college in db.execute(select(College).order_by(College.name)).scalars():
        if college.name not in names:
            names.append(college.name)
    return names


def import_room_record(db: Session, record: Any) -> dict:
    if not isinstance(record, dict):
        return _failure(record, "Record must be an object")
    number = _text(_field(record, "roomNumber", "number"))
    raw_capacity = record.get("capacity")
    faculty = _text(record.get("faculty"))

    errors: list[str] = []
    if not number:
        errors.append("Room number is required")
    if raw_capacity is None or raw_capacity == "":
        errors.append("Capacity is required")
    elif _int(raw_capacity, default=-1) < 0:
        errors.append("Capacity must be a valid positive number")
    valid_faculties = known_room_faculties(db)
    if not faculty:
        errors.append("Faculty is required")
    elif faculty not in valid_faculties:
        errors.append(f'Invalid faculty "{faculty}". Valid options: {", ".join(valid_faculties)}')
    if errors:
        return _failure(record, "; ".join(errors))

    features = record.get("features")
    values = {
        "number": number,
        "capacity": _int(raw_capacity),
        "features": [str(item) for item in features] if isinstance(features, list) else [],
        "faculty": faculty,
        "active": record.get("active") is not False,
        "building": _text(record.get("building")) or None,
        "floor": _text(record.get("floor")) or None,
        "type": _text(record.get("type")) or None,
        "description": _text(record.get("description")) or None,
    }

    room = db.execute(select(Room).where(Room.faculty == faculty, Room.number == number)).scalar_one_or_none()
    action = "updated"
    if room is None:
        room = Room()
        db.add(room)
        action = "created"
    for field_name, value in values.items():
        setattr(room, field_name, value)
    db.flush()
    return {"success": True, "action": action, "id": room.id, "room_number": number, "item": record}


def bind_record_handler(session_factory: sessionmaker, importer: Callable[..., dict], **options: Any):
    """Wrap a synchronous per-record importer as an async handler with its own session."""

    def run_sync(record: Any) -> dict:
        db = session_factory()
        try:
            result = importer(db, record, **options)
            if result.get("success"):
                db.commit()
            else:
                db.rollback()
            return result
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def handler(record: Any) -> dict:
        return await run_in_threadpool(run_sync, record)

    return handler


EXAMPLE_DATASETS: dict[str, dict] = {
    "teachers": {
        "teachers": [
            {
                "name": "Dr. John Smith",
                "email": "john.smith@university.edu",
                "department": "Electrical Engineering",
                "expertise": ["Power Systems", "Control Engineering"],
                "qualification": "Ph.D Electrical Engineering",
                "experience": 10,
                "active": True,
            },
            {
                "name": "Prof. Maria Garcia",
                "email": "maria.garcia@university.edu",
                "department": "Mechanical",
                "expertise": "Thermodynamics",
                "qualification": "Ph.D Mechanical Engineering",
                "experience": 8,
                "active": True,
            },
        ]
    },
    "courses": {
        "courses": [
            {
                "code": "CHM181",
                "title": "Chemistry for Engineers",
                "faculty": "Dr. Alex Johnson",
                "semester": "Semester 1",
                "lectureHours": 3,
                "tutorialHours": 1,
                "practicalHours": 0,
                "department": "Common",
                "type": "Core",
                "credits": 4,
                "description": "Fundamental concepts of chemistry for engineering applications.",
            },
            {
                "code": "CS101",
                "title": "Introduction to Computer Science",
                "faculty": "Dr. John Smith",
                "semester": "Semester 1",
                "lectureHours": 3,
                "tutorialHours": 0,
                "practicalHours": 2,
                "department": "Computer Science",
                "type": "Core",
                "credits": 4,
                "description": "Fundamental concepts of computer science including programming basics.",
            },
            {
                "code": "CS202",
                "title": "Data Structures and Algorithms",
                "faculty": None,
                "semester": "Semester 2",
                "weeklyHours": "3L+2P",
                "type": "Core",
                "description": "Advanced data structures, algorithm analysis, and problem-solving techniques.",
            },
        ]
    },
    "rooms": {
        "rooms": [
            {
                "roomNumber": "CS101",
                "capacity": 60,
                "features": ["Projector", "AC", "Wi-Fi"],
                "faculty": "Faculty of Engineering",
            },
            {
                "roomNumber": "LH201",
                "capacity": 120,
                "features": ["Projector", "SmartBoard", "Audio System"],
                "faculty": "Faculty of Science",
            },
        ]
    },
}
