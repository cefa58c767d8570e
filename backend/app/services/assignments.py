from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInputError, ResourceNotFoundError
from app.models.course import Course
from app.models.teacher import Teacher
from app.services.catalog import (
    add_course_to_teacher,
    common_course_clause,
    common_department_ids,
    department_keys,
    faculty_ids_of,
    remove_course_from_teacher,
)
from app.services.weekly_hours import course_weekly_hours
from app.services.workload import (
    LoadStatus,
    all_assigned_course_ids,
    course_assignment_stats,
    load_percentage,
    load_status,
    split_course_hours,
    workload_stats,
)

logger = logging.getLogger(__name__)

MULTI_FACULTY_MIN_HOURS = 4


def course_hours(course: Course) -> int:
    total = course_weekly_hours(course).total
    return total or (course.credits or 0)


def recompute_teacher_load(db: Session, teacher: Teacher, *, default_max_hours: int) -> None:
    """Rebuild ``load_hours`` and ``status`` from the teacher's current assignments."""
    hours = 0
    for course_id in all_assigned_course_ids(teacher.assigned_courses):
        course = db.get(Course, course_id)
        if course is None:
            continue
        hours += split_course_hours(course_hours(course), max(1, len(faculty_ids_of(course))))
    teacher.load_hours = hours
    teacher.status = load_status(load_percentage(hours, teacher.max_hours, default_max_hours))


def _get_course_and_teacher(db: Session, course_id: str, teacher_id: str) -> tuple[Course, Teacher]:
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    if not course.semester:
        raise InvalidInputError(f"Course {course.code} does not have a semester assigned")
    return course, teacher


def assign_faculty(
    db: Session,
    course_id: str,
    teacher_id: str,
    *,
    replace: bool = False,
    default_max_hours: int,
) -> dict:
    course, teacher = _get_course_and_teacher(db, course_id, teacher_id)
    current = faculty_ids_of(course)
    if teacher.id in current:
        return {"changed": False, "course_id": course.id, "faculty_list": current}

    removed = [item for item in current if item != teacher.id] if replace else []
    new_list = [teacher.id] if replace else [*current, teacher.id]
    course.faculty_list = new_list
    course.faculty_id = new_list[0]

    for removed_id in removed:
        removed_teacher = db.get(Teacher, removed_id)
        if removed_teacher is not None:
            remove_course_from_teacher(removed_teacher, course.id)
            recompute_teacher_load(db, removed_teacher, default_max_hours=default_max_hours)

    add_course_to_teacher(teacher, course.id, course.semester)
    db.flush()
    for member_id in new_list:
        member = db.get(Teacher, member_id)
        if member is not None:
            recompute_teacher_load(db, member, default_max_hours=default_max_hours)

    logger.info("Assigned teacher %s to course %s (replace=%s)", teacher.id, course.code, replace)
    return {"changed": True, "course_id": course.id, "faculty_list": new_list, "removed": removed}


def remove_faculty(db: Session, course_id: str, teacher_id: str, *, default_max_hours: int) -> dict:
    course, teacher = _get_course_and_teacher(db, course_id, teacher_id)
    current = faculty_ids_of(course)
    if teacher.id not in current:
        return {"changed": False, "course_id": course.id, "faculty_list": current}

    remaining = [item for item in current if item != teacher.id]
    course.faculty_list = remaining
    course.faculty_id = remaining[0] if remaining else None
    remove_course_from_teacher(teacher, course.id)
    db.flush()

    recompute_teacher_load(db, teacher, default_max_hours=default_max_hours)
    for member_id in remaining:
        member = db.get(Teacher, member_id)
        if member is not None:
            recompute_teacher_load(db, member, default_max_hours=default_max_hours)
    return {"changed": True, "course_id": course.id, "faculty_list": remaining}


def department_courses(db: Session, department_id: str, semester: str | None = None, *, include_common: bool = True) -> list[Course]:
    condition = Course.department == department_id
    if include_common:
        condition = or_(condition, common_course_clause(common_department_ids(db)))
    statement = select(Course).where(condition)
    if semester:
        statement = statement.where(Course.semester == semester)
    return list(db.execute(statement.order_by(Course.code)).scalars())


def department_teachers(db: Session, department_id: str) -> list[Teacher]:
    keys = department_keys(db, department_id)
    return list(db.execute(select(Teacher).where(Teacher.department.in_(keys)).order_by(Teacher.name)).scalars())


def _expertise_matches(teacher: Teacher, course: Course) -> bool:
    haystack = f"{course.code} {course.title} {course.type}".lower()
    return any(item and item.lower() in haystack for item in (teacher.expertise or []))


def auto_assign(
    db: Session,
    department_id: str,
    *,
    semester: str | None = None,
    allow_multiple: bool = False,
    default_max_hours: int,
) -> dict:
    """Assign the least-loaded expertise match to each course, else the least-loaded available teacher.

    Single mode fills unassigned courses only. Multiple mode adds a second
    teacher to courses of at least ``MULTI_FACULTY_MIN_HOURS`` hours.
    """
    courses = department_courses(db, department_id, semester, include_common=False)
    targets = courses if allow_multiple else [course for course in courses if not faculty_ids_of(course)]
    candidates = [teacher for teacher in department_teachers(db, department_id) if teacher.active]

    assigned_count = 0
    for course in targets:
        current = faculty_ids_of(course)
        if allow_multiple and (course_hours(course) < MULTI_FACULTY_MIN_HOURS or len(current) >= 2):
            continue
        available = [
            teacher for teacher in candidates if teacher.status != LoadStatus.overloaded and teacher.id not in current
        ]
        pool = [teacher for teacher in available if _expertise_matches(teacher, course)] or available
        if not pool:
            continue
        pool.sort(key=lambda item: item.load_hours)
        result = assign_faculty(
            db,
            course.id,
            pool[0].id,
            replace=not allow_multiple,
            default_max_hours=default_max_hours,
        )
        if result["changed"]:
            assigned_count += 1

    logger.info("Auto-assigned %d of %d course(s) in department %s", assigned_count, len(targets), department_id)
    return {"assigned_count": assigned_count, "considered": len(targets)}


def assignment_overview(db: Session, department_id: str, semester: str | None = None) -> dict:
    teachers = department_teachers(db, department_id)
    courses = department_courses(db, department_id, semester)
    return {
        "workload": workload_stats((teacher.status, teacher.load_hours) for teacher in teachers),
        "courses": course_assignment_stats(faculty_ids_of(course) for course in courses),
    }
