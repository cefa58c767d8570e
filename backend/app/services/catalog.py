from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.course import Course
from app.models.department import Department
from app.models.teacher import Teacher
from app.services.weekly_hours import course_weekly_hours
from app.services.workload import normalize_assigned_courses

COMMON_DEPARTMENT_LITERALS = frozenset({"common", "Common", "COMMON"})
COMMON_DEPARTMENT_NAMES = frozenset({"common", "common department"})


def common_department_ids(db: Session) -> set[str]:
    rows = db.execute(
        select(Department.id).where(func.lower(Department.name).in_(COMMON_DEPARTMENT_NAMES))
    ).scalars()
    return set(rows)


def is_common_department(department: str | None, common_ids: set[str]) -> bool:
    if not department:
        return False
    return department in COMMON_DEPARTMENT_LITERALS or department in common_ids


def is_common_course(course: Course, common_ids: set[str]) -> bool:
    """Single answer to "is this course shared across departments"."""
    return bool(course.is_common_course) or is_common_department(course.department, common_ids)


def common_course_clause(common_ids: set[str]):
    departments = set(COMMON_DEPARTMENT_LITERALS) | common_ids
    return or_(Course.is_common_course.is_(True), Course.department.in_(departments))


def resolve_department(db: Session, value: str | None) -> str | None:
    """Department id for an id or (case-insensitive) name; unknown values pass through."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if db.get(Department, text) is not None:
        return text
    match = db.execute(
        select(Department).where(func.lower(Department.name) == text.lower())
    ).scalars().first()
    return match.id if match is not None else text


def department_keys(db: Session, department_id: str) -> set[str]:
    """Values under which teachers of a department may be filed: its id and its name."""
    keys = {department_id}
    department = db.get(Department, department_id)
    if department is not None:
        keys.add(department.name)
    return keys


def department_names(db: Session) -> dict[str, str]:
    return {row.id: row.name for row in db.execute(select(Department)).scalars()}


def faculty_ids_of(course: Course) -> list[str]:
    ids: list[str] = []
    for faculty_id in [course.faculty_id, *(course.faculty_list or [])]:
        if faculty_id and faculty_id not in ids:
            ids.append(faculty_id)
    return ids


def course_to_dict(
    course: Course,
    *,
    names: dict[str, str],
    common_ids: set[str],
    teachers: dict[str, Teacher] | None = None,
) -> dict:
    hours = course_weekly_hours(course)
    faculty_ids = faculty_ids_of(course)
    teachers = teachers or {}
    return {
        "id": course.id,
        "code": course.code,
        "title": course.title,
        "semester": course.semester,
        "department": course.department,
        "department_name": names.get(course.department or "", course.department),
        "faculty_id": course.faculty_id,
        "faculty_list": faculty_ids,
        "faculty_names": [teachers[item].name for item in faculty_ids if item in teachers],
        "lecture_hours": hours.lecture,
        "tutorial_hours": hours.tutorial,
        "practical_hours": hours.practical,
        "weekly_hours": course.weekly_hours,
        "total_hours": hours.total,
        "credits": course.credits,
        "type": course.type,
        "description": course.description,
        "prerequisites": course.prerequisites or [],
        "is_common_course": is_common_course(course, common_ids),
        "active": course.active,
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def add_course_to_teacher(teacher: Teacher, course_id: str, semester: str) -> None:
    assigned = normalize_assigned_courses(teacher.assigned_courses)
    bucket = assigned.setdefault(semester, [])
    if course_id not in bucket:
        bucket.append(course_id)
    teacher.assigned_courses = assigned


def remove_course_from_teacher(teacher: Teacher, course_id: str) -> bool:
    assigned = normalize_assigned_courses(teacher.assigned_courses)
    changed = False
    for semester in list(assigned):
        if course_id in assigned[semester]:
            assigned[semester] = [item for item in assigned[semester] if item != course_id]
            changed = True
        if not assigned[semester]:
            del assigned[semester]
    if changed:
        teacher.assigned_courses = assigned
    return changed


def detach_course_from_teachers(db: Session, course: Course) -> list[Teacher]:
    """Drop ``course`` from every teacher that lists it; returns the touched teachers."""
    touched: list[Teacher] = []
    for teacher in db.execute(select(Teacher)).scalars():
        if remove_course_from_teacher(teacher, course.id):
            touched.append(teacher)
    return touched


def detach_teacher_from_courses(db: Session, teacher_id: str) -> list[Course]:
    """Drop ``teacher_id`` from every course faculty list; returns the touched courses."""
    touched: list[Course] = []
    for course in db.execute(select(Course)).scalars():
        faculty_ids = faculty_ids_of(course)
        if teacher_id not in faculty_ids:
            continue
        remaining = [item for item in faculty_ids if item != teacher_id]
        course.faculty_list = remaining
        course.faculty_id = remaining[0] if remaining else None
        touched.append(course)
    return touched


def find_teacher(teachers: list[Teacher], reference: str | None) -> Teacher | None:
    """Match a teacher by id, exact email or a name fragment."""
    if not reference:
        return None
    needle = str(reference).strip()
    lowered = needle.lower()
    for teacher in teachers:
        if teacher.id == needle or teacher.email.lower() == lowered:
            return teacher
    for teacher in teachers:
        if lowered and lowered in teacher.name.lower():
            return teacher
    return None
