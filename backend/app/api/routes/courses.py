import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.core.config import get_settings
from app.models.course import Course
from app.models.teacher import Teacher
from app.models.user import User, UserRole
from app.schemas.course import CourseCreate, CourseOut, CourseUpdate
from app.services.assignments import recompute_teacher_load
from app.services.audit import log_activity
from app.services.catalog import (
    add_course_to_teacher,
    common_course_clause,
    common_department_ids,
    course_to_dict,
    department_names,
    detach_course_from_teachers,
    faculty_ids_of,
    is_common_course,
    is_common_department,
    remove_course_from_teacher,
    resolve_department,
)
from app.services.importers import EXAMPLE_DATASETS
from app.services.weekly_hours import format_weekly_hours, parse_weekly_hours

router = APIRouter()
hod_router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()

ALL_SEMESTERS = "All Semesters"
HOUR_FIELDS = ("lecture_hours", "tutorial_hours", "practical_hours", "weekly_hours")


def _serialize(db: Session, courses: list[Course]) -> list[dict]:
    names = department_names(db)
    common_ids = common_department_ids(db)
    teacher_ids = {item for course in courses for item in faculty_ids_of(course)}
    teachers = {}
    if teacher_ids:
        teachers = {teacher.id: teacher for teacher in db.execute(select(Teacher).where(Teacher.id.in_(teacher_ids))).scalars()}
    return [course_to_dict(course, names=names, common_ids=common_ids, teachers=teachers) for course in courses]


def _apply_hours(course: Course, data: dict) -> None:
    components = {key: data.get(key) for key in ("lecture_hours", "tutorial_hours", "practical_hours")}
    explicit = {key: value for key, value in components.items() if value is not None}
    if explicit:
        current = {
            "lecture_hours": course.lecture_hours or 0,
            "tutorial_hours": course.tutorial_hours or 0,
            "practical_hours": course.practical_hours or 0,
        }
        current.update(explicit)
        hours = parse_weekly_hours(None, current)
    else:
        hours = parse_weekly_hours(data.get("weekly_hours"))
    course.lecture_hours = hours.lecture
    course.tutorial_hours = hours.tutorial
    course.practical_hours = hours.practical
    course.weekly_hours = format_weekly_hours(hours.lecture, hours.tutorial, hours.practical)
    if not course.credits:
        course.credits = math.ceil(hours.total / 3)


def _require_teachers(db: Session, teacher_ids: list[str]) -> list[Teacher]:
    teachers = []
    for teacher_id in teacher_ids:
        teacher = db.get(Teacher, teacher_id)
        if teacher is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Teacher {teacher_id} not found")
        teachers.append(teacher)
    return teachers


def _ensure_unique(db: Session, code: str, semester: str, department: str | None, exclude_id: str | None = None) -> None:
    statement = select(Course).where(Course.code == code, Course.semester == semester, Course.department == department)
    for existing in db.execute(statement).scalars():
        if existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Course {code} already exists for {semester} in this department",
            )


def _create_course(db: Session, payload: CourseCreate, department: str | None, current_user: User) -> Course:
    _ensure_unique(db, payload.code, payload.semester, department)
    teachers = _require_teachers(db, payload.faculty_list)

    data = payload.model_dump()
    course = Course(
        code=payload.code,
        title=payload.title,
        semester=payload.semester,
        department=department,
        faculty_id=payload.faculty_id,
        faculty_list=payload.faculty_list,
        credits=payload.credits or 0,
        type=payload.type,
        description=payload.description,
        prerequisites=payload.prerequisites,
        is_common_course=payload.is_common_course or is_common_department(department, common_department_ids(db)),
        active=payload.active,
    )
    _apply_hours(course, data)
    db.add(course)
    db.flush()

    for teacher in teachers:
        add_course_to_teacher(teacher, course.id, course.semester)
        recompute_teacher_load(db, teacher, default_max_hours=settings.default_max_hours)

    log_activity(
        db,
        user=current_user,
        action="create",
        entity_type="course",
        entity_id=course.id,
        description=f"Added course {course.code}",
    )
    return course


def _update_course(db: Session, course: Course, payload: CourseUpdate, current_user: User) -> Course:
    data = payload.model_dump(exclude_unset=True)
    if "department" in data:
        data["department"] = resolve_department(db, data["department"])

    old_semester = course.semester
    for key in ("code", "title", "semester", "department", "credits", "type", "description", "prerequisites", "is_common_course", "active"):
        if key not in data:
            continue
        value = data[key]
        if value is None and key in {"code", "title", "semester", "credits", "type", "prerequisites", "is_common_course", "active"}:
            continue
        setattr(course, key, value)
    if is_common_department(course.department, common_department_ids(db)):
        course.is_common_course = True
    _ensure_unique(db, course.code, course.semester, course.department, exclude_id=course.id)

    if any(key in data for key in HOUR_FIELDS):
        _apply_hours(course, data)

    teachers = [teacher for teacher in (db.get(Teacher, item) for item in faculty_ids_of(course)) if teacher is not None]
    if course.semester != old_semester:
        for teacher in teachers:
            remove_course_from_teacher(teacher, course.id)
            add_course_to_teacher(teacher, course.id, course.semester)
    db.flush()
    for teacher in teachers:
        recompute_teacher_load(db, teacher, default_max_hours=settings.default_max_hours)

    log_activity(
        db,
        user=current_user,
        action="update",
        entity_type="course",
        entity_id=course.id,
        details={"fields": sorted(data)},
    )
    return course


def _delete_course(db: Session, course: Course, current_user: User) -> None:
    touched = detach_course_from_teachers(db, course)
    code = course.code
    course_id = course.id
    db.delete(course)
    db.flush()
    for teacher in touched:
        recompute_teacher_load(db, teacher, default_max_hours=settings.default_max_hours)
    log_activity(
        db,
        user=current_user,
        action="delete",
        entity_type="course",
        entity_id=course_id,
        description=f"Deleted course {code}",
        details={"teachers_updated": len(touched)},
    )


@router.get("/", response_model=list[CourseOut])
def list_courses(
    department: str | None = Query(default=None, max_length=200),
    semester: str | None = Query(default=None, max_length=50),
    faculty: str | None = Query(default=None, max_length=36),
    search: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin, UserRole.tt_incharge)),
) -> list[dict]:
    statement = select(Course).order_by(Course.code)
    if department:
        statement = statement.where(Course.department == resolve_department(db, department))
    if semester and semester != ALL_SEMESTERS:
        statement = statement.where(Course.semester == semester)
    courses = list(db.execute(statement).scalars())
    if faculty:
        courses = [course for course in courses if faculty in faculty_ids_of(course)]

    rows = _serialize(db, courses)
    if search:
        needle = search.strip().lower()
        rows = [
            row
            for row in rows
            if needle in row["code"].lower()
            or needle in row["title"].lower()
            or needle in (row["department_name"] or "").lower()
        ]
    return rows


@router.get("/example")
def example_courses(current_user: User = Depends(get_current_user)) -> dict:
    return EXAMPLE_DATASETS["courses"]


@router.get("/{course_id}", response_model=CourseOut)
def get_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return _serialize(db, [course])[0]


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    course = _create_course(db, payload, resolve_department(db, payload.department), current_user)
    db.commit()
    db.refresh(course)
    return _serialize(db, [course])[0]


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: str,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    _update_course(db, course, payload, current_user)
    db.commit()
    db.refresh(course)
    return _serialize(db, [course])[0]


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    _delete_course(db, course, current_user)
    db.commit()
    return {"success": True}


def _hod_department(current_user: User) -> str:
    if not current_user.department_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="HOD account has no department")
    return current_user.department_id


def _hod_editable_course(db: Session, course_id: str, current_user: User) -> Course:
    department_id = _hod_department(current_user)
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    if is_common_course(course, common_department_ids(db)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="HODs cannot modify common courses. Please contact SuperAdmin.",
        )
    if course.department != department_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Course belongs to another department")
    return course


@hod_router.get("/", response_model=list[CourseOut])
def list_department_courses(
    semester: str | None = Query(default=None, max_length=50),
    include_common: bool = Query(default=True),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.hod)),
) -> list[dict]:
    department_id = _hod_department(current_user)
    condition = Course.department == department_id
    if include_common:
        condition = condition | common_course_clause(common_department_ids(db))
    statement = select(Course).where(condition).order_by(Course.code)
    if semester and semester != ALL_SEMESTERS:
        statement = statement.where(Course.semester == semester)
    return _serialize(db, list(db.execute(statement).scalars()))


@hod_router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_department_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.hod)),
) -> dict:
    department_id = _hod_department(current_user)
    if payload.is_common_course or is_common_department(payload.department, common_department_ids(db)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="HODs cannot add courses to the common department. Please contact SuperAdmin.",
        )
    course = _create_course(db, payload, department_id, current_user)
    db.commit()
    db.refresh(course)
    return _serialize(db, [course])[0]


@hod_router.put("/{course_id}", response_model=CourseOut)
def update_department_course(
    course_id: str,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.hod)),
) -> dict:
    course = _hod_editable_course(db, course_id, current_user)
    if payload.is_common_course or "department" in payload.model_fields_set:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="HODs cannot move courses between departments")
    _update_course(db, course, payload, current_user)
    db.commit()
    db.refresh(course)
    return _serialize(db, [course])[0]


@hod_router.delete("/{course_id}")
def delete_department_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.hod)),
) -> dict:
    course = _hod_editable_course(db, course_id, current_user)
    _delete_course(db, course, current_user)
    db.commit()
    return {"success": True}
