import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.course import Course, CourseType
from app.models.department import DEPARTMENT_CATEGORIES, Department
from app.models.teacher import Teacher
from app.models.user import User, UserRole
from app.schemas.department import (
    DepartmentCourseStats,
    DepartmentCreate,
    DepartmentOut,
    DepartmentUpdate,
    HodOption,
)
from app.services.audit import log_activity

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_ASSIGNED = "Not Assigned"
COURSE_TYPE_BUCKETS = (CourseType.core.value, CourseType.elective.value, CourseType.laboratory.value)


def _active_course_counts(db: Session) -> dict[str, int]:
    rows = db.execute(
        select(Course.department, func.count(Course.id)).where(Course.active.is_(True)).group_by(Course.department)
    ).all()
    return {department: count for department, count in rows if department}


def _to_out(department: Department, total_courses: int = 0) -> DepartmentOut:
    return DepartmentOut(
        id=department.id,
        name=department.name,
        category=department.category,
        college_id=department.college_id,
        description=department.description,
        active=department.active,
        hod_id=department.hod_id,
        hod=department.hod_name or NOT_ASSIGNED,
        status="Active" if department.active else "Inactive",
        total_courses=total_courses,
        created_at=department.created_at,
        updated_at=department.updated_at,
    )


def _find_hod(db: Session, reference: str) -> Teacher | None:
    teacher = db.get(Teacher, reference)
    if teacher is not None:
        return teacher
    return db.execute(select(Teacher).where(Teacher.name == reference)).scalars().first()


def _release_hod(db: Session, department: Department) -> None:
    if not department.hod_id:
        return
    previous = db.get(Teacher, department.hod_id)
    if previous is not None:
        previous.role = "Faculty"
        previous.department_head = None
    department.hod_id = None
    department.hod_name = None


def _appoint_hod(db: Session, department: Department, reference: str | None) -> None:
    """Point the department at a teacher found by id or name; unknown names are kept as text."""
    if not reference or reference == NOT_ASSIGNED:
        return
    teacher = _find_hod(db, reference)
    if teacher is None:
        department.hod_name = reference
        return
    teacher.role = "hod"
    teacher.department_head = department.name
    department.hod_id = teacher.id
    department.hod_name = teacher.name


@router.get("/", response_model=list[DepartmentOut])
def list_departments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[DepartmentOut]:
    counts = _active_course_counts(db)
    departments = db.execute(select(Department).order_by(Department.name)).scalars()
    return [_to_out(department, counts.get(department.id, 0)) for department in departments]


@router.get("/categories", response_model=list[str])
def list_categories(current_user: User = Depends(get_current_user)) -> list[str]:
    return DEPARTMENT_CATEGORIES


@router.get("/search", response_model=list[DepartmentOut])
def search_departments(
    q: str = Query(default="", max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[DepartmentOut]:
    rows = list_departments(db=db, current_user=current_user)
    needle = q.strip().lower()
    if not needle:
        return rows
    return [
        row
        for row in rows
        if needle in row.name.lower()
        or needle in row.category.lower()
        or needle in row.hod.lower()
        or needle in (row.description or "").lower()
    ]


@router.get("/hod-options", response_model=list[HodOption])
def hod_options(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> list[HodOption]:
    teachers = db.execute(select(Teacher).where(Teacher.active.is_(True)).order_by(Teacher.name)).scalars()
    return [
        HodOption(id=teacher.id, name=teacher.name, department=teacher.department, role=teacher.role)
        for teacher in teachers
    ]


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(
    department_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DepartmentOut:
    department = db.get(Department, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")
    return _to_out(department, _active_course_counts(db).get(department.id, 0))


@router.get("/{department_id}/course-stats", response_model=DepartmentCourseStats)
def department_course_stats(
    department_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DepartmentCourseStats:
    if db.get(Department, department_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")
    courses = list(db.execute(select(Course).where(Course.department == department_id)).scalars())
    by_type = {bucket: 0 for bucket in COURSE_TYPE_BUCKETS}
    by_type["Other"] = 0
    for course in courses:
        by_type[course.type if course.type in COURSE_TYPE_BUCKETS else "Other"] += 1
    active = [course for course in courses if course.active]
    return DepartmentCourseStats(
        department_id=department_id,
        total_courses=len(courses),
        active_courses=len(active),
        inactive_courses=len(courses) - len(active),
        total_credits=sum(course.credits or 0 for course in active),
        by_type=by_type,
    )


@router.post("/", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(
    payload: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> DepartmentOut:
    if db.execute(select(Department).where(Department.name == payload.name)).scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department already exists")

    department = Department(**payload.model_dump(exclude={"hod"}))
    db.add(department)
    db.flush()
    _appoint_hod(db, department, payload.hod)
    log_activity(
        db,
        user=current_user,
        action="create",
        entity_type="department",
        entity_id=department.id,
        description=f"Created department {department.name}",
    )
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department already exists") from exc
    db.refresh(department)
    return _to_out(department)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: str,
    payload: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> DepartmentOut:
    department = db.get(Department, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")

    data = payload.model_dump(exclude_unset=True)
    hod_reference = data.pop("hod", None) if "hod" in data else department.hod_name
    if "name" in data and data["name"] != department.name:
        clash = db.execute(select(Department).where(Department.name == data["name"])).scalar_one_or_none()
        if clash is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department already exists")
    for key, value in data.items():
        if value is None and key in {"name", "category", "active"}:
            continue
        setattr(department, key, value)

    if "hod" in payload.model_fields_set and hod_reference != department.hod_name:
        _release_hod(db, department)
        _appoint_hod(db, department, hod_reference)
    elif department.hod_id:
        hod = db.get(Teacher, department.hod_id)
        if hod is not None:
            hod.department_head = department.name

    log_activity(
        db,
        user=current_user,
        action="update",
        entity_type="department",
        entity_id=department.id,
        details={"fields": sorted(payload.model_fields_set)},
    )
    db.commit()
    db.refresh(department)
    return _to_out(department, _active_course_counts(db).get(department.id, 0))


@router.delete("/{department_id}")
def delete_department(
    department_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    department = db.get(Department, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")
    _release_hod(db, department)
    name = department.name
    db.delete(department)
    log_activity(
        db,
        user=current_user,
        action="delete",
        entity_type="department",
        entity_id=department_id,
        description=f"Deleted department {name}",
    )
    db.commit()
    logger.info("Deleted department %s", name)
    return {"success": True}
