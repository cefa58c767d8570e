import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.core.config import get_settings
from app.models.department import Department
from app.models.teacher import Teacher
from app.models.user import User, UserRole
from app.schemas.teacher import (
    BulkDeleteItem,
    BulkDeleteResult,
    TeacherBulkDelete,
    TeacherCreate,
    TeacherOut,
    TeacherUpdate,
)
from app.services.assignments import recompute_teacher_load
from app.services.audit import log_activity
from app.services.catalog import detach_teacher_from_courses, faculty_ids_of
from app.services.importers import EXAMPLE_DATASETS
from app.services.workload import load_percentage, load_status

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


def _delete_teacher(db: Session, teacher: Teacher) -> None:
    courses = detach_teacher_from_courses(db, teacher.id)
    for department in db.execute(select(Department).where(Department.hod_id == teacher.id)).scalars():
        department.hod_id = None
        department.hod_name = None
    db.delete(teacher)
    db.flush()

    # co-teachers take over the dropped share of each course
    remaining = {member_id for course in courses for member_id in faculty_ids_of(course)}
    for member_id in sorted(remaining):
        member = db.get(Teacher, member_id)
        if member is not None:
            recompute_teacher_load(db, member, default_max_hours=settings.default_max_hours)


@router.get("/", response_model=list[TeacherOut])
def list_teachers(
    department: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[TeacherOut]:
    statement = select(Teacher).order_by(Teacher.name)
    if department:
        statement = statement.where(Teacher.department == department)
    return list(db.execute(statement).scalars())


@router.get("/search", response_model=list[TeacherOut])
def search_teachers(
    q: str = Query(default="", max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[TeacherOut]:
    teachers = list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())
    needle = q.strip().lower()
    if not needle:
        return teachers
    return [
        teacher
        for teacher in teachers
        if needle in teacher.name.lower()
        or needle in (teacher.department or "").lower()
        or any(needle in item.lower() for item in (teacher.expertise or []))
    ]


@router.get("/example")
def example_dataset(current_user: User = Depends(get_current_user)) -> dict:
    return EXAMPLE_DATASETS["teachers"]


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(
    teacher_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    return teacher


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: TeacherCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> TeacherOut:
    existing = db.execute(select(Teacher).where(Teacher.email == payload.email)).scalar_one_or_none()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")

    data = payload.model_dump()
    data["max_hours"] = data.get("max_hours") or settings.default_max_hours
    teacher = Teacher(**data, role="Faculty", status="available", load_hours=0, assigned_courses={})
    db.add(teacher)
    db.flush()
    log_activity(
        db,
        user=current_user,
        action="create",
        entity_type="teacher",
        entity_id=teacher.id,
        description=f"Added teacher {teacher.name}",
    )
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists") from exc
    db.refresh(teacher)
    return teacher


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    data = payload.model_dump(exclude_unset=True)
    if "email" in data and data["email"] != teacher.email:
        clash = db.execute(select(Teacher).where(Teacher.email == data["email"])).scalar_one_or_none()
        if clash is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    for key, value in data.items():
        if value is None and key in {"name", "email", "expertise", "qualification", "experience", "active", "designation", "max_hours"}:
            continue
        setattr(teacher, key, value)
    if "max_hours" in data:
        teacher.status = load_status(load_percentage(teacher.load_hours, teacher.max_hours, settings.default_max_hours))

    log_activity(
        db,
        user=current_user,
        action="update",
        entity_type="teacher",
        entity_id=teacher.id,
        details={"fields": sorted(data)},
    )
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    name = teacher.name
    _delete_teacher(db, teacher)
    log_activity(
        db,
        user=current_user,
        action="delete",
        entity_type="teacher",
        entity_id=teacher_id,
        description=f"Deleted teacher {name}",
    )
    db.commit()
    return {"success": True}


@router.post("/bulk-delete", response_model=BulkDeleteResult)
def bulk_delete_teachers(
    payload: TeacherBulkDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> BulkDeleteResult:
    results: list[BulkDeleteItem] = []
    for teacher_id in dict.fromkeys(payload.ids):
        teacher = db.get(Teacher, teacher_id)
        if teacher is None:
            results.append(BulkDeleteItem(id=teacher_id, success=False, error="Teacher not found"))
            continue
        _delete_teacher(db, teacher)
        results.append(BulkDeleteItem(id=teacher_id, success=True))

    successful = sum(1 for item in results if item.success)
    log_activity(
        db,
        user=current_user,
        action="bulk_delete",
        entity_type="teacher",
        details={"requested": len(results), "deleted": successful},
    )
    db.commit()
    logger.info("Bulk-deleted %d of %d teacher(s)", successful, len(results))
    return BulkDeleteResult(
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
        results=results,
    )
