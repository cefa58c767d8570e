from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import department_scope, get_db, require_roles
from app.core.config import get_settings
from app.core.exceptions import PermissionDeniedError
from app.models.course import Course
from app.models.teacher import Teacher
from app.models.user import User, UserRole
from app.schemas.assignment import (
    AssignmentOverview,
    AssignmentRequest,
    AssignmentResult,
    AutoAssignRequest,
    AutoAssignResult,
    RemovalRequest,
)
from app.services import assignments as assignment_service
from app.services.audit import log_activity
from app.services.catalog import common_department_ids, department_keys, is_common_course

router = APIRouter()
settings = get_settings()

ASSIGNERS = (UserRole.hod, UserRole.super_admin)


def _ensure_hod_owns(db: Session, current_user: User, course_id: str, teacher_id: str | None = None) -> None:
    """HODs may only staff their own department's courses (or common ones) with their own teachers."""
    if current_user.role != UserRole.hod:
        return
    scope = department_scope(current_user, None)
    course = db.get(Course, course_id)
    if course is not None and course.department != scope and not is_common_course(course, common_department_ids(db)):
        raise PermissionDeniedError(
            "HODs can only change faculty on their own department's courses",
            details={"course_id": course_id},
        )
    teacher = db.get(Teacher, teacher_id) if teacher_id else None
    if teacher is not None and teacher.department not in department_keys(db, scope):
        raise PermissionDeniedError(
            "HODs can only assign teachers from their own department",
            details={"teacher_id": teacher_id},
        )


@router.get("/stats", response_model=AssignmentOverview)
def assignment_stats(
    department_id: str | None = Query(default=None, max_length=36),
    semester: str | None = Query(default=None, max_length=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ASSIGNERS)),
) -> AssignmentOverview:
    scope = department_scope(current_user, department_id)
    return AssignmentOverview(**assignment_service.assignment_overview(db, scope, semester))


@router.post("/assign", response_model=AssignmentResult)
def assign_faculty(
    payload: AssignmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ASSIGNERS)),
) -> AssignmentResult:
    _ensure_hod_owns(db, current_user, payload.course_id, payload.teacher_id)
    result = assignment_service.assign_faculty(
        db,
        payload.course_id,
        payload.teacher_id,
        replace=payload.replace,
        default_max_hours=settings.default_max_hours,
    )
    if result["changed"]:
        log_activity(
            db,
            user=current_user,
            action="assign_faculty",
            entity_type="course",
            entity_id=payload.course_id,
            details={"teacher_id": payload.teacher_id, "replace": payload.replace},
        )
    db.commit()
    return AssignmentResult(**result)


@router.post("/remove", response_model=AssignmentResult)
def remove_faculty(
    payload: RemovalRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ASSIGNERS)),
) -> AssignmentResult:
    _ensure_hod_owns(db, current_user, payload.course_id)
    result = assignment_service.remove_faculty(
        db,
        payload.course_id,
        payload.teacher_id,
        default_max_hours=settings.default_max_hours,
    )
    if result["changed"]:
        log_activity(
            db,
            user=current_user,
            action="remove_faculty",
            entity_type="course",
            entity_id=payload.course_id,
            details={"teacher_id": payload.teacher_id},
        )
    db.commit()
    return AssignmentResult(**result)


@router.post("/auto", response_model=AutoAssignResult)
def auto_assign(
    payload: AutoAssignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*ASSIGNERS)),
) -> AutoAssignResult:
    scope = department_scope(current_user, payload.department_id)
    result = assignment_service.auto_assign(
        db,
        scope,
        semester=payload.semester,
        allow_multiple=payload.allow_multiple,
        default_max_hours=settings.default_max_hours,
    )
    log_activity(
        db,
        user=current_user,
        action="auto_assign",
        entity_type="department",
        entity_id=scope,
        details=result,
    )
    db.commit()
    return AutoAssignResult(**result)
