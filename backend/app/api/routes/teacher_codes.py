from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.teacher_code import TeacherCodeBulkUpdate, TeacherCodeOut, TeacherCodeUpdate
from app.services import teacher_codes as code_service
from app.services.audit import log_activity

router = APIRouter()

CODE_EDITORS = (UserRole.tt_incharge, UserRole.super_admin)


@router.get("/", response_model=list[TeacherCodeOut])
def list_codes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CODE_EDITORS)),
) -> list[dict]:
    return code_service.list_teacher_codes(db)


@router.put("/", response_model=list[TeacherCodeOut])
def save_codes(
    payload: TeacherCodeBulkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CODE_EDITORS)),
) -> list[dict]:
    changed = code_service.save_teacher_codes(db, payload.codes)
    log_activity(
        db,
        user=current_user,
        action="update_teacher_codes",
        entity_type="teacher",
        details={"changed": [teacher.id for teacher in changed]},
    )
    db.commit()
    return code_service.list_teacher_codes(db)


@router.put("/{teacher_id}", response_model=TeacherCodeOut)
def set_code(
    teacher_id: str,
    payload: TeacherCodeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*CODE_EDITORS)),
) -> dict:
    teacher = code_service.set_teacher_code(db, teacher_id, payload.code)
    log_activity(
        db,
        user=current_user,
        action="update_teacher_code",
        entity_type="teacher",
        entity_id=teacher.id,
        details={"code": teacher.teacher_code},
    )
    db.commit()
    return next(row for row in code_service.list_teacher_codes(db) if row["teacher_id"] == teacher_id)
