from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.semester import (
    AcademicPeriodOut,
    ActiveSemestersOut,
    SemesterCreate,
    SemesterOut,
    SemesterUpdate,
)
from app.services import semesters as semester_service
from app.services.audit import log_activity

router = APIRouter()


@router.get("/", response_model=list[SemesterOut])
def list_semesters(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[SemesterOut]:
    return semester_service.list_semesters(db)


@router.get("/academic-period", response_model=AcademicPeriodOut)
def academic_period(current_user: User = Depends(get_current_user)) -> AcademicPeriodOut:
    return AcademicPeriodOut(**semester_service.academic_period_info())


@router.get("/options", response_model=list[str])
def semester_options(
    include_all: bool = Query(default=True),
    current_user: User = Depends(get_current_user),
) -> list[str]:
    return semester_service.default_semesters(include_all=include_all)


@router.get("/active", response_model=SemesterOut)
def get_active_semester(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SemesterOut:
    semester = semester_service.active_semester(db)
    if semester is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No semesters configured")
    return semester


@router.post("/", response_model=SemesterOut, status_code=status.HTTP_201_CREATED)
def create_semester(
    payload: SemesterCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> SemesterOut:
    semester = semester_service.create_semester(db, payload.name)
    log_activity(db, user=current_user, action="create", entity_type="semester", entity_id=semester.id)
    db.commit()
    db.refresh(semester)
    return semester


@router.post("/auto-activate", response_model=ActiveSemestersOut)
def auto_activate(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> ActiveSemestersOut:
    current = semester_service.auto_activate_semesters(db)
    log_activity(
        db,
        user=current_user,
        action="auto_activate",
        entity_type="semester",
        details={"semesters": [semester.name for semester in current]},
    )
    db.commit()
    return ActiveSemestersOut(
        active_semester_ids=[semester.id for semester in current],
        semesters=[SemesterOut.model_validate(semester) for semester in current],
    )


@router.put("/{semester_id}", response_model=SemesterOut)
def rename_semester(
    semester_id: str,
    payload: SemesterUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> SemesterOut:
    semester = semester_service.rename_semester(db, semester_id, payload.name)
    log_activity(db, user=current_user, action="update", entity_type="semester", entity_id=semester.id)
    db.commit()
    db.refresh(semester)
    return semester


@router.post("/{semester_id}/activate", response_model=SemesterOut)
def activate_semester(
    semester_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> SemesterOut:
    semester = semester_service.activate_semester(db, semester_id)
    log_activity(
        db,
        user=current_user,
        action="activate",
        entity_type="semester",
        entity_id=semester.id,
        description=f"Activated {semester.name}",
    )
    db.commit()
    db.refresh(semester)
    return semester


@router.delete("/{semester_id}")
def delete_semester(
    semester_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    semester_service.delete_semester(db, semester_id)
    log_activity(db, user=current_user, action="delete", entity_type="semester", entity_id=semester_id)
    db.commit()
    return {"success": True}
