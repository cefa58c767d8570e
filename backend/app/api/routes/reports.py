from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import department_scope, get_db, require_roles
from app.core.config import get_settings
from app.models.report import FacultyLoadReport
from app.models.user import User, UserRole
from app.schemas.report import FacultyLoadOut, ReportGenerateRequest, ReportOut
from app.services import reports as report_service

router = APIRouter()
settings = get_settings()

READERS = (UserRole.hod, UserRole.super_admin)


@router.get("/faculty-load", response_model=list[FacultyLoadOut])
def faculty_load(
    semester: str = Query(min_length=1, max_length=50),
    department_id: str | None = Query(default=None, max_length=36),
    overloaded_only: bool = Query(default=False),
    search: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*READERS)),
) -> list[dict]:
    scope = department_scope(current_user, department_id)
    return report_service.faculty_load_view(
        db,
        scope,
        semester,
        default_max_hours=settings.default_max_hours,
        overloaded_only=overloaded_only,
        search=search,
    )


@router.post("/", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def generate_report(
    payload: ReportGenerateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*READERS)),
) -> ReportOut:
    scope = department_scope(current_user, payload.department_id)
    report = report_service.generate_load_report(
        db,
        scope,
        payload.semester,
        user=current_user,
        default_max_hours=settings.default_max_hours,
    )
    db.commit()
    db.refresh(report)
    return report


@router.get("/", response_model=list[ReportOut])
def list_reports(
    department_id: str | None = Query(default=None, max_length=36),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*READERS)),
) -> list[ReportOut]:
    if current_user.role == UserRole.hod:
        department_id = department_scope(current_user, department_id)
    return report_service.list_reports(db, department_id)


@router.get("/{report_id}", response_model=ReportOut)
def get_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*READERS)),
) -> ReportOut:
    report = db.get(FacultyLoadReport, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    if current_user.role == UserRole.hod and report.department_id != current_user.department_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Report belongs to another department")
    return report
