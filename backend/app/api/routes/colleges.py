from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.college import College, CollegeStatus, CollegeType
from app.models.department import Department
from app.models.user import User, UserRole
from app.schemas.college import CollegeCreate, CollegeOut, CollegeStats, CollegeUpdate
from app.services import college_analytics
from app.services.audit import log_activity

router = APIRouter()


def _all_colleges(db: Session) -> list[College]:
    return list(db.execute(select(College).order_by(College.name)).scalars())


@router.get("/", response_model=list[CollegeOut])
def list_colleges(
    college_type: CollegeType | None = Query(default=None, alias="type"),
    college_status: CollegeStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CollegeOut]:
    statement = select(College).order_by(College.name)
    if college_type is not None:
        statement = statement.where(College.type == college_type.value)
    if college_status is not None:
        statement = statement.where(College.status == college_status.value)
    return list(db.execute(statement).scalars())


@router.get("/active", response_model=list[CollegeOut])
def list_active_colleges(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CollegeOut]:
    statement = select(College).where(College.status == CollegeStatus.active.value).order_by(College.name)
    return list(db.execute(statement).scalars())


@router.get("/search", response_model=list[CollegeOut])
def search_colleges(
    q: str = Query(default="", max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CollegeOut]:
    needle = q.strip().lower()
    colleges = _all_colleges(db)
    if not needle:
        return colleges
    return [college for college in colleges if needle in college.name.lower() or needle in college.code.lower()]


@router.get("/stats", response_model=CollegeStats)
def college_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CollegeStats:
    colleges = _all_colleges(db)
    by_type = {item.value: 0 for item in CollegeType}
    for college in colleges:
        by_type[college.type] = by_type.get(college.type, 0) + 1
    active = sum(1 for college in colleges if college.status == CollegeStatus.active.value)
    return CollegeStats(total=len(colleges), active=active, inactive=len(colleges) - active, by_type=by_type)


@router.get("/hierarchy")
def college_hierarchy(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Colleges grouped by type, each with the departments attached to it."""
    departments: dict[str, list[dict]] = {}
    for department in db.execute(select(Department).order_by(Department.name)).scalars():
        if department.college_id:
            departments.setdefault(department.college_id, []).append({"id": department.id, "name": department.name})

    hierarchy: dict[str, list[dict]] = {item.value: [] for item in CollegeType}
    for college in _all_colleges(db):
        hierarchy.setdefault(college.type, []).append(
            {
                "id": college.id,
                "name": college.name,
                "code": college.code,
                "status": college.status,
                "departments": departments.get(college.id, []),
            }
        )
    return hierarchy


@router.get("/analytics/university")
def university_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    return college_analytics.university_analytics(db)


@router.get("/analytics/compare")
def compare_colleges(
    ids: list[str] = Query(default=[]),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    return college_analytics.comparative_analytics(db, ids)


@router.get("/{college_id}/analytics")
def analytics_for_college(
    college_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    return college_analytics.college_analytics(db, college_id)


@router.get("/{college_id}", response_model=CollegeOut)
def get_college(
    college_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CollegeOut:
    college = db.get(College, college_id)
    if college is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="College not found")
    return college


@router.post("/", response_model=CollegeOut, status_code=status.HTTP_201_CREATED)
def create_college(
    payload: CollegeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> CollegeOut:
    if db.execute(select(College).where(College.code == payload.code)).scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="College code already exists")
    college = College(**payload.model_dump(mode="json"))
    db.add(college)
    db.flush()
    log_activity(db, user=current_user, action="create", entity_type="college", entity_id=college.id)
    db.commit()
    db.refresh(college)
    return college


@router.put("/{college_id}", response_model=CollegeOut)
def update_college(
    college_id: str,
    payload: CollegeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> CollegeOut:
    college = db.get(College, college_id)
    if college is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="College not found")

    data = payload.model_dump(mode="json", exclude_unset=True)
    if data.get("code") and data["code"] != college.code:
        if db.execute(select(College).where(College.code == data["code"])).scalar_one_or_none() is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="College code already exists")
    for key, value in data.items():
        if value is None and key in {"name", "code", "type", "status"}:
            continue
        setattr(college, key, value)

    log_activity(db, user=current_user, action="update", entity_type="college", entity_id=college.id)
    db.commit()
    db.refresh(college)
    return college


@router.delete("/{college_id}")
def delete_college(
    college_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    college = db.get(College, college_id)
    if college is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="College not found")
    db.delete(college)
    log_activity(db, user=current_user, action="delete", entity_type="college", entity_id=college_id)
    db.commit()
    return {"success": True}
