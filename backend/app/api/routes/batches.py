from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.batch import BatchCreate, BatchOut, BatchStatistics, BatchUpdate, BranchOut
from app.services import batches as batch_service
from app.services.audit import log_activity
from app.services.semesters import default_semesters

router = APIRouter()

BATCH_EDITORS = (UserRole.tt_incharge, UserRole.super_admin)


@router.get("/branches", response_model=list[BranchOut])
def list_branches(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[BranchOut]:
    return [BranchOut(id=department.id, name=department.name) for department in batch_service.list_branches(db)]


@router.get("/semesters", response_model=list[str])
def list_batch_semesters(current_user: User = Depends(get_current_user)) -> list[str]:
    return default_semesters(include_all=True)


@router.get("/stats", response_model=BatchStatistics)
def batch_statistics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BatchStatistics:
    return BatchStatistics(**batch_service.batch_statistics(db))


@router.get("/", response_model=list[BatchOut])
def list_batches(
    branch_id: str | None = Query(default=None, max_length=36),
    semester: str | None = Query(default=None, max_length=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[BatchOut]:
    return batch_service.list_batches(db, branch_id, semester)


@router.get("/{batch_id}", response_model=BatchOut)
def get_batch(
    batch_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BatchOut:
    return batch_service.get_batch(db, batch_id)


@router.post("/", response_model=BatchOut, status_code=status.HTTP_201_CREATED)
def create_batch(
    payload: BatchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_EDITORS)),
) -> BatchOut:
    batch = batch_service.create_batch(
        db,
        payload.branch_id,
        payload.semester,
        payload.name,
        student_count=payload.student_count,
    )
    log_activity(
        db,
        user=current_user,
        action="create",
        entity_type="batch",
        entity_id=batch.id,
        description=f"Created batch {batch.name} ({batch.semester})",
    )
    db.commit()
    db.refresh(batch)
    return batch


@router.put("/{batch_id}", response_model=BatchOut)
def update_batch(
    batch_id: str,
    payload: BatchUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_EDITORS)),
) -> BatchOut:
    batch = batch_service.update_batch(db, batch_id, name=payload.name, student_count=payload.student_count)
    log_activity(
        db,
        user=current_user,
        action="update",
        entity_type="batch",
        entity_id=batch.id,
        details={"fields": sorted(payload.model_fields_set)},
    )
    db.commit()
    db.refresh(batch)
    return batch


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*BATCH_EDITORS)),
) -> dict:
    batch_service.delete_batch(db, batch_id)
    log_activity(db, user=current_user, action="delete", entity_type="batch", entity_id=batch_id)
    db.commit()
    return {"success": True}
