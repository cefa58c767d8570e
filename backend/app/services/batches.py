from __future__ import annotations

from collections import Counter
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidInputError, ResourceNotFoundError
from app.models.batch import Batch
from app.models.department import Department
from app.services.semesters import format_semester_name, parse_semester_string

logger = logging.getLogger(__name__)


def _valid_semester(value: str) -> str:
    normalized = format_semester_name(value.strip())
    if not parse_semester_string(normalized)["is_valid"]:
        raise InvalidInputError(f'Invalid semester "{value}". Expected "Semester X" where X is 1-8')
    return normalized


def _require_branch(db: Session, branch_id: str) -> Department:
    department = db.get(Department, branch_id)
    if department is None:
        raise ResourceNotFoundError("Branch", branch_id)
    return department


def _ensure_unique_name(db: Session, branch_id: str, semester: str, name: str, *, exclude_id: str | None = None) -> None:
    lowered = name.lower()
    for batch in list_batches(db, branch_id, semester):
        if batch.id != exclude_id and batch.name.lower() == lowered:
            raise ConflictError(
                "Batch with this name already exists",
                details={"branch_id": branch_id, "semester": semester, "name": name},
            )


def list_branches(db: Session) -> list[Department]:
    statement = select(Department).where(Department.active.is_(True)).order_by(Department.name)
    return list(db.execute(statement).scalars())


def list_batches(db: Session, branch_id: str | None = None, semester: str | None = None) -> list[Batch]:
    statement = select(Batch)
    if branch_id:
        statement = statement.where(Batch.branch_id == branch_id)
    if semester:
        statement = statement.where(Batch.semester == format_semester_name(semester))
    return list(db.execute(statement.order_by(Batch.created_at, Batch.name)).scalars())


def get_batch(db: Session, batch_id: str) -> Batch:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise ResourceNotFoundError("Batch", batch_id)
    return batch


def create_batch(db: Session, branch_id: str, semester: str, name: str, student_count: int = 0) -> Batch:
    _require_branch(db, branch_id)
    normalized_semester = _valid_semester(semester)
    _ensure_unique_name(db, branch_id, normalized_semester, name)
    batch = Batch(name=name, branch_id=branch_id, semester=normalized_semester, student_count=student_count)
    db.add(batch)
    db.flush()
    logger.info("Created batch %s for %s / %s", name, branch_id, normalized_semester)
    return batch


def update_batch(db: Session, batch_id: str, *, name: str | None = None, student_count: int | None = None) -> Batch:
    batch = get_batch(db, batch_id)
    if name is not None and name != batch.name:
        _ensure_unique_name(db, batch.branch_id, batch.semester, name, exclude_id=batch.id)
        batch.name = name
    if student_count is not None:
        batch.student_count = student_count
    return batch


def delete_batch(db: Session, batch_id: str) -> None:
    db.delete(get_batch(db, batch_id))


def batch_statistics(db: Session) -> dict:
    batches = list_batches(db)
    return {
        "total_batches": len(batches),
        "total_students": sum(batch.student_count or 0 for batch in batches),
        "branch_stats": dict(Counter(batch.branch_id for batch in batches)),
        "semester_stats": dict(Counter(batch.semester for batch in batches)),
    }
