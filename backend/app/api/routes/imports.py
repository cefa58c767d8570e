import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_current_user, get_session_factory, require_roles
from app.core.config import get_settings
from app.core.exceptions import ImportFormatError, PermissionDeniedError
from app.models.user import User, UserRole
from app.schemas.imports import ImportJobOut, QueueStatusOut
from app.services.importers import (
    EXAMPLE_DATASETS,
    IMPORT_KINDS,
    bind_record_handler,
    extract_records,
    import_course_record,
    import_room_record,
    import_teacher_record,
)
from app.services.rate_limit import enforce_rate_limit
from app.services.upload_queue import get_uploader

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()

IMPORTERS = (UserRole.super_admin, UserRole.hod)


def _build_handler(
    kind: str,
    current_user: User,
    session_factory: sessionmaker,
    fallback_department: str | None,
):
    if kind == "teachers":
        return bind_record_handler(
            session_factory,
            import_teacher_record,
            email_domain=settings.generated_email_domain,
            default_max_hours=settings.default_max_hours,
        )
    if kind == "courses":
        forced = current_user.department_id if current_user.role == UserRole.hod else None
        if current_user.role == UserRole.hod and not forced:
            raise PermissionDeniedError("HOD account has no department")
        return bind_record_handler(
            session_factory,
            import_course_record,
            fallback_department=fallback_department,
            forced_department=forced,
        )
    return bind_record_handler(session_factory, import_room_record)


@router.get("/status", response_model=QueueStatusOut)
def queue_status(current_user: User = Depends(require_roles(*IMPORTERS))) -> QueueStatusOut:
    return QueueStatusOut(**get_uploader().status())


@router.get("/jobs/{job_id}", response_model=ImportJobOut)
def get_job(
    job_id: str,
    include_results: bool = Query(default=True),
    current_user: User = Depends(require_roles(*IMPORTERS)),
) -> ImportJobOut:
    job = get_uploader().get_job(job_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Import job not found")
    return ImportJobOut(**job.summary(include_results=include_results))


@router.get("/examples/{kind}")
def example_dataset(kind: str, current_user: User = Depends(get_current_user)) -> dict:
    if kind not in EXAMPLE_DATASETS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No example dataset for {kind}")
    return EXAMPLE_DATASETS[kind]


@router.post("/{kind}", response_model=ImportJobOut, status_code=status.HTTP_202_ACCEPTED)
async def import_records(
    kind: str,
    request: Request,
    payload: Any = Body(...),
    wait: bool = Query(default=False),
    fallback_department: str | None = Query(default=None, max_length=200),
    session_factory: sessionmaker = Depends(get_session_factory),
    current_user: User = Depends(require_roles(*IMPORTERS)),
):
    if kind not in IMPORT_KINDS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown import kind: {kind}")
    if kind != "courses" and current_user.role != UserRole.super_admin:
        raise PermissionDeniedError(f"Only a SuperAdmin can import {kind}")
    enforce_rate_limit(request, "imports.submit", identity=current_user.id)

    records = extract_records(payload, kind)
    if not records:
        raise ImportFormatError(f"No {kind} found in the uploaded data")

    handler = _build_handler(kind, current_user, session_factory, fallback_department)
    uploader = get_uploader()
    logger.info("User %s submitted %d %s record(s)", current_user.id, len(records), kind)

    if not wait:
        job = uploader.enqueue(records, handler, kind=kind)
        return job.summary(include_results=False)

    finished = asyncio.get_running_loop().create_future()

    def settle(_outcome: Any) -> None:
        if not finished.done():
            finished.set_result(None)

    job = uploader.enqueue(records, handler, kind=kind, on_complete=settle, on_error=settle)
    await finished
    return JSONResponse(status_code=status.HTTP_200_OK, content=job.summary())
