from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import (
    assignments,
    auth,
    batches,
    colleges,
    courses,
    departments,
    health,
    imports,
    reports,
    rooms,
    semesters,
    teacher_codes,
    teachers,
)
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.middleware import AccessLogMiddleware, RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.services.upload_queue import get_uploader

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ensure_runtime_schema_compatibility()
    logger.info("%s started", settings.project_name)
    yield
    dropped = get_uploader().clear()
    if dropped:
        logger.warning("Shutdown dropped %d queued import job(s)", dropped)


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(AccessLogMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(SecurityHeadersMiddleware, settings=settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
app.include_router(teachers.router, prefix=f"{settings.api_prefix}/teachers", tags=["teachers"])
app.include_router(courses.router, prefix=f"{settings.api_prefix}/courses", tags=["courses"])
app.include_router(courses.hod_router, prefix=f"{settings.api_prefix}/hod/courses", tags=["hod"])
app.include_router(departments.router, prefix=f"{settings.api_prefix}/departments", tags=["departments"])
app.include_router(colleges.router, prefix=f"{settings.api_prefix}/colleges", tags=["colleges"])
app.include_router(rooms.router, prefix=f"{settings.api_prefix}/rooms", tags=["rooms"])
app.include_router(semesters.router, prefix=f"{settings.api_prefix}/semesters", tags=["semesters"])
app.include_router(assignments.router, prefix=f"{settings.api_prefix}/assignments", tags=["assignments"])
app.include_router(reports.router, prefix=f"{settings.api_prefix}/reports", tags=["reports"])
app.include_router(teacher_codes.router, prefix=f"{settings.api_prefix}/teacher-codes", tags=["teacher-codes"])
app.include_router(imports.router, prefix=f"{settings.api_prefix}/imports", tags=["imports"])
app.include_router(batches.router, prefix=f"{settings.api_prefix}/batches", tags=["batches"])
