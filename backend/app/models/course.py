import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class CourseType(str, Enum):
    core = "Core"
    elective = "Elective"
    laboratory = "Laboratory"
    project = "Project"
    seminar = "Seminar"


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    semester: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Department id when known; legacy rows may hold a department name or "common".
    department: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    faculty_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    faculty_list: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    lecture_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tutorial_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    practical_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weekly_hours: Mapped[str] = mapped_column(String(50), nullable=False, default="0L")
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default=CourseType.core.value)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prerequisites: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_common_course: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
