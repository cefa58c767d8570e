import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

LEGACY_ASSIGNMENT_KEY = "Legacy"


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    department: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    expertise: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    qualification: Mapped[str] = mapped_column(String(200), nullable=False, default="Not specified")
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="Faculty")
    department_head: Mapped[str | None] = mapped_column(String(200), nullable=True)
    designation: Mapped[str] = mapped_column(String(100), nullable=False, default="Faculty")
    employee_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    joining_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    max_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=18)
    load_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="available")
    teacher_code: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    # Either a legacy flat list of course ids or a map of semester -> course ids.
    assigned_courses: Mapped[list | dict] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
