import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class FacultyLoadReport(Base):
    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="faculty_load")
    department_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    semester: Mapped[str] = mapped_column(String(50), nullable=False)
    faculty_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    overloaded_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    nearly_full_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    faculty_data: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    generated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
