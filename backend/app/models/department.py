import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

DEPARTMENT_CATEGORIES = [
    "Engineering",
    "Science",
    "Arts",
    "Commerce",
    "Management",
    "Law",
    "Medicine",
    "Education",
    "Common",
    "Other",
]


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Engineering")
    hod_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    hod_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    college_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
