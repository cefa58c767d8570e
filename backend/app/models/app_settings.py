import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

GLOBAL_SETTINGS_TYPE = "global"


class AppSettings(Base):
    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, default=GLOBAL_SETTINGS_TYPE)
    current_semester_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    current_semester_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    active_semester_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
