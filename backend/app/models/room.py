import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

ROOM_TYPES = ["Lecture Hall", "Classroom", "Laboratory", "Seminar Hall", "Auditorium", "Tutorial Room"]
ROOM_BUILDINGS = ["Main Building", "Academic Block A", "Academic Block B", "Science Block", "Engineering Block", "Library Block"]
ROOM_FACULTIES = [
    "Faculty of Engineering",
    "Faculty of Science",
    "Faculty of Social Science",
    "Faculty of Arts",
    "Faculty of Management",
    "Faculty of Law",
    "Faculty of Medicine",
    "Faculty of Education",
    "Common Facilities",
]
ROOM_FEATURES = ["Projector", "SmartBoard", "Computers", "AC", "Wi-Fi", "Audio System"]


class RoomStatus(str, Enum):
    available = "Available"
    occupied = "Occupied"
    maintenance = "Maintenance"
    reserved = "Reserved"


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("faculty", "number", name="uq_rooms_faculty_number"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    number: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    building: Mapped[str | None] = mapped_column(String(200), nullable=True)
    floor: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=RoomStatus.available.value)
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    faculty: Mapped[str] = mapped_column(String(200), nullable=False)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # day -> slots the room can be booked in
    free_timings: Mapped[dict[str, list[str]]] = mapped_column(JSON, nullable=False, default=dict)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
