from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.room import RoomStatus


def _clean_features(values: list[str]) -> list[str]:
    seen: list[str] = []
    for item in values:
        text = item.strip()
        if text and text not in seen:
            seen.append(text)
    return seen


class RoomBase(BaseModel):
    number: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=0, le=5000)
    faculty: str = Field(min_length=1, max_length=200)
    building: str | None = Field(default=None, max_length=200)
    floor: str | None = Field(default=None, max_length=50)
    status: RoomStatus = RoomStatus.available
    type: str | None = Field(default=None, max_length=100)
    features: list[str] = Field(default_factory=list, max_length=30)
    description: str | None = None
    active: bool = True

    @field_validator("number", "faculty")
    @classmethod
    def strip_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be empty")
        return trimmed

    @field_validator("features")
    @classmethod
    def normalize_features(cls, value: list[str]) -> list[str]:
        return _clean_features(value)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    number: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=0, le=5000)
    faculty: str | None = Field(default=None, min_length=1, max_length=200)
    building: str | None = Field(default=None, max_length=200)
    floor: str | None = Field(default=None, max_length=50)
    status: RoomStatus | None = None
    type: str | None = Field(default=None, max_length=100)
    features: list[str] | None = Field(default=None, max_length=30)
    description: str | None = None
    active: bool | None = None

    @field_validator("features")
    @classmethod
    def normalize_features(cls, value: list[str] | None) -> list[str] | None:
        return _clean_features(value) if value is not None else None


class RoomOut(RoomBase):
    id: str
    status: str
    free_timings: dict[str, list[str]] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class RoomOptions(BaseModel):
    types: list[str]
    buildings: list[str]
    statuses: list[str]
    faculties: list[str]
    features: list[str]


class FreeTimingsUpdate(BaseModel):
    free_timings: dict[str, list[str]] = Field(default_factory=dict)


class FreeTimingToggle(BaseModel):
    day: str = Field(min_length=1, max_length=20)
    time_slot: str = Field(min_length=1, max_length=20)
    is_free: bool


class FreeTimingsBulk(BaseModel):
    is_free: bool


class RoomFreeTimings(BaseModel):
    room_id: str
    free_timings: dict[str, list[str]]
    free_slot_count: int
    grid: dict[str, dict[str, str]]


class AvailabilitySlots(BaseModel):
    days: list[str]
    time_slots: list[str]
