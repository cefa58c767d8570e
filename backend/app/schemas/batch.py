from datetime import datetime

from pydantic import BaseModel, Field, field_validator


def _strip_name(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Batch name cannot be empty")
    return trimmed


class BatchCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    branch_id: str = Field(min_length=1, max_length=36)
    semester: str = Field(min_length=1, max_length=50)
    student_count: int = Field(default=0, ge=0, le=10000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return _strip_name(value)


class BatchUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    student_count: int | None = Field(default=None, ge=0, le=10000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str | None) -> str | None:
        return _strip_name(value) if value is not None else None


class BatchOut(BaseModel):
    id: str
    name: str
    branch_id: str
    semester: str
    student_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class BranchOut(BaseModel):
    id: str
    name: str


class BatchStatistics(BaseModel):
    total_batches: int
    total_students: int
    branch_stats: dict[str, int]
    semester_stats: dict[str, int]
