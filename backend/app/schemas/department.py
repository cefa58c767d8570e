from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class DepartmentBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(default="Engineering", max_length=100)
    college_id: str | None = Field(default=None, max_length=36)
    description: str | None = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Department name cannot be empty")
        return trimmed


class DepartmentCreate(DepartmentBase):
    # Teacher id or exact teacher name.
    hod: str | None = Field(default=None, max_length=200)


class DepartmentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, max_length=100)
    college_id: str | None = Field(default=None, max_length=36)
    description: str | None = None
    active: bool | None = None
    hod: str | None = Field(default=None, max_length=200)


class DepartmentOut(DepartmentBase):
    id: str
    hod_id: str | None = None
    hod: str
    status: str
    total_courses: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DepartmentCourseStats(BaseModel):
    department_id: str
    total_courses: int
    active_courses: int
    inactive_courses: int
    total_credits: int
    by_type: dict[str, int]


class HodOption(BaseModel):
    id: str
    name: str
    department: str | None = None
    role: str
