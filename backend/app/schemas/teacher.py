from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


def _clean_list(values: list[str]) -> list[str]:
    seen: list[str] = []
    for item in values:
        text = item.strip()
        if text and text not in seen:
            seen.append(text)
    return seen


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    department: str | None = Field(default=None, max_length=200)
    expertise: list[str] = Field(default_factory=list, max_length=50)
    qualification: str = Field(default="Not specified", max_length=200)
    experience: int = Field(default=0, ge=0, le=80)
    active: bool = True
    designation: str = Field(default="Faculty", max_length=100)
    employee_id: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    joining_date: str | None = Field(default=None, max_length=50)
    max_hours: int | None = Field(default=None, ge=1, le=60)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Name cannot be empty")
        return trimmed

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("expertise")
    @classmethod
    def normalize_expertise(cls, value: list[str]) -> list[str]:
        return _clean_list(value)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    department: str | None = Field(default=None, max_length=200)
    expertise: list[str] | None = Field(default=None, max_length=50)
    qualification: str | None = Field(default=None, max_length=200)
    experience: int | None = Field(default=None, ge=0, le=80)
    active: bool | None = None
    designation: str | None = Field(default=None, max_length=100)
    employee_id: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    joining_date: str | None = Field(default=None, max_length=50)
    max_hours: int | None = Field(default=None, ge=1, le=60)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value is not None else None

    @field_validator("expertise")
    @classmethod
    def normalize_expertise(cls, value: list[str] | None) -> list[str] | None:
        return _clean_list(value) if value is not None else None


class TeacherOut(TeacherBase):
    id: str
    email: str
    role: str
    department_head: str | None = None
    max_hours: int
    load_hours: int
    status: str
    teacher_code: str | None = None
    assigned_courses: list[str] | dict[str, list[str]]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class TeacherBulkDelete(BaseModel):
    ids: list[str] = Field(min_length=1, max_length=500)


class BulkDeleteItem(BaseModel):
    id: str
    success: bool
    error: str | None = None


class BulkDeleteResult(BaseModel):
    total: int
    successful: int
    failed: int
    results: list[BulkDeleteItem]
