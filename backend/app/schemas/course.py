from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator


class CourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    semester: str = Field(min_length=1, max_length=50)
    department: str | None = Field(default=None, max_length=200)
    faculty_id: str | None = Field(default=None, max_length=36)
    faculty_list: list[str] = Field(default_factory=list, max_length=20)
    lecture_hours: int | None = Field(default=None, ge=0, le=40)
    tutorial_hours: int | None = Field(default=None, ge=0, le=40)
    practical_hours: int | None = Field(default=None, ge=0, le=40)
    weekly_hours: str | int | None = None
    credits: int | None = Field(default=None, ge=0, le=40)
    type: str = Field(default="Core", max_length=50)
    description: str | None = None
    prerequisites: list[str] = Field(default_factory=list, max_length=50)
    is_common_course: bool = False
    active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Course code cannot be empty")
        return code

    @field_validator("title", "semester")
    @classmethod
    def strip_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be empty")
        return trimmed

    @model_validator(mode="after")
    def merge_primary_faculty(self) -> "CourseBase":
        ids: list[str] = []
        for item in [self.faculty_id, *self.faculty_list]:
            if item and item not in ids:
                ids.append(item)
        self.faculty_list = ids
        self.faculty_id = ids[0] if ids else None
        return self


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    semester: str | None = Field(default=None, min_length=1, max_length=50)
    department: str | None = Field(default=None, max_length=200)
    lecture_hours: int | None = Field(default=None, ge=0, le=40)
    tutorial_hours: int | None = Field(default=None, ge=0, le=40)
    practical_hours: int | None = Field(default=None, ge=0, le=40)
    weekly_hours: str | int | None = None
    credits: int | None = Field(default=None, ge=0, le=40)
    type: str | None = Field(default=None, max_length=50)
    description: str | None = None
    prerequisites: list[str] | None = Field(default=None, max_length=50)
    is_common_course: bool | None = None
    active: bool | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None


class CourseOut(BaseModel):
    id: str
    code: str
    title: str
    semester: str
    department: str | None = None
    department_name: str | None = None
    faculty_id: str | None = None
    faculty_list: list[str]
    faculty_names: list[str] = Field(default_factory=list)
    lecture_hours: int
    tutorial_hours: int
    practical_hours: int
    weekly_hours: str
    total_hours: int
    credits: int
    type: str
    description: str | None = None
    prerequisites: list[str]
    is_common_course: bool
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
