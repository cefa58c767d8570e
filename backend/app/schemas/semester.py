from datetime import datetime

from pydantic import BaseModel, Field


class SemesterCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class SemesterUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class SemesterOut(BaseModel):
    id: str
    name: str
    status: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AcademicPeriodOut(BaseModel):
    academic_year: str
    period: str
    semester_numbers: list[int]
    default_semesters: list[str]
    all_semesters: list[str]


class ActiveSemestersOut(BaseModel):
    active_semester_ids: list[str]
    semesters: list[SemesterOut]
