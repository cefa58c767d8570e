from datetime import datetime

from pydantic import BaseModel, Field


class FacultyCourseOut(BaseModel):
    id: str
    code: str
    title: str
    semester: str
    weekly_hours: str
    hours: int


class FacultyLoadOut(BaseModel):
    id: str
    name: str
    department: str | None = None
    expertise: list[str]
    max_hours: int
    semester_load_hours: int
    load_percentage: float
    status: str
    faculty_courses: list[FacultyCourseOut]


class ReportGenerateRequest(BaseModel):
    semester: str = Field(min_length=1, max_length=50)
    department_id: str | None = Field(default=None, max_length=36)


class ReportOut(BaseModel):
    id: str
    type: str
    department_id: str | None = None
    semester: str
    faculty_count: int
    overloaded_count: int
    nearly_full_count: int
    available_count: int
    faculty_data: list[dict]
    generated_by: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
