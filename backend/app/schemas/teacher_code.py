from pydantic import BaseModel, Field


class TeacherCodeOut(BaseModel):
    teacher_id: str
    name: str
    department: str | None = None
    teacher_code: str | None = None
    default_code: str
    effective_code: str
    conflicts_with: list[str]


class TeacherCodeUpdate(BaseModel):
    code: str = Field(max_length=20)


class TeacherCodeBulkUpdate(BaseModel):
    codes: dict[str, str] = Field(min_length=1)
