from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.college import CollegeStatus, CollegeType


class CollegeBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    type: CollegeType = CollegeType.faculty
    status: CollegeStatus = CollegeStatus.active
    dean: str | None = Field(default=None, max_length=200)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("College name cannot be empty")
        return trimmed

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("College code cannot be empty")
        return code


class CollegeCreate(CollegeBase):
    pass


class CollegeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    type: CollegeType | None = None
    status: CollegeStatus | None = None
    dean: str | None = Field(default=None, max_length=200)
    description: str | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None


class CollegeOut(CollegeBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CollegeStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_type: dict[str, int]
