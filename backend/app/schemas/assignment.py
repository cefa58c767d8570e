from pydantic import BaseModel, Field


class AssignmentRequest(BaseModel):
    course_id: str = Field(min_length=1, max_length=36)
    teacher_id: str = Field(min_length=1, max_length=36)
    replace: bool = False


class RemovalRequest(BaseModel):
    course_id: str = Field(min_length=1, max_length=36)
    teacher_id: str = Field(min_length=1, max_length=36)


class AutoAssignRequest(BaseModel):
    department_id: str | None = Field(default=None, max_length=36)
    semester: str | None = Field(default=None, max_length=50)
    allow_multiple: bool = False


class AssignmentResult(BaseModel):
    changed: bool
    course_id: str
    faculty_list: list[str]
    removed: list[str] = Field(default_factory=list)


class AutoAssignResult(BaseModel):
    assigned_count: int
    considered: int


class WorkloadStats(BaseModel):
    available: int
    nearly_full: int
    overloaded: int
    average_load: int
    total_hours: int


class CourseAssignmentStats(BaseModel):
    assigned: int
    unassigned: int
    multiple_assigned: int
    total_courses: int
    assignment_percentage: int
    average_faculty_per_course: float
    total_faculty_assignments: int


class AssignmentOverview(BaseModel):
    workload: WorkloadStats
    courses: CourseAssignmentStats
