from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.app_settings import AppSettings  # noqa: F401
from app.models.batch import Batch  # noqa: F401
from app.models.college import College, CollegeStatus, CollegeType  # noqa: F401
from app.models.course import Course, CourseType  # noqa: F401
from app.models.department import Department  # noqa: F401
from app.models.report import FacultyLoadReport  # noqa: F401
from app.models.room import Room, RoomStatus  # noqa: F401
from app.models.semester import Semester  # noqa: F401
from app.models.teacher import Teacher  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
