"""create campus admin schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("super_admin", "hod", "tt_incharge", name="user_role")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_department_id", "users", ["department_id"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("expertise", sa.JSON(), nullable=False),
        sa.Column("qualification", sa.String(length=200), nullable=False, server_default="Not specified"),
        sa.Column("experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="Faculty"),
        sa.Column("department_head", sa.String(length=200), nullable=True),
        sa.Column("designation", sa.String(length=100), nullable=False, server_default="Faculty"),
        sa.Column("employee_id", sa.String(length=100), nullable=True),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("joining_date", sa.String(length=50), nullable=True),
        sa.Column("max_hours", sa.Integer(), nullable=False, server_default="18"),
        sa.Column("load_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="available"),
        sa.Column("teacher_code", sa.String(length=20), nullable=True),
        sa.Column("assigned_courses", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)
    op.create_index("ix_teachers_name", "teachers", ["name"])
    op.create_index("ix_teachers_department", "teachers", ["department"])
    op.create_index("ix_teachers_teacher_code", "teachers", ["teacher_code"])

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("semester", sa.String(length=50), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("faculty_list", sa.JSON(), nullable=False),
        sa.Column("lecture_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tutorial_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("practical_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("weekly_hours", sa.String(length=50), nullable=False, server_default="0L"),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="Core"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("prerequisites", sa.JSON(), nullable=False),
        sa.Column("is_common_course", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_courses_code", "courses", ["code"])
    op.create_index("ix_courses_semester", "courses", ["semester"])
    op.create_index("ix_courses_department", "courses", ["department"])

    op.create_table(
        "departments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False, server_default="Engineering"),
        sa.Column("hod_id", sa.String(length=36), nullable=True),
        sa.Column("hod_name", sa.String(length=200), nullable=True),
        sa.Column("college_id", sa.String(length=36), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_departments_name", "departments", ["name"], unique=True)
    op.create_index("ix_departments_college_id", "departments", ["college_id"])

    op.create_table(
        "colleges",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="Faculty"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Active"),
        sa.Column("dean", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_colleges_code", "colleges", ["code"], unique=True)
    op.create_index("ix_colleges_name", "colleges", ["name"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("number", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("building", sa.String(length=200), nullable=True),
        sa.Column("floor", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="Available"),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("faculty", sa.String(length=200), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("faculty", "number", name="uq_rooms_faculty_number"),
    )
    op.create_index("ix_rooms_number", "rooms", ["number"])

    op.create_table(
        "semesters",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="inactive"),
        *_timestamps(),
    )
    op.create_index("ix_semesters_name", "semesters", ["name"], unique=True)

    op.create_table(
        "settings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, unique=True),
        sa.Column("current_semester_id", sa.String(length=36), nullable=True),
        sa.Column("current_semester_name", sa.String(length=50), nullable=True),
        sa.Column("active_semester_ids", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="faculty_load"),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("semester", sa.String(length=50), nullable=False),
        sa.Column("faculty_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("overloaded_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("nearly_full_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("faculty_data", sa.JSON(), nullable=False),
        sa.Column("generated_by", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_reports_department_id", "reports", ["department_id"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("user_role", sa.String(length=50), nullable=True),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_department_id", "activity_logs", ["department_id"])


def downgrade() -> None:
    for table_name in (
        "activity_logs",
        "reports",
        "settings",
        "semesters",
        "rooms",
        "colleges",
        "departments",
        "courses",
        "teachers",
        "users",
    ):
        op.drop_table(table_name)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
