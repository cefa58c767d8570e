from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInputError
from app.models.report import FacultyLoadReport
from app.models.user import User
from app.services.assignments import department_courses, department_teachers
from app.services.audit import log_activity
from app.services.weekly_hours import course_weekly_hours
from app.services.workload import (
    LoadStatus,
    effective_max_hours,
    load_percentage,
    load_status,
    semester_course_ids,
)

logger = logging.getLogger(__name__)


def faculty_load_view(
    db: Session,
    department_id: str,
    semester: str,
    *,
    default_max_hours: int,
    overloaded_only: bool = False,
    search: str | None = None,
) -> list[dict]:
    """Per-teacher load for one semester, computed from the courses they carry."""
    semester = (semester or "").strip()
    if not semester:
        raise InvalidInputError("semester is required")

    courses = department_courses(db, department_id)
    by_id = {course.id: course for course in courses}
    course_semesters = {course.id: (course.semester or "").strip() for course in courses}

    rows: list[dict] = []
    for teacher in department_teachers(db, department_id):
        carried = [
            by_id[course_id]
            for course_id in semester_course_ids(teacher.assigned_courses, semester, course_semesters)
            if course_id in by_id
        ]
        hours = sum(course_weekly_hours(course).total for course in carried)
        max_hours = effective_max_hours(teacher.max_hours, default_max_hours)
        percentage = load_percentage(hours, max_hours, default_max_hours)
        rows.append(
            {
                "id": teacher.id,
                "name": teacher.name,
                "department": teacher.department,
                "expertise": teacher.expertise or [],
                "max_hours": max_hours,
                "semester_load_hours": hours,
                "load_percentage": round(percentage, 2),
                "status": load_status(percentage),
                "faculty_courses": [
                    {
                        "id": course.id,
                        "code": course.code,
                        "title": course.title,
                        "semester": course.semester,
                        "weekly_hours": course.weekly_hours,
                        "hours": course_weekly_hours(course).total,
                    }
                    for course in carried
                ],
            }
        )

    if overloaded_only:
        rows = [row for row in rows if row["status"] == LoadStatus.overloaded]
    if search:
        needle = search.strip().lower()
        rows = [
            row
            for row in rows
            if needle in row["name"].lower()
            or any(
                needle in course["code"].lower() or needle in course["title"].lower()
                for course in row["faculty_courses"]
            )
        ]
    return rows


def generate_load_report(
    db: Session,
    department_id: str,
    semester: str,
    *,
    user: User | None,
    default_max_hours: int,
) -> FacultyLoadReport:
    rows = faculty_load_view(db, department_id, semester, default_max_hours=default_max_hours)
    counts = {LoadStatus.available: 0, LoadStatus.nearly_full: 0, LoadStatus.overloaded: 0}
    for row in rows:
        counts[row["status"]] += 1

    report = FacultyLoadReport(
        department_id=department_id,
        semester=semester.strip(),
        faculty_count=len(rows),
        overloaded_count=counts[LoadStatus.overloaded],
        nearly_full_count=counts[LoadStatus.nearly_full],
        available_count=counts[LoadStatus.available],
        faculty_data=[
            {
                "id": row["id"],
                "name": row["name"],
                "load_percentage": row["load_percentage"],
                "status": row["status"],
                "semester_load_hours": row["semester_load_hours"],
                "max_hours": row["max_hours"],
            }
            for row in rows
        ],
        generated_by=user.id if user is not None else None,
    )
    db.add(report)
    db.flush()
    log_activity(
        db,
        user=user,
        action="generate_report",
        entity_type="report",
        entity_id=report.id,
        description=f"Generated faculty load report for {report.semester}",
        details={"faculty_count": report.faculty_count, "overloaded_count": report.overloaded_count},
    )
    logger.info("Generated load report %s for department %s", report.id, department_id)
    return report


def list_reports(db: Session, department_id: str | None = None) -> list[FacultyLoadReport]:
    statement = select(FacultyLoadReport).order_by(FacultyLoadReport.created_at.desc())
    if department_id:
        statement = statement.where(FacultyLoadReport.department_id == department_id)
    return list(db.execute(statement).scalars())
