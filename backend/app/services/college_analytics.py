"""Per-college, university-wide and comparative figures computed from stored records.

A college owns the departments whose ``college_id`` points at it. Teachers and
courses belong to a college through their department (filed by id or name),
rooms through ``Room.faculty`` matching the college name, and students are the
head count of the batches of its departments.
"""
from __future__ import annotations

from collections import Counter
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.batch import Batch
from app.models.college import College, CollegeStatus, CollegeType
from app.models.course import Course
from app.models.department import Department
from app.models.room import Room, RoomStatus
from app.models.teacher import Teacher
from app.services.workload import LoadStatus

logger = logging.getLogger(__name__)


def _all(db: Session, model) -> list:
    return list(db.execute(select(model)).scalars())


def _department_keys(departments: list[Department]) -> set[str]:
    keys: set[str] = set()
    for department in departments:
        keys.update({department.id, department.name})
    return keys


def _average(values: list[int]) -> int:
    return round(sum(values) / len(values)) if values else 0


def _college_figures(db: Session, college: College) -> dict:
    departments = [item for item in _all(db, Department) if item.college_id == college.id]
    keys = _department_keys(departments)
    department_ids = {item.id for item in departments}

    teachers = [item for item in _all(db, Teacher) if item.department in keys]
    courses = [item for item in _all(db, Course) if item.department in keys]
    rooms = [item for item in _all(db, Room) if item.faculty == college.name]
    batches = [item for item in _all(db, Batch) if item.branch_id in department_ids]

    return {
        "college": {
            "id": college.id,
            "name": college.name,
            "code": college.code,
            "type": college.type,
            "status": college.status,
        },
        "departments": {
            "total": len(departments),
            "active": sum(1 for item in departments if item.active),
        },
        "faculty": {
            "total": len(teachers),
            "active": sum(1 for item in teachers if item.active),
            "overloaded": sum(1 for item in teachers if item.status == LoadStatus.overloaded),
            "load_hours": sum(item.load_hours or 0 for item in teachers),
        },
        "students": {
            "total": sum(item.student_count or 0 for item in batches),
            "batches": len(batches),
        },
        "courses": {
            "total": len(courses),
            "active": sum(1 for item in courses if item.active),
            "unassigned": sum(1 for item in courses if not item.faculty_id and not item.faculty_list),
        },
        "rooms": {
            "total": len(rooms),
            "available": sum(1 for item in rooms if item.status == RoomStatus.available.value),
            "occupied": sum(1 for item in rooms if item.status == RoomStatus.occupied.value),
            "capacity": sum(item.capacity or 0 for item in rooms),
        },
    }


def college_analytics(db: Session, college_id: str) -> dict:
    college = db.get(College, college_id)
    if college is None:
        raise ResourceNotFoundError("College", college_id)
    return _college_figures(db, college)


def university_analytics(db: Session) -> dict:
    colleges = _all(db, College)
    teachers = _all(db, Teacher)
    rooms = _all(db, Room)

    by_type = {item.value: 0 for item in CollegeType}
    by_type.update(Counter(college.type for college in colleges))
    by_status = {item.value: 0 for item in CollegeStatus}
    by_status.update(Counter(college.status for college in colleges))

    return {
        "overview": {
            "total_colleges": len(colleges),
            "total_departments": len(_all(db, Department)),
            "total_faculty": len(teachers),
            "total_students": sum(item.student_count or 0 for item in _all(db, Batch)),
            "total_courses": len(_all(db, Course)),
        },
        "college_breakdown": by_type,
        "status_breakdown": by_status,
        "faculty_load": dict(Counter(item.status for item in teachers)),
        "facilities": {
            "total_rooms": len(rooms),
            "room_types": dict(Counter(item.type or "Unspecified" for item in rooms)),
            "total_capacity": sum(item.capacity or 0 for item in rooms),
        },
    }


def comparative_analytics(db: Session, college_ids: list[str]) -> dict:
    """Side-by-side headline metrics; unknown ids are skipped rather than failing the comparison."""
    comparisons = []
    for college_id in dict.fromkeys(college_ids):
        college = db.get(College, college_id)
        if college is None:
            logger.info("Skipping unknown college %s in comparison", college_id)
            continue
        figures = _college_figures(db, college)
        comparisons.append(
            {
                "college": figures["college"],
                "metrics": {
                    "departments": figures["departments"]["total"],
                    "faculty": figures["faculty"]["total"],
                    "students": figures["students"]["total"],
                    "courses": figures["courses"]["total"],
                    "rooms": figures["rooms"]["total"],
                },
            }
        )

    def metric(name: str) -> list[int]:
        return [item["metrics"][name] for item in comparisons]

    return {
        "comparisons": comparisons,
        "summary": {
            "total_colleges": len(comparisons),
            "avg_departments": _average(metric("departments")),
            "avg_faculty": _average(metric("faculty")),
            "avg_students": _average(metric("students")),
            "avg_courses": _average(metric("courses")),
        },
    }
