from __future__ import annotations

import math
from typing import Any, Iterable

from app.models.teacher import LEGACY_ASSIGNMENT_KEY

DEFAULT_MAX_HOURS = 18
OVERLOADED_THRESHOLD = 90
NEARLY_FULL_THRESHOLD = 70


class LoadStatus:
    available = "available"
    nearly_full = "nearlyFull"
    overloaded = "overloaded"


def effective_max_hours(max_hours: int | float | None, default: int = DEFAULT_MAX_HOURS) -> int | float:
    if not max_hours or max_hours <= 0:
        return default
    return max_hours


def load_percentage(hours: int | float, max_hours: int | float | None, default: int = DEFAULT_MAX_HOURS) -> float:
    return (hours or 0) / effective_max_hours(max_hours, default) * 100


def load_status(percentage: float) -> str:
    if percentage > OVERLOADED_THRESHOLD:
        return LoadStatus.overloaded
    if percentage > NEARLY_FULL_THRESHOLD:
        return LoadStatus.nearly_full
    return LoadStatus.available


def normalize_assigned_courses(value: Any) -> dict[str, list[str]]:
    if isinstance(value, list):
        return {LEGACY_ASSIGNMENT_KEY: [str(item) for item in value]} if value else {}
    if isinstance(value, dict):
        return {str(key): [str(item) for item in (items or [])] for key, items in value.items()}
    return {}


def all_assigned_course_ids(value: Any) -> list[str]:
    seen: list[str] = []
    for items in normalize_assigned_courses(value).values():
        for course_id in items:
            if course_id not in seen:
                seen.append(course_id)
    return seen


def semester_course_ids(value: Any, semester: str, course_semesters: dict[str, str]) -> list[str]:
    """Course ids a teacher carries in ``semester``.

    Ids filed under the semester key are merged with legacy ids whose course
    belongs to that semester according to ``course_semesters``.
    """
    assigned = normalize_assigned_courses(value)
    result = list(assigned.get(semester, []))
    for course_id in assigned.get(LEGACY_ASSIGNMENT_KEY, []):
        if course_semesters.get(course_id) == semester and course_id not in result:
            result.append(course_id)
    return result


def split_course_hours(total_hours: int, faculty_count: int) -> int:
    if faculty_count <= 0:
        return 0
    return math.ceil(total_hours / faculty_count)


def workload_stats(entries: Iterable[tuple[str, int | float]]) -> dict:
    """Summarize ``(status, load_hours)`` pairs; average load is hours per teacher."""
    counts = {LoadStatus.available: 0, LoadStatus.nearly_full: 0, LoadStatus.overloaded: 0}
    total_hours = 0
    size = 0
    for status, hours in entries:
        size += 1
        total_hours += hours or 0
        if status in counts:
            counts[status] += 1
    return {
        "available": counts[LoadStatus.available],
        "nearly_full": counts[LoadStatus.nearly_full],
        "overloaded": counts[LoadStatus.overloaded],
        "average_load": round(total_hours / size) if size else 0,
        "total_hours": total_hours,
    }


def course_assignment_stats(faculty_lists: Iterable[list[str]]) -> dict:
    total = 0
    assigned = 0
    multiple = 0
    total_assignments = 0
    for faculty_ids in faculty_lists:
        total += 1
        if faculty_ids:
            assigned += 1
            total_assignments += len(faculty_ids)
            if len(faculty_ids) > 1:
                multiple += 1
    return {
        "assigned": assigned,
        "unassigned": total - assigned,
        "multiple_assigned": multiple,
        "total_courses": total,
        "assignment_percentage": round(assigned / total * 100) if total else 0,
        "average_faculty_per_course": round(total_assignments / assigned, 2) if assigned else 0,
        "total_faculty_assignments": total_assignments,
    }
