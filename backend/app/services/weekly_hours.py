from __future__ import annotations

import re
from typing import Any, NamedTuple

_COMPONENT_PATTERNS = {
    "lecture": re.compile(r"(\d+)L"),
    "tutorial": re.compile(r"(\d+)T"),
    "practical": re.compile(r"(\d+)P"),
}
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class WeeklyHours(NamedTuple):
    lecture: int = 0
    tutorial: int = 0
    practical: int = 0

    @property
    def total(self) -> int:
        return self.lecture + self.tutorial + self.practical


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _has_component_fields(course: dict | None) -> bool:
    if not course:
        return False
    return any(course.get(key) is not None for key in ("lecture_hours", "tutorial_hours", "practical_hours"))


def parse_weekly_hours(value: Any, course: dict | None = None) -> WeeklyHours:
    """Split a weekly-hours value into lecture, tutorial and practical counts.

    Accepted forms, in order of precedence: explicit ``lecture_hours`` /
    ``tutorial_hours`` / ``practical_hours`` on ``course``; a number (lecture
    hours); ``"3L+1T+2P"`` with any subset of components; ``"3-1-2"``; a bare
    integer string (lecture hours). Anything else parses as zero hours.
    """
    if _has_component_fields(course):
        return WeeklyHours(
            _to_int(course.get("lecture_hours")),
            _to_int(course.get("tutorial_hours")),
            _to_int(course.get("practical_hours")),
        )

    if value is None or isinstance(value, bool):
        return WeeklyHours()
    if isinstance(value, (int, float)):
        return WeeklyHours(int(value), 0, 0)

    text = str(value).strip()
    if not text:
        return WeeklyHours()

    matches = {name: pattern.search(text) for name, pattern in _COMPONENT_PATTERNS.items()}
    if any(matches.values()):
        return WeeklyHours(
            *(int(match.group(1)) if match else 0 for match in matches.values())
        )

    parts = text.split("-")
    if len(parts) >= 3:
        return WeeklyHours(_to_int(parts[0]), _to_int(parts[1]), _to_int(parts[2]))

    if _LEADING_INT.match(text):
        return WeeklyHours(_to_int(text), 0, 0)
    return WeeklyHours()


def format_weekly_hours(lecture: Any, tutorial: Any, practical: Any) -> str:
    parts: list[str] = []
    for amount, suffix in ((lecture, "L"), (tutorial, "T"), (practical, "P")):
        hours = _to_int(amount)
        if hours > 0:
            parts.append(f"{hours}{suffix}")
    return "+".join(parts) or "0L"


def total_weekly_hours(value: Any, course: dict | None = None) -> int:
    return parse_weekly_hours(value, course).total


def course_weekly_hours(course: Any) -> WeeklyHours:
    """Hours of an ORM course row, preferring its stored components."""
    components = WeeklyHours(
        course.lecture_hours or 0,
        course.tutorial_hours or 0,
        course.practical_hours or 0,
    )
    if components.total > 0:
        return components
    return parse_weekly_hours(course.weekly_hours)
