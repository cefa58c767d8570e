from __future__ import annotations

import logging
import re
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.models.teacher import Teacher

logger = logging.getLogger(__name__)

_SALUTATION = re.compile(r"^(Mr|Mrs|Sh|Dr|Prof|Miss)\.?$", re.IGNORECASE)
_BRACKETS = re.compile(r"[(){}\[\]]")
_NON_LETTERS = re.compile(r"[^a-zA-Z\s]")


def default_teacher_code(name: str | None) -> str:
    """Initials of ``name`` with salutations and punctuation removed."""
    if not name:
        return ""
    words = [word for word in name.split() if not _SALUTATION.match(word)]
    cleaned = _NON_LETTERS.sub("", _BRACKETS.sub("", " ".join(words)))
    return "".join(word[0].upper() for word in cleaned.split())


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


def detect_code_conflicts(codes: dict[str, str]) -> dict[str, list[str]]:
    """Map each id whose code is shared to the other ids holding that code."""
    code_to_ids: dict[str, list[str]] = defaultdict(list)
    for teacher_id, code in codes.items():
        if not code:
            continue
        code_to_ids[code].append(teacher_id)

    conflicts: dict[str, list[str]] = {}
    for ids in code_to_ids.values():
        if len(ids) < 2:
            continue
        for teacher_id in ids:
            conflicts[teacher_id] = [other for other in ids if other != teacher_id]
    return conflicts


def effective_codes(teachers: list[Teacher]) -> dict[str, str]:
    return {teacher.id: teacher.teacher_code or default_teacher_code(teacher.name) for teacher in teachers}


def list_teacher_codes(db: Session) -> list[dict]:
    teachers = list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())
    codes = effective_codes(teachers)
    conflicts = detect_code_conflicts(codes)
    return [
        {
            "teacher_id": teacher.id,
            "name": teacher.name,
            "department": teacher.department,
            "teacher_code": teacher.teacher_code,
            "default_code": default_teacher_code(teacher.name),
            "effective_code": codes[teacher.id],
            "conflicts_with": conflicts.get(teacher.id, []),
        }
        for teacher in teachers
    ]


def set_teacher_code(db: Session, teacher_id: str, code: str) -> Teacher:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)

    normalized = normalize_code(code)
    teachers = list(db.execute(select(Teacher)).scalars())
    codes = effective_codes(teachers)
    codes[teacher.id] = normalized
    clashes = detect_code_conflicts(codes).get(teacher.id, [])
    if clashes:
        raise ConflictError(
            f"Teacher code {normalized} is already used",
            details={"code": normalized, "conflicts_with": clashes},
        )
    teacher.teacher_code = normalized or None
    return teacher


def save_teacher_codes(db: Session, submitted: dict[str, str]) -> list[Teacher]:
    """Persist a full code map; rejected as a whole when any code is shared."""
    teachers = {teacher.id: teacher for teacher in db.execute(select(Teacher)).scalars()}
    missing = [teacher_id for teacher_id in submitted if teacher_id not in teachers]
    if missing:
        raise ResourceNotFoundError("Teacher", ", ".join(missing))

    codes = effective_codes(list(teachers.values()))
    codes.update({teacher_id: normalize_code(code) for teacher_id, code in submitted.items()})
    conflicts = detect_code_conflicts(codes)
    if conflicts:
        raise ConflictError("Teacher codes contain duplicates", details={"conflicts": conflicts})

    changed: list[Teacher] = []
    for teacher_id, code in submitted.items():
        teacher = teachers[teacher_id]
        new_code = normalize_code(code) or None
        if teacher.teacher_code != new_code:
            teacher.teacher_code = new_code
            changed.append(teacher)
    logger.info("Saved %d teacher code change(s)", len(changed))
    return changed
