import pytest

from app.core.exceptions import ConflictError
from app.models.teacher import Teacher
from app.services.teacher_codes import (
    default_teacher_code,
    detect_code_conflicts,
    list_teacher_codes,
    save_teacher_codes,
    set_teacher_code,
)


def test_default_code_strips_salutations_and_brackets():
    assert default_teacher_code("Dr. John Smith") == "JS"
    assert default_teacher_code("Prof Maria (Lab) Garcia") == "MLG"
    assert default_teacher_code("mrs. anita rao") == "AR"
    assert default_teacher_code("") == ""


def test_detect_code_conflicts_ignores_blank_codes():
    conflicts = detect_code_conflicts({"a": "JS", "b": "JS", "c": "MG", "d": "", "e": ""})
    assert conflicts == {"a": ["b"], "b": ["a"]}


def _teacher(db, name, email, code=None):
    teacher = Teacher(name=name, email=email, teacher_code=code, expertise=[], assigned_courses={})
    db.add(teacher)
    db.flush()
    return teacher


def test_listing_flags_shared_default_codes(db_session):
    john = _teacher(db_session, "Dr. John Smith", "john@university.edu")
    jane = _teacher(db_session, "Jane Shah", "jane@university.edu")
    rows = {row["teacher_id"]: row for row in list_teacher_codes(db_session)}
    assert rows[john.id]["effective_code"] == "JS"
    assert rows[john.id]["conflicts_with"] == [jane.id]


def test_set_code_rejects_duplicates(db_session):
    _teacher(db_session, "Dr. John Smith", "john@university.edu", code="JSM")
    other = _teacher(db_session, "Maria Garcia", "maria@university.edu")
    with pytest.raises(ConflictError):
        set_teacher_code(db_session, other.id, " jsm ")
    assert set_teacher_code(db_session, other.id, "mg1").teacher_code == "MG1"


def test_save_codes_is_all_or_nothing(db_session):
    john = _teacher(db_session, "John Smith", "john@university.edu")
    maria = _teacher(db_session, "Maria Garcia", "maria@university.edu")
    with pytest.raises(ConflictError):
        save_teacher_codes(db_session, {john.id: "XX", maria.id: "xx"})
    assert john.teacher_code is None and maria.teacher_code is None

    changed = save_teacher_codes(db_session, {john.id: "JSM", maria.id: "MGA"})
    assert {teacher.id for teacher in changed} == {john.id, maria.id}
    assert maria.teacher_code == "MGA"
