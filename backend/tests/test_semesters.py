from datetime import date

import pytest

from app.core.exceptions import ConflictError, InvalidInputError
from app.services.semesters import (
    academic_period_info,
    activate_semester,
    auto_activate_semesters,
    create_semester,
    current_academic_year,
    delete_semester,
    format_semester_name,
    get_global_settings,
    parse_semester_string,
)


def test_academic_year_and_period_follow_july_boundary():
    assert current_academic_year(date(2026, 8, 1)) == "2026-27"
    assert current_academic_year(date(2027, 2, 1)) == "2026-27"
    info = academic_period_info(date(2026, 9, 1))
    assert info["period"] == "odd"
    assert info["default_semesters"] == ["Semester 1", "Semester 3", "Semester 5", "Semester 7"]
    assert len(info["all_semesters"]) == 8


def test_parse_and_format_semester_names():
    assert parse_semester_string("Semester 4") == {"number": 4, "is_valid": True, "type": "even"}
    assert parse_semester_string("Semester 9")["is_valid"] is False
    assert format_semester_name("sem 3") == "Semester 3"
    assert format_semester_name("Fall") == "Fall"


def test_create_semester_validates_and_deduplicates(db_session):
    semester = create_semester(db_session, "sem 1")
    assert semester.name == "Semester 1"
    assert semester.status == "inactive"
    with pytest.raises(ConflictError):
        create_semester(db_session, "Semester 1")
    with pytest.raises(InvalidInputError):
        create_semester(db_session, "Autumn term")


def test_activation_is_exclusive_and_recorded(db_session):
    first = create_semester(db_session, "Semester 1")
    second = create_semester(db_session, "Semester 2")
    activate_semester(db_session, first.id)
    activate_semester(db_session, second.id)
    db_session.flush()
    assert first.status == "inactive"
    assert second.status == "active"
    assert get_global_settings(db_session).current_semester_id == second.id
    with pytest.raises(ConflictError):
        delete_semester(db_session, second.id)
    delete_semester(db_session, first.id)


def test_auto_activation_picks_semesters_of_current_period(db_session):
    names = ["Semester 1", "Semester 2", "Semester 3", "Semester 4"]
    created = {name: create_semester(db_session, name) for name in names}
    db_session.flush()

    current = auto_activate_semesters(db_session, today=date(2027, 1, 15))
    assert sorted(semester.name for semester in current) == ["Semester 2", "Semester 4"]
    assert created["Semester 1"].status == "inactive"
    assert created["Semester 4"].status == "active"
    assert sorted(get_global_settings(db_session).active_semester_ids) == sorted(
        [created["Semester 2"].id, created["Semester 4"].id]
    )
