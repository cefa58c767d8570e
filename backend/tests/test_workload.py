from app.services.workload import (
    LoadStatus,
    all_assigned_course_ids,
    course_assignment_stats,
    load_percentage,
    load_status,
    normalize_assigned_courses,
    semester_course_ids,
    split_course_hours,
    workload_stats,
)


def test_load_percentage_uses_default_when_max_missing():
    assert load_percentage(9, 18) == 50
    assert load_percentage(9, None) == 50
    assert load_percentage(9, 0, default=9) == 100


def test_load_status_thresholds():
    assert load_status(70) == LoadStatus.available
    assert load_status(70.5) == LoadStatus.nearly_full
    assert load_status(90) == LoadStatus.nearly_full
    assert load_status(90.1) == LoadStatus.overloaded


def test_legacy_list_assignments_are_normalized():
    assert normalize_assigned_courses(["c1", "c2"]) == {"Legacy": ["c1", "c2"]}
    assert normalize_assigned_courses([]) == {}
    assert normalize_assigned_courses(None) == {}
    assert all_assigned_course_ids({"Semester 1": ["c1"], "Semester 3": ["c2", "c1"]}) == ["c1", "c2"]


def test_semester_course_ids_merges_legacy_entries():
    assigned = {"Semester 1": ["c1"], "Legacy": ["c2", "c3"]}
    course_semesters = {"c1": "Semester 1", "c2": "Semester 1", "c3": "Semester 2"}
    assert semester_course_ids(assigned, "Semester 1", course_semesters) == ["c1", "c2"]
    assert semester_course_ids(assigned, "Semester 2", course_semesters) == ["c3"]


def test_split_course_hours_rounds_up():
    assert split_course_hours(5, 2) == 3
    assert split_course_hours(6, 3) == 2
    assert split_course_hours(6, 0) == 0


def test_workload_stats_counts_and_average():
    stats = workload_stats(
        [
            (LoadStatus.available, 4),
            (LoadStatus.nearly_full, 14),
            (LoadStatus.overloaded, 18),
        ]
    )
    assert stats == {
        "available": 1,
        "nearly_full": 1,
        "overloaded": 1,
        "average_load": 12,
        "total_hours": 36,
    }
    assert workload_stats([])["average_load"] == 0


def test_course_assignment_stats():
    stats = course_assignment_stats([["t1"], ["t1", "t2"], [], []])
    assert stats["assigned"] == 2
    assert stats["unassigned"] == 2
    assert stats["multiple_assigned"] == 1
    assert stats["assignment_percentage"] == 50
    assert stats["average_faculty_per_course"] == 1.5
    assert stats["total_faculty_assignments"] == 3
