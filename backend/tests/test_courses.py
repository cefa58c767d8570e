def _course(code, department, **extra):
    payload = {"code": code, "title": f"Course {code}", "semester": "Semester 1", "department": department}
    payload.update(extra)
    return payload


def test_course_hours_and_credits_are_derived(client, admin_headers, make_department):
    department = make_department("Computer Science")
    response = client.post(
        "/api/courses/",
        json=_course("cs201", department["id"], lecture_hours=3, tutorial_hours=1, practical_hours=2),
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    course = response.json()
    assert course["code"] == "CS201"
    assert course["weekly_hours"] == "3L+1T+2P"
    assert course["total_hours"] == 6
    assert course["credits"] == 2
    assert course["department_name"] == "Computer Science"
    assert course["is_common_course"] is False

    updated = client.put(f"/api/courses/{course['id']}", json={"weekly_hours": "4L"}, headers=admin_headers)
    assert updated.json()["weekly_hours"] == "4L"
    assert updated.json()["practical_hours"] == 0


def test_duplicate_course_in_same_department_and_semester(client, admin_headers, make_department):
    department = make_department("Computer Science")
    assert client.post("/api/courses/", json=_course("CS1", department["id"]), headers=admin_headers).status_code == 201
    clash = client.post("/api/courses/", json=_course("cs1", department["id"]), headers=admin_headers)
    assert clash.status_code == 409
    other_semester = client.post(
        "/api/courses/", json=_course("CS1", department["id"], semester="Semester 2"), headers=admin_headers
    )
    assert other_semester.status_code == 201


def test_course_filters(client, admin_headers, incharge_headers, make_department):
    cs = make_department("Computer Science")
    ee = make_department("Electrical Engineering")
    client.post("/api/courses/", json=_course("CS1", cs["id"]), headers=admin_headers)
    client.post("/api/courses/", json=_course("EE1", ee["id"], semester="Semester 2"), headers=admin_headers)

    by_name = client.get("/api/courses/", params={"department": "electrical engineering"}, headers=incharge_headers)
    assert [item["code"] for item in by_name.json()] == ["EE1"]
    all_semesters = client.get("/api/courses/", params={"semester": "All Semesters"}, headers=incharge_headers)
    assert len(all_semesters.json()) == 2
    searched = client.get("/api/courses/", params={"search": "computer"}, headers=incharge_headers)
    assert [item["code"] for item in searched.json()] == ["CS1"]


def test_hod_sees_own_and_common_courses_only(client, admin_headers, make_department, make_hod):
    department, hod_headers = make_hod("Computer Science")
    other = make_department("Electrical Engineering")
    client.post("/api/courses/", json=_course("CS1", department["id"]), headers=admin_headers)
    client.post("/api/courses/", json=_course("EE1", other["id"]), headers=admin_headers)
    common = client.post("/api/courses/", json=_course("CHM181", "Common"), headers=admin_headers).json()
    assert common["is_common_course"] is True

    listed = client.get("/api/hod/courses/", headers=hod_headers)
    assert listed.status_code == 200
    assert sorted(item["code"] for item in listed.json()) == ["CHM181", "CS1"]

    own_only = client.get("/api/hod/courses/", params={"include_common": "false"}, headers=hod_headers)
    assert [item["code"] for item in own_only.json()] == ["CS1"]

    assert client.get("/api/courses/", headers=hod_headers).status_code == 403


def test_hod_cannot_create_or_change_common_courses(client, admin_headers, make_department, make_hod):
    department, hod_headers = make_hod("Computer Science")
    common_department = make_department("Common")
    common = client.post("/api/courses/", json=_course("MA101", common_department["id"]), headers=admin_headers).json()
    assert common["is_common_course"] is True

    create_common = client.post("/api/hod/courses/", json=_course("MA102", "common"), headers=hod_headers)
    assert create_common.status_code == 403
    flagged = client.post(
        "/api/hod/courses/", json=_course("MA103", None, is_common_course=True), headers=hod_headers
    )
    assert flagged.status_code == 403

    edit_common = client.put(f"/api/hod/courses/{common['id']}", json={"title": "Changed"}, headers=hod_headers)
    assert edit_common.status_code == 403
    assert "common" in edit_common.json()["detail"].lower()
    assert client.delete(f"/api/hod/courses/{common['id']}", headers=hod_headers).status_code == 403


def test_hod_manages_own_department_courses(client, admin_headers, make_department, make_hod):
    department, hod_headers = make_hod("Computer Science")
    other = make_department("Electrical Engineering")
    foreign = client.post("/api/courses/", json=_course("EE1", other["id"]), headers=admin_headers).json()

    created = client.post("/api/hod/courses/", json=_course("cs5", other["id"]), headers=hod_headers)
    assert created.status_code == 201
    own = created.json()
    assert own["department"] == department["id"]

    renamed = client.put(f"/api/hod/courses/{own['id']}", json={"title": "Compilers"}, headers=hod_headers)
    assert renamed.status_code == 200
    assert renamed.json()["title"] == "Compilers"

    move = client.put(f"/api/hod/courses/{own['id']}", json={"department": other["id"]}, headers=hod_headers)
    assert move.status_code == 403
    assert client.put(f"/api/hod/courses/{foreign['id']}", json={"title": "x"}, headers=hod_headers).status_code == 403

    assert client.delete(f"/api/hod/courses/{own['id']}", headers=hod_headers).status_code == 200
