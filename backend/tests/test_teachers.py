def _teacher_payload(**overrides):
    payload = {
        "name": "Dr. John Smith",
        "email": "john.smith@university.edu",
        "department": "Computer Science",
        "expertise": ["Algorithms", " Databases ", "Algorithms"],
        "qualification": "Ph.D",
        "experience": 10,
    }
    payload.update(overrides)
    return payload


def test_teacher_crud_and_search(client, admin_headers, incharge_headers):
    created = client.post("/api/teachers/", json=_teacher_payload(), headers=admin_headers)
    assert created.status_code == 201, created.text
    teacher = created.json()
    assert teacher["expertise"] == ["Algorithms", "Databases"]
    assert teacher["max_hours"] == 18
    assert teacher["status"] == "available"
    assert teacher["role"] == "Faculty"

    duplicate = client.post("/api/teachers/", json=_teacher_payload(name="Copy"), headers=admin_headers)
    assert duplicate.status_code == 409

    forbidden = client.post("/api/teachers/", json=_teacher_payload(email="x@university.edu"), headers=incharge_headers)
    assert forbidden.status_code == 403

    listed = client.get("/api/teachers/", params={"department": "Computer Science"}, headers=incharge_headers)
    assert [item["id"] for item in listed.json()] == [teacher["id"]]

    by_expertise = client.get("/api/teachers/search", params={"q": "databases"}, headers=incharge_headers)
    assert len(by_expertise.json()) == 1
    assert client.get("/api/teachers/search", params={"q": "zoology"}, headers=incharge_headers).json() == []

    updated = client.put(
        f"/api/teachers/{teacher['id']}",
        json={"designation": "Professor", "max_hours": 20},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["designation"] == "Professor"
    assert updated.json()["max_hours"] == 20

    deleted = client.delete(f"/api/teachers/{teacher['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/teachers/{teacher['id']}", headers=admin_headers).status_code == 404


def test_deleting_teacher_detaches_courses_and_headship(client, admin_headers, make_department):
    teacher = client.post("/api/teachers/", json=_teacher_payload(), headers=admin_headers).json()
    department = make_department("Computer Science", hod=teacher["id"])
    assert department["hod"] == "Dr. John Smith"

    course = client.post(
        "/api/courses/",
        json={
            "code": "cs101",
            "title": "Programming",
            "semester": "Semester 1",
            "department": department["id"],
            "faculty_id": teacher["id"],
            "weekly_hours": "3L+2P",
        },
        headers=admin_headers,
    ).json()
    assert course["faculty_list"] == [teacher["id"]]

    assert client.delete(f"/api/teachers/{teacher['id']}", headers=admin_headers).status_code == 200

    course_after = client.get(f"/api/courses/{course['id']}", headers=admin_headers).json()
    assert course_after["faculty_list"] == []
    assert course_after["faculty_id"] is None
    department_after = client.get(f"/api/departments/{department['id']}", headers=admin_headers).json()
    assert department_after["hod"] == "Not Assigned"


def test_bulk_delete_reports_per_id_outcome(client, admin_headers):
    first = client.post("/api/teachers/", json=_teacher_payload(), headers=admin_headers).json()
    second = client.post(
        "/api/teachers/",
        json=_teacher_payload(name="Maria Garcia", email="maria@university.edu"),
        headers=admin_headers,
    ).json()

    response = client.post(
        "/api/teachers/bulk-delete",
        json={"ids": [first["id"], second["id"], "missing"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["successful"] == 2
    assert body["failed"] == 1
    assert body["results"][2] == {"id": "missing", "success": False, "error": "Teacher not found"}
    assert client.get("/api/teachers/", headers=admin_headers).json() == []


def test_example_dataset_is_served(client, incharge_headers):
    response = client.get("/api/teachers/example", headers=incharge_headers)
    assert response.status_code == 200
    assert len(response.json()["teachers"]) == 2


def _shared_course_setup(client, admin_headers, make_department, names):
    department = make_department("Computer Science")
    teachers = [
        client.post(
            "/api/teachers/",
            json=_teacher_payload(name=name, email=f"{name.lower()}@university.edu", department=department["id"]),
            headers=admin_headers,
        ).json()
        for name in names
    ]
    course = client.post(
        "/api/courses/",
        json={
            "code": "CS210",
            "title": "Operating Systems",
            "semester": "Semester 3",
            "department": department["id"],
            "weekly_hours": "6L",
        },
        headers=admin_headers,
    ).json()
    for teacher in teachers:
        response = client.post(
            "/api/assignments/assign",
            json={"course_id": course["id"], "teacher_id": teacher["id"]},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
    return teachers, course


def test_deleting_a_co_teacher_hands_the_full_share_to_the_rest(client, admin_headers, make_department):
    (first, second), course = _shared_course_setup(client, admin_headers, make_department, ["Asha", "Bilal"])
    assert client.get(f"/api/teachers/{second['id']}", headers=admin_headers).json()["load_hours"] == 3

    assert client.delete(f"/api/teachers/{first['id']}", headers=admin_headers).status_code == 200

    remaining = client.get(f"/api/teachers/{second['id']}", headers=admin_headers).json()
    assert remaining["load_hours"] == 6
    assert client.get(f"/api/courses/{course['id']}", headers=admin_headers).json()["faculty_list"] == [second["id"]]


def test_bulk_delete_recomputes_surviving_co_teachers(client, admin_headers, make_department):
    (first, second, third), _ = _shared_course_setup(
        client, admin_headers, make_department, ["Asha", "Bilal", "Chen"]
    )
    assert client.get(f"/api/teachers/{third['id']}", headers=admin_headers).json()["load_hours"] == 2

    response = client.post(
        "/api/teachers/bulk-delete",
        json={"ids": [first["id"], second["id"]]},
        headers=admin_headers,
    )
    assert response.json()["successful"] == 2

    survivor = client.get(f"/api/teachers/{third['id']}", headers=admin_headers).json()
    assert survivor["load_hours"] == 6
    assert survivor["status"] == "available"
