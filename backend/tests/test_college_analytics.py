def _college(client, headers, name, code, **extra):
    response = client.post("/api/colleges/", json={"name": name, "code": code, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _populate_engineering(client, admin_headers, make_department):
    college = _college(client, admin_headers, "Faculty of Engineering", "FOE")
    computing = make_department("Computer Science", college_id=college["id"])
    make_department("Mechanical Engineering", college_id=college["id"])
    make_department("History")

    for name in ("Asha", "Bilal"):
        response = client.post(
            "/api/teachers/",
            json={"name": name, "email": f"{name.lower()}@university.edu", "department": computing["id"]},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
    client.post(
        "/api/teachers/",
        json={"name": "Chen", "email": "chen@university.edu", "department": "History"},
        headers=admin_headers,
    )
    client.post(
        "/api/courses/",
        json={"code": "CS201", "title": "Data Structures", "semester": "Semester 3", "department": computing["id"]},
        headers=admin_headers,
    )
    client.post(
        "/api/rooms/",
        json={"number": "E101", "capacity": 80, "faculty": "Faculty of Engineering", "type": "Classroom"},
        headers=admin_headers,
    )
    client.post(
        "/api/rooms/",
        json={"number": "S101", "capacity": 40, "faculty": "Faculty of Science", "type": "Laboratory"},
        headers=admin_headers,
    )
    for name, count in (("A1", 60), ("A2", 55)):
        client.post(
            "/api/batches/",
            json={"name": name, "branch_id": computing["id"], "semester": "Semester 3", "student_count": count},
            headers=admin_headers,
        )
    return college


def test_college_analytics_counts_records_owned_by_the_college(client, admin_headers, make_department):
    college = _populate_engineering(client, admin_headers, make_department)

    response = client.get(f"/api/colleges/{college['id']}/analytics", headers=admin_headers)
    assert response.status_code == 200, response.text
    analytics = response.json()
    assert analytics["college"]["code"] == "FOE"
    assert analytics["departments"] == {"total": 2, "active": 2}
    assert analytics["faculty"]["total"] == 2
    assert analytics["students"] == {"total": 115, "batches": 2}
    assert analytics["courses"]["total"] == 1
    assert analytics["courses"]["unassigned"] == 1
    assert analytics["rooms"]["total"] == 1
    assert analytics["rooms"]["capacity"] == 80

    missing = client.get("/api/colleges/missing/analytics", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["details"]["resource_type"] == "College"


def test_university_analytics_covers_every_college(client, admin_headers, make_department):
    _populate_engineering(client, admin_headers, make_department)
    _college(client, admin_headers, "School of Design", "SOD", type="School", status="Inactive")

    analytics = client.get("/api/colleges/analytics/university", headers=admin_headers).json()
    assert analytics["overview"] == {
        "total_colleges": 2,
        "total_departments": 3,
        "total_faculty": 3,
        "total_students": 115,
        "total_courses": 1,
    }
    assert analytics["college_breakdown"]["Faculty"] == 1
    assert analytics["college_breakdown"]["School"] == 1
    assert analytics["college_breakdown"]["Institute"] == 0
    assert analytics["status_breakdown"] == {"Active": 1, "Inactive": 1}
    assert analytics["facilities"]["total_rooms"] == 2
    assert analytics["facilities"]["room_types"] == {"Classroom": 1, "Laboratory": 1}


def test_comparative_analytics_skips_unknown_colleges(client, admin_headers, make_department):
    engineering = _populate_engineering(client, admin_headers, make_department)
    design = _college(client, admin_headers, "School of Design", "SOD", type="School")

    response = client.get(
        "/api/colleges/analytics/compare",
        params={"ids": [engineering["id"], design["id"], "missing"]},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert [item["college"]["code"] for item in body["comparisons"]] == ["FOE", "SOD"]
    assert body["comparisons"][0]["metrics"]["students"] == 115
    assert body["summary"] == {
        "total_colleges": 2,
        "avg_departments": 1,
        "avg_faculty": 1,
        "avg_students": 58,
        "avg_courses": 0,
    }

    empty = client.get("/api/colleges/analytics/compare", headers=admin_headers).json()
    assert empty["comparisons"] == []
    assert empty["summary"]["avg_students"] == 0


def test_college_analytics_are_limited_to_super_admins(client, admin_headers, incharge_headers):
    college = _college(client, admin_headers, "Faculty of Engineering", "FOE")
    assert client.get(f"/api/colleges/{college['id']}/analytics", headers=incharge_headers).status_code == 403
    assert client.get("/api/colleges/analytics/university", headers=incharge_headers).status_code == 403
