def test_batch_crud_filters_and_stats(client, admin_headers, incharge_headers, make_department):
    computing = make_department("Computer Science")
    mechanical = make_department("Mechanical Engineering")

    branches = client.get("/api/batches/branches", headers=incharge_headers).json()
    assert {item["name"] for item in branches} == {"Computer Science", "Mechanical Engineering"}
    assert client.get("/api/batches/semesters", headers=incharge_headers).json()[-1] == "Semester 8"

    created = client.post(
        "/api/batches/",
        json={"name": " A1 ", "branch_id": computing["id"], "semester": "sem 3", "student_count": 60},
        headers=incharge_headers,
    )
    assert created.status_code == 201, created.text
    batch = created.json()
    assert batch["name"] == "A1"
    assert batch["semester"] == "Semester 3"

    client.post(
        "/api/batches/",
        json={"name": "A2", "branch_id": computing["id"], "semester": "Semester 3", "student_count": 55},
        headers=admin_headers,
    )
    client.post(
        "/api/batches/",
        json={"name": "M1", "branch_id": mechanical["id"], "semester": "Semester 5", "student_count": 40},
        headers=admin_headers,
    )

    by_branch = client.get("/api/batches/", params={"branch_id": computing["id"]}, headers=incharge_headers).json()
    assert [item["name"] for item in by_branch] == ["A1", "A2"]
    by_semester = client.get("/api/batches/", params={"semester": "Semester 5"}, headers=incharge_headers).json()
    assert [item["name"] for item in by_semester] == ["M1"]

    stats = client.get("/api/batches/stats", headers=incharge_headers).json()
    assert stats["total_batches"] == 3
    assert stats["total_students"] == 155
    assert stats["branch_stats"] == {computing["id"]: 2, mechanical["id"]: 1}
    assert stats["semester_stats"] == {"Semester 3": 2, "Semester 5": 1}

    updated = client.put(f"/api/batches/{batch['id']}", json={"student_count": 62}, headers=incharge_headers)
    assert updated.status_code == 200
    assert updated.json()["student_count"] == 62
    assert client.get(f"/api/batches/{batch['id']}", headers=incharge_headers).json()["student_count"] == 62

    assert client.delete(f"/api/batches/{batch['id']}", headers=incharge_headers).status_code == 200
    missing = client.get(f"/api/batches/{batch['id']}", headers=incharge_headers)
    assert missing.status_code == 404
    assert missing.json()["details"]["resource_type"] == "Batch"


def test_batch_names_are_unique_per_branch_and_semester(client, admin_headers, make_department):
    computing = make_department("Computer Science")
    mechanical = make_department("Mechanical Engineering")
    payload = {"name": "A1", "branch_id": computing["id"], "semester": "Semester 3"}
    assert client.post("/api/batches/", json=payload, headers=admin_headers).status_code == 201

    duplicate = client.post("/api/batches/", json={**payload, "name": "a1"}, headers=admin_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Batch with this name already exists"

    other_semester = client.post("/api/batches/", json={**payload, "semester": "Semester 4"}, headers=admin_headers)
    assert other_semester.status_code == 201
    other_branch = client.post("/api/batches/", json={**payload, "branch_id": mechanical["id"]}, headers=admin_headers)
    assert other_branch.status_code == 201

    second = client.post("/api/batches/", json={**payload, "name": "A2"}, headers=admin_headers).json()
    renamed = client.put(f"/api/batches/{second['id']}", json={"name": "A1"}, headers=admin_headers)
    assert renamed.status_code == 409


def test_batch_writes_validate_branch_semester_and_role(client, admin_headers, make_hod):
    department, hod_headers = make_hod()

    unknown_branch = client.post(
        "/api/batches/",
        json={"name": "A1", "branch_id": "missing", "semester": "Semester 1"},
        headers=admin_headers,
    )
    assert unknown_branch.status_code == 404
    assert unknown_branch.json()["details"]["resource_type"] == "Branch"

    bad_semester = client.post(
        "/api/batches/",
        json={"name": "A1", "branch_id": department["id"], "semester": "Winter"},
        headers=admin_headers,
    )
    assert bad_semester.status_code == 400

    negative = client.post(
        "/api/batches/",
        json={"name": "A1", "branch_id": department["id"], "semester": "Semester 1", "student_count": -1},
        headers=admin_headers,
    )
    assert negative.status_code == 422

    forbidden = client.post(
        "/api/batches/",
        json={"name": "A1", "branch_id": department["id"], "semester": "Semester 1"},
        headers=hod_headers,
    )
    assert forbidden.status_code == 403
    assert client.get("/api/batches/", headers=hod_headers).json() == []
