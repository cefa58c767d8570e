def test_college_crud_stats_and_hierarchy(client, admin_headers, incharge_headers, make_department):
    engineering = client.post(
        "/api/colleges/",
        json={"name": "Faculty of Engineering", "code": "foe", "type": "Faculty"},
        headers=admin_headers,
    )
    assert engineering.status_code == 201, engineering.text
    college = engineering.json()
    assert college["code"] == "FOE"
    client.post(
        "/api/colleges/",
        json={"name": "School of Design", "code": "SOD", "type": "School", "status": "Inactive"},
        headers=admin_headers,
    )

    assert client.post(
        "/api/colleges/", json={"name": "Copy", "code": "FOE"}, headers=admin_headers
    ).status_code == 409
    assert client.post(
        "/api/colleges/", json={"name": "X", "code": "X"}, headers=incharge_headers
    ).status_code == 403

    schools = client.get("/api/colleges/", params={"type": "School"}, headers=incharge_headers).json()
    assert [item["code"] for item in schools] == ["SOD"]
    active = client.get("/api/colleges/active", headers=incharge_headers).json()
    assert [item["code"] for item in active] == ["FOE"]

    stats = client.get("/api/colleges/stats", headers=incharge_headers).json()
    assert stats["total"] == 2
    assert stats["inactive"] == 1
    assert stats["by_type"]["School"] == 1

    make_department("Mechanical Engineering", college_id=college["id"])
    hierarchy = client.get("/api/colleges/hierarchy", headers=incharge_headers).json()
    assert hierarchy["Faculty"][0]["departments"][0]["name"] == "Mechanical Engineering"

    updated = client.put(f"/api/colleges/{college['id']}", json={"dean": "Dr. Dean"}, headers=admin_headers)
    assert updated.json()["dean"] == "Dr. Dean"
    assert client.delete(f"/api/colleges/{college['id']}", headers=admin_headers).status_code == 200


def test_room_crud_validates_faculty_and_uniqueness(client, admin_headers, incharge_headers):
    payload = {"number": "CS101", "capacity": 60, "faculty": "Faculty of Engineering", "features": ["AC", "Projector"]}
    created = client.post("/api/rooms/", json=payload, headers=admin_headers)
    assert created.status_code == 201, created.text
    room = created.json()

    assert client.post("/api/rooms/", json=payload, headers=admin_headers).status_code == 409
    same_number_elsewhere = client.post(
        "/api/rooms/", json={**payload, "faculty": "Faculty of Science"}, headers=admin_headers
    )
    assert same_number_elsewhere.status_code == 201

    unknown = client.post("/api/rooms/", json={**payload, "faculty": "Faculty of Magic"}, headers=admin_headers)
    assert unknown.status_code == 400

    by_feature = client.get("/api/rooms/", params={"feature": "AC"}, headers=incharge_headers).json()
    assert len(by_feature) == 2
    by_faculty = client.get(
        "/api/rooms/", params={"faculty": "Faculty of Science"}, headers=incharge_headers
    ).json()
    assert len(by_faculty) == 1

    options = client.get("/api/rooms/options", headers=incharge_headers).json()
    assert "Common Facilities" in options["faculties"]
    assert "Available" in options["statuses"]

    updated = client.put(f"/api/rooms/{room['id']}", json={"capacity": 80}, headers=admin_headers)
    assert updated.json()["capacity"] == 80
    assert client.delete(f"/api/rooms/{room['id']}", headers=admin_headers).status_code == 200


def test_college_names_are_valid_room_faculties(client, admin_headers):
    client.post("/api/colleges/", json={"name": "Institute of Design", "code": "IOD"}, headers=admin_headers)
    response = client.post(
        "/api/rooms/",
        json={"number": "D1", "capacity": 20, "faculty": "Institute of Design"},
        headers=admin_headers,
    )
    assert response.status_code == 201
