def test_semester_lifecycle(client, admin_headers, incharge_headers):
    first = client.post("/api/semesters/", json={"name": "Semester 1"}, headers=admin_headers)
    assert first.status_code == 201, first.text
    second = client.post("/api/semesters/", json={"name": "semester 2"}, headers=admin_headers).json()
    assert second["name"] == "Semester 2"

    invalid = client.post("/api/semesters/", json={"name": "Semester 12"}, headers=admin_headers)
    assert invalid.status_code == 400
    assert "Semester X" in invalid.json()["message"]
    duplicate = client.post("/api/semesters/", json={"name": "Semester 1"}, headers=admin_headers)
    assert duplicate.status_code == 409
    assert client.post("/api/semesters/", json={"name": "Semester 3"}, headers=incharge_headers).status_code == 403

    activated = client.post(f"/api/semesters/{first.json()['id']}/activate", headers=admin_headers)
    assert activated.json()["status"] == "active"
    active = client.get("/api/semesters/active", headers=incharge_headers).json()
    assert active["id"] == first.json()["id"]

    blocked = client.delete(f"/api/semesters/{first.json()['id']}", headers=admin_headers)
    assert blocked.status_code == 409

    renamed = client.put(f"/api/semesters/{second['id']}", json={"name": "Semester 4"}, headers=admin_headers)
    assert renamed.json()["name"] == "Semester 4"
    assert client.delete(f"/api/semesters/{second['id']}", headers=admin_headers).status_code == 200
    assert len(client.get("/api/semesters/", headers=incharge_headers).json()) == 1


def test_active_semester_falls_back_to_most_recent(client, admin_headers):
    assert client.get("/api/semesters/active", headers=admin_headers).status_code == 404
    client.post("/api/semesters/", json={"name": "Semester 1"}, headers=admin_headers)
    latest = client.post("/api/semesters/", json={"name": "Semester 5"}, headers=admin_headers).json()
    assert client.get("/api/semesters/active", headers=admin_headers).json()["id"] == latest["id"]


def test_period_options_and_auto_activation(client, admin_headers):
    for number in range(1, 9):
        client.post("/api/semesters/", json={"name": f"Semester {number}"}, headers=admin_headers)

    period = client.get("/api/semesters/academic-period", headers=admin_headers).json()
    assert period["period"] in {"odd", "even"}
    assert len(client.get("/api/semesters/options", headers=admin_headers).json()) == 8

    response = client.post("/api/semesters/auto-activate", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["active_semester_ids"]) == 4
    active_names = sorted(item["name"] for item in body["semesters"])
    assert active_names == sorted(period["default_semesters"])
