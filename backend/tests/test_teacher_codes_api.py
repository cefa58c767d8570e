def _add_teacher(client, headers, name, email):
    response = client.post("/api/teachers/", json={"name": name, "email": email}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_teacher_code_listing_and_conflicts(client, admin_headers, incharge_headers):
    john = _add_teacher(client, admin_headers, "Dr. John Smith", "john@university.edu")
    jane = _add_teacher(client, admin_headers, "Jane Shah", "jane@university.edu")

    listed = {row["teacher_id"]: row for row in client.get("/api/teacher-codes/", headers=incharge_headers).json()}
    assert listed[john["id"]]["default_code"] == "JS"
    assert listed[john["id"]]["conflicts_with"] == [jane["id"]]

    fixed = client.put(f"/api/teacher-codes/{jane['id']}", json={"code": "jsh"}, headers=incharge_headers)
    assert fixed.status_code == 200, fixed.text
    assert fixed.json()["effective_code"] == "JSH"
    assert fixed.json()["conflicts_with"] == []

    clash = client.put(f"/api/teacher-codes/{john['id']}", json={"code": "JSH"}, headers=incharge_headers)
    assert clash.status_code == 409
    assert clash.json()["details"]["conflicts_with"] == [jane["id"]]


def test_bulk_code_save_rejects_duplicates(client, admin_headers, incharge_headers):
    john = _add_teacher(client, admin_headers, "John Smith", "john@university.edu")
    maria = _add_teacher(client, admin_headers, "Maria Garcia", "maria@university.edu")

    rejected = client.put(
        "/api/teacher-codes/",
        json={"codes": {john["id"]: "AA", maria["id"]: "aa"}},
        headers=incharge_headers,
    )
    assert rejected.status_code == 409

    saved = client.put(
        "/api/teacher-codes/",
        json={"codes": {john["id"]: "JSM", maria["id"]: "MGA"}},
        headers=admin_headers,
    )
    assert saved.status_code == 200
    codes = {row["teacher_id"]: row["teacher_code"] for row in saved.json()}
    assert codes == {john["id"]: "JSM", maria["id"]: "MGA"}


def test_hod_cannot_edit_teacher_codes(client, make_hod):
    _, hod_headers = make_hod()
    assert client.get("/api/teacher-codes/", headers=hod_headers).status_code == 403
