from conftest import PASSWORD, login_headers, register_user


def test_register_login_me_logout(client):
    user = register_user(client, name="Super Admin", email="Admin@University.edu", role="super_admin")
    assert user["email"] == "admin@university.edu"
    assert user["role"] == "super_admin"

    headers = login_headers(client, "admin@university.edu", "super_admin")
    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["name"] == "Super Admin"

    logout = client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["success"] is True


def test_duplicate_registration_is_rejected(client):
    register_user(client, name="Incharge", email="tt@university.edu", role="tt_incharge")
    response = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "tt@university.edu", "password": PASSWORD, "role": "tt_incharge"},
    )
    assert response.status_code == 409


def test_hod_registration_requires_existing_department(client):
    missing = client.post(
        "/api/auth/register",
        json={"name": "HOD", "email": "hod@university.edu", "password": PASSWORD, "role": "hod"},
    )
    assert missing.status_code == 422

    unknown = client.post(
        "/api/auth/register",
        json={
            "name": "HOD",
            "email": "hod@university.edu",
            "password": PASSWORD,
            "role": "hod",
            "department_id": "no-such-department",
        },
    )
    assert unknown.status_code == 400


def test_login_rejects_wrong_password_and_role(client):
    register_user(client, name="Incharge", email="tt@university.edu", role="tt_incharge")
    wrong_password = client.post("/api/auth/login", json={"email": "tt@university.edu", "password": "wrongpass1"})
    assert wrong_password.status_code == 401

    wrong_role = client.post(
        "/api/auth/login",
        json={"email": "tt@university.edu", "password": PASSWORD, "role": "super_admin"},
    )
    assert wrong_role.status_code == 403


def test_protected_routes_require_token(client):
    assert client.get("/api/teachers/").status_code in {401, 403}
    bad = client.get("/api/teachers/", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_login_is_rate_limited(client):
    register_user(client, name="Incharge", email="tt@university.edu", role="tt_incharge")
    statuses = [
        client.post("/api/auth/login", json={"email": "tt@university.edu", "password": "wrongpass1"}).status_code
        for _ in range(13)
    ]
    assert statuses[:12] == [401] * 12
    assert statuses[12] == 429
