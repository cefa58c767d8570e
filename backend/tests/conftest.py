import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("UPLOAD_RATE_LIMIT_DELAY_SECONDS", "0")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_session_factory
from app.db.base import Base
from app.main import app
from app.services.rate_limit import clear_rate_limiter
from app.services.upload_queue import reset_uploader

PASSWORD = "password123"


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    clear_rate_limiter()
    reset_uploader()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    reset_uploader()
    clear_rate_limiter()


def register_user(client, *, name, email, role, department_id=None):
    payload = {"name": name, "email": email, "password": PASSWORD, "role": role}
    if department_id:
        payload["department_id"] = department_id
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def login_headers(client, email, role):
    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD, "role": role})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client):
    register_user(client, name="Super Admin", email="admin@university.edu", role="super_admin")
    return login_headers(client, "admin@university.edu", "super_admin")


@pytest.fixture()
def incharge_headers(client):
    register_user(client, name="Timetable Incharge", email="tt@university.edu", role="tt_incharge")
    return login_headers(client, "tt@university.edu", "tt_incharge")


@pytest.fixture()
def make_department(client, admin_headers):
    def factory(name, **extra):
        response = client.post("/api/departments/", json={"name": name, **extra}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return factory


@pytest.fixture()
def make_hod(client, make_department):
    def factory(department_name="Computer Science", email="hod@university.edu"):
        department = make_department(department_name)
        register_user(client, name=f"HOD {department_name}", email=email, role="hod", department_id=department["id"])
        return department, login_headers(client, email, "hod")

    return factory
