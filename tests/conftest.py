import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_ROOT = Path(tempfile.mkdtemp(prefix="intake-tests-"))
TEST_DB_PATH = TEST_ROOT / "test.db"
TEST_UPLOAD_DIR = TEST_ROOT / "uploads"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["UPLOAD_DIR"] = str(TEST_UPLOAD_DIR)
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin-secret-1"
os.environ["JWT_SECRET"] = "test-secret"

import intake.main as main  # noqa: E402  (import after env vars are set)
from intake.config import settings  # noqa: E402
from intake.database import Base, engine  # noqa: E402

ADMIN_USERNAME = os.environ["ADMIN_USERNAME"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture()
def client():
    """Provide a TestClient on an empty database and upload folder."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    for entry in TEST_UPLOAD_DIR.iterdir():
        entry.unlink()

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()


@pytest.fixture()
def upload_dir() -> Path:
    return settings.UPLOAD_DIR


@pytest.fixture()
def admin_headers(client):
    response = client.post("/login", json={"phone": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def register_user(client, phone="0912345678", password="password123", name="Aung Aung") -> int:
    response = client.post("/register", json={"name": name, "phone": phone, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


def form_fields(user_id, **overrides) -> dict:
    fields = {
        "userId": str(user_id),
        "fullName": "Aung Aung",
        "age": "27",
        "education": "B.Sc",
        "address": "No. 12, Yangon",
        "fatherName": "U Ba",
        "motherName": "Daw Hla",
    }
    fields.update(overrides)
    return fields


def submit_form(client, user_id, nrc=b"nrc-bytes", household=b"household-bytes", **overrides):
    return client.post(
        "/submit-form",
        data=form_fields(user_id, **overrides),
        files={
            "nrcFile": ("a.jpg", nrc, "image/jpeg"),
            "householdFile": ("b.jpg", household, "image/jpeg"),
        },
    )


def insert_during_lookup(monkeypatch, entity, make_row):
    """Commit ``make_row()`` from another session when the first lookup of
    ``entity`` runs, and report that lookup as empty.

    Simulates a concurrent request winning the race between a route's
    existence check and its insert.
    """
    from sqlalchemy.orm import Query

    from intake.database import SessionLocal

    original_first = Query.first
    state = {"fired": False}

    def _first(query):
        if not state["fired"] and query.column_descriptions[0]["entity"] is entity:
            state["fired"] = True
            other = SessionLocal()
            try:
                other.add(make_row())
                other.commit()
            finally:
                other.close()
            return None
        return original_first(query)

    monkeypatch.setattr(Query, "first", _first)


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(TEST_ROOT, ignore_errors=True)
