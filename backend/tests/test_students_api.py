"""Tests for student lookup and registration endpoints."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.student import Student
from app.services.student_store import DuplicateStudentError, StoreError, get_store


def test_get_unknown_student_returns_404(client):
    response = client.get("/student/Nobody")
    assert response.status_code == 404
    assert response.json() == {"error": "Student not found"}


def test_register_new_student(client):
    response = client.post("/student", json={"name": "Alice"})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Student added"
    student = data["student"]
    assert isinstance(student["id"], int)
    assert student["name"] == "Alice"
    assert [student[k] for k in ("aptitude", "coding", "resume", "interview")] == [0, 0, 0, 0]


def test_register_existing_student_returns_same_record(client):
    created = client.post("/student", json={"name": "Alice"}).json()["student"]
    client.post("/readiness", json={
        "name": "Alice", "aptitude": 80, "coding": 90, "resume": 70, "interview": 60
    })

    response = client.post("/student", json={"name": "Alice"})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Student exists"
    assert data["student"]["id"] == created["id"]
    assert data["student"]["coding"] == 90


def test_register_does_not_duplicate_rows(client):
    first = client.post("/student", json={"name": "Alice"}).json()["student"]
    second = client.post("/student", json={"name": "Alice"}).json()["student"]
    other = client.post("/student", json={"name": "Bob"}).json()["student"]
    assert first == second
    assert other["id"] != first["id"]


def test_get_student_returns_stored_row_idempotently(client):
    created = client.post("/student", json={"name": "Alice"}).json()["student"]

    first = client.get("/student/Alice")
    second = client.get("/student/Alice")
    assert first.status_code == 200
    assert first.json() == created
    assert second.json() == first.json()


def test_lookup_is_case_sensitive(client):
    client.post("/student", json={"name": "Alice"})
    assert client.get("/student/alice").status_code == 404


def test_name_with_spaces_in_path(client):
    client.post("/student", json={"name": "Mary Jane"})
    response = client.get("/student/Mary%20Jane")
    assert response.status_code == 200
    assert response.json()["name"] == "Mary Jane"


@pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": None}])
def test_register_requires_name(client, body):
    response = client.post("/student", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Student name is required"}


def test_register_rejects_non_json_body(client):
    response = client.post("/student", content="not json",
                           headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_get_student_store_failure(failing_store):
    client, _ = failing_store
    response = client.get("/student/Alice")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch student data"}


def test_register_store_failure(failing_store):
    client, store = failing_store
    response = client.post("/student", json={"name": "Alice"})
    assert response.status_code == 500
    assert response.json() == {"error": "Database error"}
    assert store.calls == [("find_by_name", "Alice")]


class RaceLosingStore:
    """Store double where another request inserts the name between lookup and insert."""

    def __init__(self):
        self.lookups = 0

    async def find_by_name(self, name):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return Student(id=7, name=name, aptitude=0, coding=0, resume=0, interview=0)

    async def insert_new(self, name):
        raise DuplicateStudentError("Student already exists")


class InsertFailingStore:
    """Store double whose lookups succeed but whose inserts fail."""

    async def find_by_name(self, name):
        return None

    async def insert_new(self, name):
        raise StoreError("database is locked")


@pytest.fixture
def override_store():
    def _override(store):
        app.dependency_overrides[get_store] = lambda: store
        return TestClient(app)
    try:
        yield _override
    finally:
        app.dependency_overrides.pop(get_store, None)


def test_register_race_returns_existing_record(override_store):
    store = RaceLosingStore()
    client = override_store(store)

    response = client.post("/student", json={"name": "Alice"})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Student exists",
        "student": {"id": 7, "name": "Alice", "aptitude": 0, "coding": 0,
                    "resume": 0, "interview": 0},
    }
    assert store.lookups == 2


def test_register_insert_failure(override_store):
    client = override_store(InsertFailingStore())

    response = client.post("/student", json={"name": "Alice"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to add student"}
