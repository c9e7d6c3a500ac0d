"""Shared fixtures: mocked Mongo, in-memory resume storage, seeded accounts."""

import asyncio
import os
from datetime import datetime

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from jobportal import database
from jobportal.main import app
from jobportal.utils.auth import create_access_token
from jobportal.utils.storage import ResumeStorage, StoredResume, get_resume_storage
from jobportal.utils.upload import generate_resume_filename

PDF_BYTES = b"%PDF-1.4\n1 0 obj<</Type/Catalog>>endobj\ntrailer<</Root 1 0 R>>\n%%EOF"
PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class InMemoryResumeStorage(ResumeStorage):
    def __init__(self):
        super().__init__(bucket=None)
        self.files = {}

    async def save(self, resume, owner_id):
        filename = generate_resume_filename(resume.filename)
        self.files[filename] = StoredResume(filename, resume.content_type, resume.data)
        return filename

    async def open(self, filename):
        return self.files.get(filename)

    async def delete(self, filename):
        self.files.pop(filename, None)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def db(monkeypatch):
    mock_db = AsyncMongoMockClient()["jobportal_test"]
    run(database.ensure_indexes(mock_db))
    monkeypatch.setattr(database, "db", mock_db)
    return mock_db


@pytest.fixture
def storage():
    store = InMemoryResumeStorage()
    app.dependency_overrides[get_resume_storage] = lambda: store
    yield store
    app.dependency_overrides.pop(get_resume_storage, None)


@pytest.fixture
def client(db, storage):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(role="user", name=None, email=None):
        name = name or f"{role}-{ObjectId()}"
        doc = {
            "name": name,
            "email": email or f"{name}@example.com",
            "password": "not-a-real-hash",
            "role": role,
            "location": "Dhaka",
            "gender": None,
            "resume": None,
            "created_at": datetime.utcnow(),
        }
        result = run(db.users.insert_one(doc))
        doc["_id"] = result.inserted_id
        doc["id"] = str(result.inserted_id)
        doc["headers"] = {"Authorization": f"Bearer {create_access_token({'sub': doc['id']})}"}
        return doc

    return _make_user


@pytest.fixture
def job_payload():
    return {
        "company": "Acme Industries",
        "position": "Backend Engineer",
        "location": "Remote",
        "job_type": "full-time",
        "status": "pending",
        "description": "Build and run the hiring platform APIs.",
        "skills": ["python", "mongodb"],
        "facilities": ["lunch", "remote stipend"],
        "salary": 85000,
        "vacancy": 2,
        "deadline": "2030-03-01",
        "contact": "jobs@acme.example",
    }


@pytest.fixture
def make_job(client, job_payload):
    def _make_job(recruiter, **overrides):
        response = client.post("/api/v1/jobs", json={**job_payload, **overrides}, headers=recruiter["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _make_job


@pytest.fixture
def apply_form():
    def _apply_form(applicant, job):
        return {
            "applicantId": applicant["id"],
            "recruiterId": job["created_by"],
            "jobId": job["id"],
            "status": "pending",
            "dateOfApplication": "2026-10-18",
        }

    return _apply_form
