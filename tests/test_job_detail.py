"""Job detail page client, driven against the API through TestClient."""

from datetime import date

import pytest

from conftest import DOCX, PDF, PDF_BYTES, run
from jobportal.client.job_detail import (
    JobDetailView,
    PickerCancelled,
    ResumeFile,
    SessionUser,
    format_long_date,
)


@pytest.fixture
def recruiter(make_user):
    return make_user("recruiter")


@pytest.fixture
def job(make_job, recruiter):
    return make_job(recruiter)


def view_for(client, account=None, picker=None):
    if account is not None:
        client.headers.update(account["headers"])
        user = SessionUser(id=account["id"], role=account["role"], name=account["name"])
    else:
        user = None
    return JobDetailView(client, user=user, pick_resume=picker)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2030-03-01", "Mar 1st, 2030"),
        ("2026-10-02T09:30:00", "Oct 2nd, 2026"),
        (date(2026, 10, 3), "Oct 3rd, 2026"),
        ("2026-10-11", "Oct 11th, 2026"),
        ("2026-10-22", "Oct 22nd, 2026"),
        (None, ""),
    ],
)
def test_format_long_date(value, expected):
    assert format_long_date(value) == expected


def test_render_for_applicant_shows_apply(client, make_user, job):
    view = view_for(client, make_user("user"))

    page = view.render(job["id"])

    assert "Job title: Backend Engineer" in page
    assert "Deadline: Mar 1st, 2030" in page
    assert "  - python" in page
    assert "  - remote stipend" in page
    assert "Salary: 85000.0 TK" in page
    assert "[Apply Now]" in page
    assert "Email:" not in page


def test_render_for_recruiter_shows_contact(client, recruiter, job):
    page = view_for(client, recruiter).render(job["id"])

    assert "[Apply Now]" not in page
    assert "Email: jobs@acme.example" in page


def test_render_missing_job_shows_error(client):
    assert view_for(client).render("64b7f0c2a1b2c3d4e5f60718") == "Job not found"


def test_job_fetch_is_cached(client, db, job):
    view = view_for(client)
    view.load(job["id"])
    run(db.jobs.delete_many({}))

    assert view.load(job["id"])["id"] == job["id"]


def test_apply_requires_login(client, db, job):
    feedback = view_for(client).apply(job["id"])

    assert feedback.level == "warning"
    assert feedback.title == "Please Login"
    assert run(db.applications.count_documents({})) == 0


def test_apply_without_resume(client, db, make_user, job):
    applicant = make_user("user")

    feedback = view_for(client, applicant).apply(job["id"], today=date(2026, 10, 18))

    assert feedback.level == "success"
    assert feedback.text == "Applied successfully"
    stored = run(db.applications.find_one({}))
    assert stored["recruiter_id"] == job["created_by"]
    assert stored["resume"] is None


def test_apply_with_picked_resume(client, storage, make_user, job):
    picker = lambda: ResumeFile("cv.docx", DOCX, b"PK\x03\x04")

    feedback = view_for(client, make_user("user"), picker).apply(job["id"])

    assert feedback.level == "success"
    assert len(storage.files) == 1


def test_client_side_type_check_blocks_submission(client, db, make_user, job):
    picker = lambda: ResumeFile("cv.png", "image/png", b"\x89PNG")

    feedback = view_for(client, make_user("user"), picker).apply(job["id"])

    assert feedback.level == "error"
    assert feedback.text == "Only PDF and DOC files are allowed"
    assert run(db.applications.count_documents({})) == 0


def test_cancelled_picker_does_nothing(client, db, make_user, job):
    def picker():
        raise PickerCancelled()

    feedback = view_for(client, make_user("user"), picker).apply(job["id"])

    assert feedback.level == "cancelled"
    assert run(db.applications.count_documents({})) == 0


def test_server_validation_error_surfaces_first_message(client, make_user, job):
    view = view_for(client, make_user("user"), lambda: ResumeFile("cv.pdf", PDF, PDF_BYTES))
    view.apply(job["id"])

    feedback = view.apply(job["id"])

    assert feedback.level == "error"
    assert feedback.text == "Already Applied"


def test_recruiter_view_points_to_contact_without_submitting(client, db, recruiter, job):
    feedback = view_for(client, recruiter).apply(job["id"])

    assert feedback.level == "warning"
    assert feedback.text == "Email: jobs@acme.example"
    assert run(db.applications.count_documents({})) == 0


def test_non_structured_failure_uses_detail(client, make_user):
    feedback = view_for(client, make_user("user")).apply("64b7f0c2a1b2c3d4e5f60718")

    assert feedback.level == "error"
    assert feedback.text == "Job not found"
