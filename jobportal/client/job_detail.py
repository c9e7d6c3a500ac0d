"""Job detail page client.

Fetches a single job from the API, renders it as text and drives the apply
flow for signed-in applicants. ``http`` is any ``httpx.Client`` pointed at the
API (the session cookie from login travels with it).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, Optional

import httpx

from jobportal.utils.upload import ALLOWED_RESUME_TYPES, INVALID_TYPE_MESSAGE

LOGGER = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong, please try again later"


@dataclass(slots=True)
class SessionUser:
    """The signed-in identity as the page knows it."""

    id: str
    role: str
    name: str = ""


@dataclass(slots=True)
class ResumeFile:
    filename: str
    content_type: str
    data: bytes = field(repr=False)


@dataclass(slots=True)
class Feedback:
    """What the page shows after an apply attempt."""

    level: str  # success | warning | error | cancelled
    title: str
    text: str = ""


class PickerCancelled(Exception):
    """Raised by a resume picker when the user dismisses the dialog."""


ResumePicker = Callable[[], Optional[ResumeFile]]


ORDINAL_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}


def ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    return f"{day}{ORDINAL_SUFFIXES.get(day % 10, 'th')}"


def format_long_date(value) -> str:
    """``2026-10-03`` -> ``Oct 3rd, 2026``."""
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        value = value.date()
    return f"{value:%b} {ordinal(value.day)}, {value.year}"


def error_message(exc: httpx.HTTPError) -> str:
    """First structured validation message, else whatever the server said."""
    response = getattr(exc, "response", None)
    if response is None:
        return str(exc) or GENERIC_FAILURE
    try:
        body = response.json()
    except ValueError:
        return response.text or GENERIC_FAILURE
    if isinstance(body, dict):
        errors = body.get("error")
        if isinstance(errors, list) and errors:
            return errors[0].get("msg", GENERIC_FAILURE)
        if body.get("detail"):
            return str(body["detail"])
    return GENERIC_FAILURE


class JobDetailView:
    def __init__(
        self,
        http: httpx.Client,
        user: Optional[SessionUser] = None,
        pick_resume: Optional[ResumePicker] = None,
        api_prefix: str = "/api/v1",
    ) -> None:
        self.http = http
        self.user = user
        self.pick_resume = pick_resume
        self.api_prefix = api_prefix
        self._cache: Dict[str, dict] = {}

    def load(self, job_id: str) -> dict:
        if job_id not in self._cache:
            response = self.http.get(f"{self.api_prefix}/jobs/{job_id}")
            response.raise_for_status()
            self._cache[job_id] = response.json()
        return self._cache[job_id]

    @property
    def can_apply(self) -> bool:
        return self.user is not None and self.user.role == "user"

    def render(self, job_id: str) -> str:
        try:
            job = self.load(job_id)
        except httpx.HTTPError as exc:
            return error_message(exc)

        lines = [
            f"Job title: {job.get('position', '')}",
            f"Posted by: {job.get('company', '')}",
            format_long_date(job.get("created_at")),
            "",
            "Description",
            job.get("description", ""),
            "",
            f"Deadline: {format_long_date(job.get('deadline'))}",
            f"Job Vacancy: {job.get('vacancy', '')}",
            "",
            "Requirements",
            *[f"  - {skill}" for skill in job.get("skills", [])],
            "",
            "Facilities",
            *[f"  - {facility}" for facility in job.get("facilities", [])],
            "",
            f"Salary: {job.get('salary', '')} TK",
            "",
            "To apply",
        ]
        if self.can_apply:
            lines.append("[Apply Now]")
        else:
            lines.append("Send your cv/resume")
            lines.append(f"Email: {job.get('contact', '')}")
        return "\n".join(lines)

    def apply(self, job_id: str, today: Optional[date] = None) -> Feedback:
        if self.user is None:
            return Feedback("warning", "Please Login", "You need to login to apply for a job")

        try:
            job = self.load(job_id)
        except httpx.HTTPError as exc:
            return Feedback("error", "Oops...", error_message(exc))
        if not self.can_apply:
            return Feedback("warning", "Send your cv/resume", f"Email: {job.get('contact', '')}")

        resume = None
        if self.pick_resume is not None:
            try:
                resume = self.pick_resume()
            except PickerCancelled:
                return Feedback("cancelled", "Cancelled")
        if resume is not None and resume.content_type not in ALLOWED_RESUME_TYPES:
            return Feedback("error", "Oops...", INVALID_TYPE_MESSAGE)

        today = today or date.today()
        try:
            data = {
                "applicantId": self.user.id,
                "recruiterId": job.get("created_by", ""),
                "jobId": job_id,
                "status": "pending",
                "dateOfApplication": today.isoformat(),
            }
            files = None
            if resume is not None:
                files = {"resume": (resume.filename, resume.data, resume.content_type)}
            response = self.http.post(f"{self.api_prefix}/application/apply", data=data, files=files)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            LOGGER.info("Apply for job %s failed: %s", job_id, exc)
            return Feedback("error", "Oops...", error_message(exc))

        return Feedback("success", "Hurray...", response.json().get("message", ""))
