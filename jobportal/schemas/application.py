from enum import Enum
from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# 1. Input: Update Status
class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


# 2. Output: Basic Response
class ApplicationResponse(BaseModel):
    id: str
    applicant_id: str
    recruiter_id: str
    job_id: str
    status: ApplicationStatus
    date_of_application: date
    resume: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplyResponse(BaseModel):
    message: str
    application: ApplicationResponse


# 3. Output: Applicant view with job info
class ApplicantApplicationResponse(ApplicationResponse):
    position: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None


# 4. Output: Recruiter view, paginated
class RecruiterApplicationsResponse(BaseModel):
    result: List[ApplicationResponse]
    total: int
    current_page: int
    page_count: int
