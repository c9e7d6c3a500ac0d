from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import date, datetime

JobType = Literal["full-time", "part-time", "internship"]
JobStatus = Literal["pending", "interview", "declined"]


# 1. Input: What the Recruiter sends
class JobCreate(BaseModel):
    company: str = Field(..., min_length=5, max_length=100)
    position: str = Field(..., min_length=3, max_length=100)
    location: str = Field(..., min_length=1)
    job_type: JobType = "full-time"
    status: JobStatus = "pending"
    description: str = Field(..., min_length=1)
    skills: List[str] = Field(..., min_length=1)
    facilities: List[str] = Field(..., min_length=1)
    salary: float = Field(..., ge=0)
    vacancy: int = Field(..., ge=1)
    deadline: date
    contact: str = Field(..., min_length=1)


# 2. Input: Update existing job
class JobUpdate(BaseModel):
    """Schema for updating job details"""
    company: Optional[str] = Field(None, min_length=5, max_length=100)
    position: Optional[str] = Field(None, min_length=3, max_length=100)
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    description: Optional[str] = None
    skills: Optional[List[str]] = Field(None, min_length=1)
    facilities: Optional[List[str]] = Field(None, min_length=1)
    salary: Optional[float] = Field(None, ge=0)
    vacancy: Optional[int] = Field(None, ge=1)
    deadline: Optional[date] = None
    contact: Optional[str] = None


# 3. Output
class JobResponse(JobCreate):
    id: str
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobListResponse(BaseModel):
    result: List[JobResponse]
    total_jobs: int
    current_page: int
    page_count: int
