import logging
import math
import re
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from jobportal.database import get_db
from jobportal.schemas.job import JobCreate, JobListResponse, JobResponse, JobUpdate
from jobportal.schemas.user import Role
from jobportal.utils.auth import require_roles
from jobportal.utils.documents import as_datetime, as_object_id, serialize
from jobportal.utils.errors import ValidationFailed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

SORT_OPTIONS = {
    "newest": ("created_at", -1),
    "oldest": ("created_at", 1),
    "a-z": ("position", 1),
    "z-a": ("position", -1),
}


# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. GET ALL JOBS WITH SEARCH (Public)
@router.get("", response_model=JobListResponse)
async def get_all_jobs(
    search: Optional[str] = Query(None, description="Search in position or company"),
    sort: Literal["newest", "oldest", "a-z", "z-a"] = Query("newest"),
    page: int = Query(1, ge=1),
    limit: int = Query(5, ge=1, le=100),
):
    db = get_db()

    query = {}
    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {"position": {"$regex": pattern, "$options": "i"}},
            {"company": {"$regex": pattern, "$options": "i"}},
        ]

    total = await db.jobs.count_documents(query)
    field, direction = SORT_OPTIONS[sort]
    jobs = (
        await db.jobs.find(query)
        .sort(field, direction)
        .skip((page - 1) * limit)
        .limit(limit)
        .to_list(limit)
    )

    return {
        "result": [serialize(job) for job in jobs],
        "total_jobs": total,
        "current_page": page,
        "page_count": math.ceil(total / limit),
    }


# ===========================
# RECRUITER ENDPOINTS
# ===========================

# ✅ 2. MY POSTED JOBS (Recruiter)
@router.get("/my-jobs", response_model=List[JobResponse])
async def get_my_jobs(current_user: dict = Depends(require_roles(Role.RECRUITER))):
    db = get_db()
    jobs = await db.jobs.find({"created_by": str(current_user["_id"])}).sort("created_at", -1).to_list(None)
    return [serialize(job) for job in jobs]


# ✅ 3. GET SINGLE JOB (Public)
@router.get("/{job_id}", response_model=JobResponse)
async def get_single_job(job_id: str):
    db = get_db()
    job = await db.jobs.find_one({"_id": as_object_id(job_id, "job ID")})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return serialize(job)


# ✅ 4. POST A JOB (Recruiter)
@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(job: JobCreate, current_user: dict = Depends(require_roles(Role.RECRUITER))):
    db = get_db()

    now = datetime.utcnow()
    new_job = job.model_dump()
    new_job["deadline"] = as_datetime(job.deadline)
    new_job["created_by"] = str(current_user["_id"])
    new_job["created_at"] = now
    new_job["updated_at"] = now

    result = await db.jobs.insert_one(new_job)
    new_job["_id"] = result.inserted_id
    logger.info("Recruiter %s posted job %s", current_user["_id"], result.inserted_id)
    return serialize(new_job)


async def _get_owned_job(db, job_id: str, current_user: dict, allow_admin: bool = False):
    job = await db.jobs.find_one({"_id": as_object_id(job_id, "job ID")})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if allow_admin and current_user["role"] == Role.ADMIN.value:
        return job
    if job.get("created_by") != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="You can only modify your own job postings")
    return job


# ✅ 5. UPDATE JOB (Recruiter owner)
@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    job_update: JobUpdate,
    current_user: dict = Depends(require_roles(Role.RECRUITER)),
):
    db = get_db()
    job = await _get_owned_job(db, job_id, current_user)

    update_data = job_update.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationFailed("No fields to update")
    if "deadline" in update_data:
        update_data["deadline"] = as_datetime(update_data["deadline"])
    update_data["updated_at"] = datetime.utcnow()

    await db.jobs.update_one({"_id": job["_id"]}, {"$set": update_data})

    updated_job = await db.jobs.find_one({"_id": job["_id"]})
    return serialize(updated_job)


# ✅ 6. DELETE JOB (Recruiter owner / Admin)
@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    current_user: dict = Depends(require_roles(Role.RECRUITER, Role.ADMIN)),
):
    db = get_db()
    job = await _get_owned_job(db, job_id, current_user, allow_admin=True)

    removed = await db.applications.delete_many({"job_id": str(job["_id"])})
    await db.jobs.delete_one({"_id": job["_id"]})
    logger.info("Job %s deleted by %s with %d applications", job_id, current_user["_id"], removed.deleted_count)

    return {
        "message": "Job deleted successfully",
        "job_id": job_id,
        "applications_removed": removed.deleted_count,
    }
