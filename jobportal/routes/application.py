import io
import logging
import math
from datetime import date, datetime
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from pymongo.errors import DuplicateKeyError

from jobportal.database import get_db
from jobportal.schemas.application import (
    ApplicantApplicationResponse,
    ApplicationResponse,
    ApplicationStatus,
    ApplicationStatusUpdate,
    ApplyResponse,
    RecruiterApplicationsResponse,
)
from jobportal.schemas.user import Role
from jobportal.utils.auth import require_roles
from jobportal.utils.documents import as_datetime, as_object_id, serialize
from jobportal.utils.errors import ValidationFailed
from jobportal.utils.storage import ResumeStorage, get_resume_storage
from jobportal.utils.upload import (
    AcceptedResume,
    RejectedResume,
    UploadConfig,
    get_upload_config,
    inspect_resume,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/application", tags=["Applications"])


# ===========================
# APPLICANT ENDPOINTS
# ===========================

# ✅ 1. APPLY FOR JOB (user)
@router.post("/apply", response_model=ApplyResponse, status_code=201)
async def apply_in_job(
    applicant_id: str = Form(..., alias="applicantId"),
    recruiter_id: str = Form(..., alias="recruiterId"),
    job_id: str = Form(..., alias="jobId"),
    status: Optional[str] = Form(None),
    date_of_application: Optional[date] = Form(None, alias="dateOfApplication"),
    resume: Optional[UploadFile] = File(None),
    current_user: dict = Depends(require_roles(Role.USER)),
    upload_config: UploadConfig = Depends(get_upload_config),
    storage: ResumeStorage = Depends(get_resume_storage),
):
    """Submit an application. The resume part is optional, a wrong file type is not."""
    # status and dateOfApplication are client hints; the server always seeds pending/today
    db = get_db()

    if applicant_id != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="You can only apply on your own behalf")

    errors = []
    if status is not None and status != ApplicationStatus.PENDING.value:
        errors.append("New applications must start as pending")
    outcome = await inspect_resume(resume, upload_config)
    if isinstance(outcome, RejectedResume):
        errors.append(outcome.message)
    if errors:
        raise ValidationFailed(errors)

    job = await db.jobs.find_one({"_id": as_object_id(job_id, "job ID")})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.get("created_by") != recruiter_id:
        raise ValidationFailed("Recruiter does not match the job owner")
    job_id = str(job["_id"])

    existing = await db.applications.find_one({"applicant_id": applicant_id, "job_id": job_id})
    if existing:
        raise ValidationFailed("Already Applied")

    resume_ref = None
    if isinstance(outcome, AcceptedResume):
        resume_ref = await storage.save(outcome, applicant_id)

    now = datetime.utcnow()
    application_data = {
        "applicant_id": applicant_id,
        "recruiter_id": recruiter_id,
        "job_id": job_id,
        "status": ApplicationStatus.PENDING.value,
        "date_of_application": as_datetime(now.date()),
        "resume": resume_ref,
        "created_at": now,
        "updated_at": now,
    }

    try:
        result = await db.applications.insert_one(application_data)
    except DuplicateKeyError:
        if resume_ref:
            await storage.delete(resume_ref)
        raise ValidationFailed("Already Applied")
    except Exception:
        if resume_ref:
            await storage.delete(resume_ref)
        raise

    application_data["_id"] = result.inserted_id
    logger.info(
        "Application %s created for job %s (resume attached: %s)",
        result.inserted_id, job_id, resume_ref is not None,
    )
    return {"message": "Applied successfully", "application": serialize(application_data)}


# ✅ 2. MY APPLICATIONS (user)
@router.get("/applicant-jobs", response_model=List[ApplicantApplicationResponse])
async def get_candidate_applied_jobs(current_user: dict = Depends(require_roles(Role.USER))):
    db = get_db()

    applications = (
        await db.applications.find({"applicant_id": str(current_user["_id"])})
        .sort("created_at", -1)
        .to_list(None)
    )

    result = []
    for app in applications:
        item = serialize(app)
        if ObjectId.is_valid(app["job_id"]):
            job = await db.jobs.find_one({"_id": as_object_id(app["job_id"])})
            if job:  # Job might be deleted
                item.update(position=job.get("position"), company=job.get("company"), location=job.get("location"))
        result.append(item)

    return result


# ===========================
# RECRUITER ENDPOINTS
# ===========================

# ✅ 3. APPLICATIONS FOR MY JOBS (recruiter)
@router.get("/recruiter-jobs", response_model=RecruiterApplicationsResponse)
async def get_recruiter_post_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(require_roles(Role.RECRUITER)),
):
    db = get_db()

    query = {"recruiter_id": str(current_user["_id"])}
    total = await db.applications.count_documents(query)
    applications = (
        await db.applications.find(query)
        .sort("created_at", -1)
        .skip((page - 1) * limit)
        .limit(limit)
        .to_list(limit)
    )

    return {
        "result": [serialize(app) for app in applications],
        "total": total,
        "current_page": page,
        "page_count": math.ceil(total / limit),
    }


# ✅ 4. UPDATE APPLICATION STATUS (recruiter owner)
@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_job_status(
    application_id: str,
    status_update: ApplicationStatusUpdate,
    current_user: dict = Depends(require_roles(Role.RECRUITER)),
):
    db = get_db()

    application = await db.applications.find_one({"_id": as_object_id(application_id, "application ID")})
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    if application["recruiter_id"] != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="You are not authorized to update this application")

    await db.applications.update_one(
        {"_id": application["_id"]},
        {"$set": {"status": status_update.status.value, "updated_at": datetime.utcnow()}},
    )
    logger.info("Application %s moved to %s", application_id, status_update.status.value)

    updated = await db.applications.find_one({"_id": application["_id"]})
    return serialize(updated)


# ===========================
# SHARED ENDPOINTS
# ===========================

# ✅ 5. DOWNLOAD RESUME (applicant or recruiter on the application)
@router.get("/{application_id}/resume")
async def get_resume_file(
    application_id: str,
    current_user: dict = Depends(require_roles(Role.USER, Role.RECRUITER)),
    storage: ResumeStorage = Depends(get_resume_storage),
):
    db = get_db()

    application = await db.applications.find_one({"_id": as_object_id(application_id, "application ID")})
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    caller_id = str(current_user["_id"])
    if caller_id not in (application["applicant_id"], application["recruiter_id"]):
        raise HTTPException(status_code=403, detail="Access denied")

    if not application.get("resume"):
        raise HTTPException(status_code=404, detail="No resume attached to this application")

    stored = await storage.open(application["resume"])
    if stored is None:
        raise HTTPException(status_code=404, detail="Resume file not found")

    return StreamingResponse(
        io.BytesIO(stored.data),
        media_type=stored.content_type,
        headers={"Content-Disposition": f'attachment; filename="{stored.filename}"'},
    )
