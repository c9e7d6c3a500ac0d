from datetime import datetime

from fastapi import APIRouter, Depends, Query

from jobportal.database import get_db
from jobportal.schemas.application import ApplicationStatus
from jobportal.schemas.user import Role
from jobportal.utils.auth import require_roles

router = APIRouter(prefix="/admin", tags=["Admin"])


def month_bounds(today: datetime, months: int):
    """Start of each of the last ``months`` months, oldest first, then the start of next month."""
    year, month = divmod(today.year * 12 + today.month - months, 12)
    bounds = []
    for _ in range(months + 1):
        bounds.append(datetime(year, month + 1, 1))
        year, month = (year + 1, 0) if month == 11 else (year, month + 1)
    return bounds


# ✅ PLATFORM COUNTS (Admin)
@router.get("/info")
async def get_platform_info(current_user: dict = Depends(require_roles(Role.ADMIN))):
    """Headline numbers for the admin dashboard."""
    db = get_db()

    applications_by_status = {
        status.value: await db.applications.count_documents({"status": status.value})
        for status in ApplicationStatus
    }

    return {
        "users": await db.users.count_documents({}),
        "applicants": await db.users.count_documents({"role": Role.USER.value}),
        "recruiters": await db.users.count_documents({"role": Role.RECRUITER.value}),
        "jobs": await db.jobs.count_documents({}),
        "applications": await db.applications.count_documents({}),
        "applications_by_status": applications_by_status,
    }


# ✅ MONTHLY ACTIVITY (Admin)
@router.get("/monthly-stats")
async def get_monthly_stats(
    months: int = Query(6, ge=1, le=24),
    current_user: dict = Depends(require_roles(Role.ADMIN)),
):
    """Jobs posted and applications received per calendar month, oldest month first."""
    db = get_db()

    bounds = month_bounds(datetime.utcnow(), months)
    stats = []
    for start, end in zip(bounds, bounds[1:]):
        window = {"created_at": {"$gte": start, "$lt": end}}
        stats.append({
            "month": f"{start:%Y-%m}",
            "job_count": await db.jobs.count_documents(window),
            "application_count": await db.applications.count_documents(window),
        })

    return stats
