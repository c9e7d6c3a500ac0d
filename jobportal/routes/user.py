import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import EmailStr, TypeAdapter, ValidationError

from jobportal.database import get_db
from jobportal.schemas.user import Role, UserResponse
from jobportal.utils.auth import get_current_user, require_roles
from jobportal.utils.documents import as_object_id, serialize
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

router = APIRouter(prefix="/users", tags=["Users"])

GENDERS = ("male", "female", "other")


# ===========================
# ADMIN ENDPOINTS
# ===========================

# ✅ 1. LIST ALL USERS (Admin)
@router.get("", response_model=List[UserResponse])
async def list_all_users(current_user: dict = Depends(require_roles(Role.ADMIN))):
    db = get_db()
    users = await db.users.find({}, {"password": 0}).sort("created_at", -1).to_list(None)
    return [serialize(user) for user in users]


# ✅ 2. DELETE ALL USERS (Admin)
@router.delete("")
async def delete_all_users(current_user: dict = Depends(require_roles(Role.ADMIN))):
    """Remove every non-admin account."""
    db = get_db()
    result = await db.users.delete_many({"role": {"$ne": Role.ADMIN.value}})
    logger.warning("Admin %s deleted %d users", current_user["_id"], result.deleted_count)
    return {"message": "All users deleted", "deleted_count": result.deleted_count}


# ===========================
# AUTHENTICATED USER ENDPOINTS
# ===========================

# ✅ 3. UPDATE MY PROFILE (multipart, resume optional)
@router.patch("", response_model=UserResponse)
async def update_user(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    upload_config: UploadConfig = Depends(get_upload_config),
    storage: ResumeStorage = Depends(get_resume_storage),
):
    db = get_db()

    errors = []
    update_data = {}
    if name is not None:
        if not 2 <= len(name.strip()) <= 100:
            errors.append("Name must be between 2 and 100 characters")
        update_data["name"] = name.strip()
    if email is not None:
        try:
            update_data["email"] = TypeAdapter(EmailStr).validate_python(email)
        except ValidationError:
            errors.append("Invalid email format")
    if location is not None:
        update_data["location"] = location.strip()
    if gender is not None:
        if gender not in GENDERS:
            errors.append("Gender must be male, female or other")
        update_data["gender"] = gender

    outcome = await inspect_resume(resume, upload_config)
    if isinstance(outcome, RejectedResume):
        errors.append(outcome.message)
    if errors:
        raise ValidationFailed(errors)

    if "email" in update_data and update_data["email"] != current_user["email"]:
        taken = await db.users.find_one({"email": update_data["email"]})
        if taken:
            raise ValidationFailed("Email already registered")

    if isinstance(outcome, AcceptedResume):
        update_data["resume"] = await storage.save(outcome, str(current_user["_id"]))

    if update_data:
        try:
            await db.users.update_one({"_id": current_user["_id"]}, {"$set": update_data})
        except Exception:
            if "resume" in update_data:
                await storage.delete(update_data["resume"])
            raise
        if "resume" in update_data and current_user.get("resume"):
            await storage.delete(current_user["resume"])

    updated = await db.users.find_one({"_id": current_user["_id"]})
    return serialize(updated)


# ✅ 4. VIEW SINGLE USER
@router.get("/{user_id}", response_model=UserResponse)
async def get_single_user(user_id: str, current_user: dict = Depends(get_current_user)):
    db = get_db()
    user = await db.users.find_one({"_id": as_object_id(user_id, "user ID")})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize(user)


# ✅ 5. DELETE SINGLE USER (Admin)
@router.delete("/{user_id}")
async def delete_user(user_id: str, current_user: dict = Depends(require_roles(Role.ADMIN))):
    db = get_db()
    result = await db.users.delete_one({"_id": as_object_id(user_id, "user ID")})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Admin %s deleted user %s", current_user["_id"], user_id)
    return {"message": "User deleted successfully", "user_id": user_id}
