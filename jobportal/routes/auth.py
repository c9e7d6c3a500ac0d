import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pymongo.errors import DuplicateKeyError

from jobportal.database import get_db
from jobportal.schemas.user import Role, TokenResponse, UserCreate, UserLogin, UserResponse
from jobportal.utils.auth import (
    clear_session_cookie,
    create_access_token,
    get_current_user,
    set_session_cookie,
)
from jobportal.utils.documents import serialize
from jobportal.utils.errors import ValidationFailed
from jobportal.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ 1. REGISTER
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate):
    """Register a new user or recruiter. The first account on an empty database becomes admin."""
    db = get_db()

    existing_user = await db.users.find_one({"email": user.email})
    if existing_user:
        raise ValidationFailed("Email already registered")

    user_dict = user.model_dump()
    user_dict["password"] = get_password_hash(user.password)
    user_dict["resume"] = None
    user_dict["created_at"] = datetime.utcnow()
    if await db.users.count_documents({}) == 0:
        user_dict["role"] = Role.ADMIN.value

    try:
        result = await db.users.insert_one(user_dict)
    except DuplicateKeyError:
        raise ValidationFailed("Email already registered")

    user_dict["_id"] = result.inserted_id
    logger.info("Registered %s account %s", user_dict["role"], result.inserted_id)
    return serialize(user_dict)


# ✅ 2. LOGIN
@router.post("/login", response_model=TokenResponse)
async def login(user_credentials: UserLogin, response: Response):
    """Login, set the session cookie and return the token."""
    db = get_db()

    user = await db.users.find_one({"email": user_credentials.email})
    if not user or not verify_password(user_credentials.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})
    set_session_cookie(response, access_token)
    logger.info("User %s logged in", user["_id"])

    return {"access_token": access_token, "token_type": "bearer", "user": serialize(user)}


# ✅ 3. LOGOUT
@router.post("/logout")
async def logout(response: Response):
    clear_session_cookie(response)
    return {"message": "Logout done"}


# ✅ 4. CURRENT USER
@router.get("/me", response_model=UserResponse)
async def me(current_user: dict = Depends(get_current_user)):
    return serialize(current_user)
