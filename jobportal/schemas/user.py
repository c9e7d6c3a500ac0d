from enum import Enum
from typing import Optional, Literal
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class Role(str, Enum):
    USER = "user"
    RECRUITER = "recruiter"
    ADMIN = "admin"


# 1. For Registration (Input)
class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    # admin accounts cannot be self-registered
    role: Literal["user", "recruiter"] = "user"
    location: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None


# 2. For Login (Input)
class UserLogin(BaseModel):
    email: EmailStr
    password: str


# 3. For Responses (Output)
class UserResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: Role
    location: Optional[str] = None
    gender: Optional[str] = None
    resume: Optional[str] = None
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
