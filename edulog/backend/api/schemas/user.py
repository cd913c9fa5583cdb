# edulog/backend/api/schemas/user.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from uuid import UUID

from ...models.enums import Role
from .common import EMAIL_PATTERN


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=72)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    role: Role
    student_id: Optional[int] = None


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    role: Role
    password: str = Field(..., min_length=1, max_length=72)
    student_id: Optional[int] = Field(None, description="Existing student row to link a student account to.")


class UserResponse(BaseModel):
    """Public view of an account; the password hash is never included."""
    user_id: int
    username: str
    email: str
    role: Role
    student_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdminProfileResponse(BaseModel):
    user_id: int
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None


class AdminProfileUpdateRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: Optional[str] = Field(None, min_length=8, max_length=72)


# Internal representation of JWT data
class TokenData(BaseModel):
    id: int
    role: Role
    student_id: Optional[int] = None
    sid: UUID
