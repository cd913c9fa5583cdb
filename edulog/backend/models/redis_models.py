from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from uuid import UUID

from .enums import Role


class SessionUser(BaseModel):
    """
    The authenticated identity carried by a token and cached with the login session.
    """
    id: int = Field(..., description="users.user_id of the account")
    username: str
    role: Role
    student_id: Optional[int] = None


class UserSessionRedis(BaseModel):
    """
    Represents a user's login session stored in Redis.
    """
    user_data: SessionUser = Field(..., description="Identity the session belongs to.")
    session_id: UUID = Field(..., description="Unique ID for this specific login, also carried as the token's 'sid' claim.")
    session_start_time: datetime = Field(..., description="The time this session began.")
    session_end_time: datetime = Field(..., description="The time this session will expire.")
