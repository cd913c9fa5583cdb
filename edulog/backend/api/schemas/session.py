# edulog/backend/api/schemas/session.py
from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, time
from typing import Optional

from ...models.enums import SessionStatus
from .common import EMAIL_PATTERN


class SessionCreateRequest(BaseModel):
    """The course is looked up by code and the teacher by email."""
    course_code: str = Field(..., min_length=1)
    teacher_email: str = Field(..., pattern=EMAIL_PATTERN)
    session_date: date
    start_time: time
    end_time: time
    location: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class SessionUpdateRequest(SessionCreateRequest):
    location: str = Field("TBD", max_length=255)
    status: SessionStatus = SessionStatus.SCHEDULED


class SessionResponse(BaseModel):
    session_id: str
    course_id: int
    course_code: Optional[str] = None
    course_name: Optional[str] = None
    teacher_id: int
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None
    session_date: date
    start_time: time
    end_time: time
    location: str
    status: SessionStatus

    model_config = ConfigDict(from_attributes=True)
