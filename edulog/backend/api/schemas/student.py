# edulog/backend/api/schemas/student.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime, time
from typing import List, Optional

from ...models.enums import AttendanceStatus, SessionStatus
from .common import EMAIL_PATTERN


class StudentRequest(BaseModel):
    """Body for creating or replacing a student record."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    department: str = Field(..., min_length=1, max_length=255)
    course_id: Optional[int] = None
    year_of_study: int = Field(..., ge=1, le=8)
    phone: Optional[str] = Field(None, max_length=32)


class StudentResponse(BaseModel):
    student_id: int
    name: str
    email: str
    department: str
    course_id: Optional[int] = None
    course_name: Optional[str] = None
    year_of_study: int
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StudentProfileUpdateRequest(BaseModel):
    """
    Self-service profile update. Any other field in the body (id, role,
    student_id) is ignored.
    """
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=32)
    password: Optional[str] = Field(None, min_length=8, max_length=72)


class StudentStats(BaseModel):
    total_sessions: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    attendance_percentage: float = 0.0
    current_streak: int = 0
    attendance_trend: float = 0.0


class UpcomingSession(BaseModel):
    session_id: str
    session_date: date
    start_time: time
    end_time: time
    location: str
    status: SessionStatus
    course_id: int
    course_code: str
    course_name: str
    teacher_name: str
    attendance_status: str = Field(..., description="Present/Absent/Late, or 'Not Recorded'.")


class StudentDashboardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student: StudentResponse
    stats: StudentStats
    upcoming_sessions: List[UpcomingSession] = Field(default_factory=list, alias="upcomingSessions")


class AttendanceHistoryItem(BaseModel):
    attendance_id: int
    session_id: Optional[str] = None
    date: date
    status: AttendanceStatus
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    teacher_name: Optional[str] = None


class AttendanceHistoryPage(BaseModel):
    items: List[AttendanceHistoryItem]
    page: int
    limit: int
    total: int
