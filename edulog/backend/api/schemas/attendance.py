# edulog/backend/api/schemas/attendance.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional

from ...models.enums import AttendanceStatus


class AttendanceRequest(BaseModel):
    """Admin-side create/replace of an attendance row."""
    student_id: int
    session_id: Optional[str] = Field(None, description="Leave empty for a day-level row.")
    date: date
    status: AttendanceStatus
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None


class AttendanceResponse(BaseModel):
    attendance_id: int
    student_id: int
    session_id: Optional[str] = None
    date: date
    status: AttendanceStatus
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttendanceStats(BaseModel):
    present: int = 0
    absent: int = 0
    late: int = 0


class DepartmentCount(BaseModel):
    department: str
    student_count: int


class StudentPercentage(BaseModel):
    student_id: int
    name: str
    total_classes: int
    classes_attended: int
    attendance_percentage: float
