# edulog/backend/models/db_models.py

from pydantic import BaseModel, Field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from .enums import Role, SessionStatus, AttendanceStatus, EnrollmentStatus


class User(BaseModel):
    """
    Represents a login account, mapping to the 'users' table.
    """
    user_id: int = Field(..., description="Primary key of the account")
    username: str
    email: str
    password: str = Field(..., description="bcrypt hash, never the plain password")
    role: Role
    student_id: Optional[int] = Field(None, description="Linked student row for student accounts")
    created_at: Optional[datetime] = None


class Student(BaseModel):
    """
    Represents a student, mapping to the 'students' table.
    """
    student_id: int
    name: str
    email: str
    department: str
    course_id: Optional[int] = Field(None, description="FK to the student's programme course")
    year_of_study: int
    phone: Optional[str] = None
    course_name: Optional[str] = Field(None, description="Joined from 'courses' on list queries")


class Teacher(BaseModel):
    """
    Represents a teacher, mapping to the 'teachers' table.
    """
    teacher_id: int
    name: str
    email: str
    department: str


class Course(BaseModel):
    """
    Represents a course, mapping to the 'courses' table.
    """
    course_id: int
    course_code: str
    course_name: str
    department: str


class Session(BaseModel):
    """
    Represents a scheduled class meeting, mapping to the 'sessions' table.
    Course and teacher columns are joined in on read.
    """
    session_id: str = Field(..., description="'{course_code}-{yyyymmdd}-{4 digits}', generated once at creation")
    course_id: int
    teacher_id: int
    session_date: date
    start_time: time
    end_time: time
    location: str = "TBD"
    status: SessionStatus = SessionStatus.SCHEDULED
    course_code: Optional[str] = None
    course_name: Optional[str] = None
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None


class Attendance(BaseModel):
    """
    Represents one attendance row, mapping to the 'attendance' table.
    session_id is NULL for day-level clock-in rows.
    """
    attendance_id: int
    student_id: int
    session_id: Optional[str] = None
    date: date
    status: AttendanceStatus
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None


class StudentCourse(BaseModel):
    """
    Represents an enrollment, mapping to the 'student_courses' table.
    """
    student_id: int
    course_id: int
    enrollment_date: date
    status: EnrollmentStatus


class Report(BaseModel):
    """
    Denormalized report row joined against attendance, students, courses and users.
    """
    report_id: int
    date: date
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    role: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    status: Optional[str] = None
    course_name: Optional[str] = None
    student_name: Optional[str] = None
    user_role: Optional[str] = None
