import asyncio
import logging
from typing import Any, Dict, List, Optional
import asyncpg

from ..db.student_client import StudentDBClient
from ..db.session_client import SessionDBClient
from ..db.attendance_client import AttendanceDBClient
from ..db.enrollment_client import EnrollmentDBClient
from ..models.db_models import Attendance, Student
from ..models.enums import SessionStatus
from ..models.redis_models import SessionUser
from ..tools.clock import local_now, local_today
from ..tools.passwords import hash_password
from .exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UPCOMING_ON_DASHBOARD = 3
EMPTY_STATS = {
    "total_sessions": 0,
    "present_count": 0,
    "absent_count": 0,
    "late_count": 0,
    "attendance_percentage": 0.0,
    "current_streak": 0,
    "attendance_trend": 0.0,
}


async def resolve_student(student_client: StudentDBClient, user: SessionUser) -> Student:
    """
    Finds the student row of the logged-in account through users.student_id.
    The student_id claim in the token is never used for this.
    """
    student = await student_client.get_by_user_id(user.id)
    if not student:
        logger.warning(f"User {user.id} ('{user.username}') has no linked student profile.")
        raise NotFoundError("Student profile not found.")
    return student


class StudentService:
    """
    Service layer behind the student endpoints: dashboard, sessions,
    attendance history, session clock-in and the student's own profile.
    """
    def __init__(self, student_client: StudentDBClient, session_client: SessionDBClient,
                 attendance_client: AttendanceDBClient, enrollment_client: EnrollmentDBClient):
        self.student_client = student_client
        self.session_client = session_client
        self.attendance_client = attendance_client
        self.enrollment_client = enrollment_client

    async def get_dashboard(self, user: SessionUser) -> Dict[str, Any]:
        student = await resolve_student(self.student_client, user)
        today = local_today()
        stats, streak, sessions = await asyncio.gather(
            self.student_client.get_attendance_stats(student.student_id),
            self.student_client.get_streak_and_trend(student.student_id, today),
            self.student_client.get_upcoming_sessions(student.student_id, today),
        )

        merged = dict(EMPTY_STATS)
        if stats:
            merged.update(dict(stats))
        if streak:
            merged.update(dict(streak))

        return {
            "student": student,
            "stats": merged,
            "upcoming_sessions": [dict(row) for row in sessions[:UPCOMING_ON_DASHBOARD]],
        }

    async def get_upcoming_sessions(self, user: SessionUser) -> List[Dict[str, Any]]:
        student = await resolve_student(self.student_client, user)
        sessions = await self.student_client.get_upcoming_sessions(student.student_id, local_today())
        return [dict(row) for row in sessions]

    async def get_attendance_history(self, user: SessionUser, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """One page of the student's attendance, newest first."""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive.")
        student = await resolve_student(self.student_client, user)
        offset = (page - 1) * limit
        rows, total = await asyncio.gather(
            self.student_client.get_attendance_history(student.student_id, limit, offset),
            self.student_client.count_attendance(student.student_id),
        )
        return {
            "items": [dict(row) for row in rows],
            "page": page,
            "limit": limit,
            "total": total,
        }

    async def clock_in_to_session(self, user: SessionUser, session_id: str) -> Attendance:
        """
        Marks the student Present for a session of an actively enrolled course.
        Clocking in again updates the same row.
        """
        student = await resolve_student(self.student_client, user)

        session = await self.session_client.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found.")
        if session.status not in (SessionStatus.SCHEDULED, SessionStatus.ONGOING):
            logger.warning(f"Student {student.student_id} tried to clock in to '{session_id}' ({session.status.value}).")
            raise ValidationError(f"Session is {session.status.value}; attendance is closed.")
        if not await self.enrollment_client.is_enrolled(student.student_id, session.course_id):
            raise AuthorizationError("You are not enrolled in this session's course.")

        now = local_now()
        record = await self.attendance_client.clock_in_session(
            student_id=student.student_id, session_id=session_id, day=now.date(), clock_in_time=now
        )
        logger.info(f"Student {student.student_id} clocked in to session '{session_id}'.")
        return record

    async def get_profile(self, user: SessionUser) -> Student:
        return await resolve_student(self.student_client, user)

    async def update_profile(self, user: SessionUser, email: Optional[str] = None, phone: Optional[str] = None,
                             password: Optional[str] = None) -> Student:
        """Fields left out keep their current value."""
        student = await resolve_student(self.student_client, user)
        password_hash = await hash_password(password) if password else None
        try:
            updated = await self.student_client.update_profile(
                student_id=student.student_id,
                user_id=user.id,
                email=email if email is not None else student.email,
                phone=phone if phone is not None else student.phone,
                password_hash=password_hash,
            )
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Email or phone number already in use.") from e
        if not updated:
            raise NotFoundError("Student not found.")
        logger.info(f"Student {student.student_id} updated their profile.")
        return await resolve_student(self.student_client, user)
