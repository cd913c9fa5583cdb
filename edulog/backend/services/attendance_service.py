import asyncio
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import asyncpg

from ..db.attendance_client import AttendanceDBClient
from ..db.dashboard_client import DashboardDBClient
from ..db.student_client import StudentDBClient
from ..models.db_models import Attendance
from ..models.enums import AttendanceStatus
from ..models.redis_models import SessionUser
from ..tools.clock import local_now, local_today
from .exceptions import ConflictError, NotFoundError, ValidationError
from .student_service import resolve_student

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Day-level clock-in/clock-out for students and attendance record
    management and statistics for admins.
    """
    def __init__(self, attendance_client: AttendanceDBClient, student_client: StudentDBClient,
                 dashboard_client: DashboardDBClient):
        self.attendance_client = attendance_client
        self.student_client = student_client
        self.dashboard_client = dashboard_client

    # --- Clock in / out ---

    async def clock_in(self, user: SessionUser) -> Attendance:
        student = await resolve_student(self.student_client, user)
        now = local_now()
        record = await self.attendance_client.clock_in_day(student.student_id, now.date(), now)
        logger.info(f"Student {student.student_id} clocked in for {now.date()}.")
        return record

    async def clock_out(self, user: SessionUser) -> Attendance:
        """Closes today's open row. The recorded status is kept as is."""
        student = await resolve_student(self.student_client, user)
        now = local_now()
        record = await self.attendance_client.clock_out_day(student.student_id, now.date(), now)
        if not record:
            logger.warning(f"Student {student.student_id} tried to clock out without an open clock-in.")
            raise NotFoundError("No open clock-in found for today.")
        logger.info(f"Student {student.student_id} clocked out for {now.date()}.")
        return record

    # --- Records ---

    async def list_records(self) -> List[Attendance]:
        return await self.attendance_client.get_all()

    async def get_record(self, attendance_id: int) -> Attendance:
        record = await self.attendance_client.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found.")
        return record

    async def get_student_records(self, student_id: int) -> List[Attendance]:
        if not await self.student_client.get_by_id(student_id):
            raise NotFoundError("Student not found.")
        return await self.attendance_client.get_by_student(student_id)

    async def create_record(self, student_id: int, session_id: Optional[str], date: date, status: AttendanceStatus,
                            clock_in_time: Optional[datetime] = None, clock_out_time: Optional[datetime] = None) -> Attendance:
        self._check_times(clock_in_time, clock_out_time)
        try:
            record = await self.attendance_client.create(
                student_id, session_id, date, status.value, clock_in_time, clock_out_time
            )
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("An attendance record already exists for this student and session/day.") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise ValidationError("Unknown student or session.") from e
        logger.info(f"Attendance record {record.attendance_id} created for student {student_id}.")
        return record

    async def update_record(self, attendance_id: int, student_id: int, session_id: Optional[str], date: date,
                            status: AttendanceStatus, clock_in_time: Optional[datetime] = None,
                            clock_out_time: Optional[datetime] = None) -> Attendance:
        self._check_times(clock_in_time, clock_out_time)
        try:
            updated = await self.attendance_client.update(
                attendance_id, student_id, session_id, date, status.value, clock_in_time, clock_out_time
            )
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("An attendance record already exists for this student and session/day.") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise ValidationError("Unknown student or session.") from e
        if not updated:
            raise NotFoundError("Attendance record not found.")
        logger.info(f"Attendance record {attendance_id} updated.")
        return await self.get_record(attendance_id)

    async def delete_record(self, attendance_id: int):
        if not await self.attendance_client.delete(attendance_id):
            raise NotFoundError("Attendance record not found.")
        logger.info(f"Attendance record {attendance_id} deleted.")

    @staticmethod
    def _check_times(clock_in_time: Optional[datetime], clock_out_time: Optional[datetime]):
        if clock_out_time and not clock_in_time:
            raise ValidationError("clock_out_time requires clock_in_time.")
        if clock_in_time and clock_out_time and clock_out_time < clock_in_time:
            raise ValidationError("clock_out_time cannot be before clock_in_time.")

    # --- Statistics ---

    async def get_status_counts(self) -> Dict[str, int]:
        return dict(await self.attendance_client.get_stats())

    async def get_total_students(self) -> int:
        return await self.dashboard_client.total_students()

    async def get_attendance_today(self) -> float:
        """Present share of all students today, to two decimals."""
        today = local_today()
        total, present = await asyncio.gather(
            self.dashboard_client.total_students(),
            self.dashboard_client.present_today(today),
        )
        return round(present / total * 100, 2) if total else 0.0

    async def get_absent_today(self) -> int:
        return await self.dashboard_client.absent_marked_today(local_today())

    async def get_department_stats(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in await self.student_client.department_counts()]

    async def get_percentages(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in await self.student_client.get_percentages()]
