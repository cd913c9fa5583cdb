import logging
from typing import Any, Dict, List

from ..db.student_client import StudentDBClient
from ..db.course_client import CourseDBClient
from ..db.enrollment_client import EnrollmentDBClient
from ..models.db_models import Course
from ..models.enums import EnrollmentStatus
from ..models.redis_models import SessionUser
from .exceptions import ConflictError, NotFoundError
from .student_service import resolve_student

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Course enrollment for the logged-in student."""

    def __init__(self, student_client: StudentDBClient, course_client: CourseDBClient,
                 enrollment_client: EnrollmentDBClient):
        self.student_client = student_client
        self.course_client = course_client
        self.enrollment_client = enrollment_client

    async def enroll(self, user: SessionUser, course_id: int):
        """
        Checks run as separate reads before the write; the upsert keeps a
        concurrent duplicate from creating a second row.
        """
        student = await resolve_student(self.student_client, user)

        if not await self.course_client.get_by_id(course_id):
            raise NotFoundError("Course not found.")

        if await self.enrollment_client.is_enrolled(student.student_id, course_id):
            logger.warning(f"Student {student.student_id} is already enrolled in course {course_id}.")
            raise ConflictError("Already enrolled in this course.")

        await self.enrollment_client.enroll(student.student_id, course_id)
        logger.info(f"Student {student.student_id} enrolled in course {course_id}.")

    async def drop(self, user: SessionUser, course_id: int):
        student = await resolve_student(self.student_client, user)

        if not await self.enrollment_client.is_enrolled(student.student_id, course_id):
            raise NotFoundError("Enrollment record not found.")

        await self.enrollment_client.update_status(student.student_id, course_id, EnrollmentStatus.DROPPED.value)
        logger.info(f"Student {student.student_id} dropped course {course_id}.")

    async def get_enrolled_courses(self, user: SessionUser) -> List[Dict[str, Any]]:
        student = await resolve_student(self.student_client, user)
        return await self.enrollment_client.get_enrolled_courses(student.student_id)

    async def get_available_courses(self, user: SessionUser) -> List[Course]:
        student = await resolve_student(self.student_client, user)
        return await self.enrollment_client.get_available_courses(student.student_id)

    async def get_all_courses(self) -> List[Course]:
        return await self.course_client.get_all()
