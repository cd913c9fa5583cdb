import logging
import random
from datetime import date, time
from typing import List, Optional
import asyncpg

from ..db.student_client import StudentDBClient
from ..db.teacher_client import TeacherDBClient
from ..db.course_client import CourseDBClient
from ..db.session_client import SessionDBClient
from ..db.user_client import UserDBClient
from ..models.db_models import Student, Teacher, Course, Session
from ..models.enums import SessionStatus
from ..tools.clock import local_today
from ..tools.passwords import hash_password
from .exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SESSION_ID_ATTEMPTS = 3


def generate_session_id(course_code: str, today: date) -> str:
    """'{course_code}-{yyyymmdd}-{4 random digits}'."""
    return f"{course_code}-{today:%Y%m%d}-{random.randint(1000, 9999)}"


class AdminService:
    """
    Service layer behind the admin endpoints: CRUD over students, teachers,
    courses and sessions, plus the admin's own profile.
    """
    def __init__(self, student_client: StudentDBClient, teacher_client: TeacherDBClient,
                 course_client: CourseDBClient, session_client: SessionDBClient, user_client: UserDBClient):
        self.student_client = student_client
        self.teacher_client = teacher_client
        self.course_client = course_client
        self.session_client = session_client
        self.user_client = user_client

    # === STUDENTS ===

    async def list_students(self) -> List[Student]:
        return await self.student_client.get_all()

    async def get_student(self, student_id: int) -> Student:
        student = await self.student_client.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found.")
        return student

    async def create_student(self, name: str, email: str, department: str, course_id: Optional[int],
                             year_of_study: int, phone: Optional[str] = None) -> Student:
        try:
            student = await self.student_client.create(name, email, department, course_id, year_of_study, phone)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Email already exists.") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise ValidationError(f"Course {course_id} does not exist.") from e
        logger.info(f"Student {student.student_id} ('{name}') created.")
        return student

    async def update_student(self, student_id: int, name: str, email: str, department: str,
                             course_id: Optional[int], year_of_study: int, phone: Optional[str] = None) -> Student:
        try:
            updated = await self.student_client.update(student_id, name, email, department, course_id, year_of_study, phone)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Email already exists.") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise ValidationError(f"Course {course_id} does not exist.") from e
        if not updated:
            raise NotFoundError("Student not found.")
        logger.info(f"Student {student_id} updated.")
        return await self.get_student(student_id)

    async def delete_student(self, student_id: int):
        if not await self.student_client.delete(student_id):
            raise NotFoundError("Student not found.")
        logger.info(f"Student {student_id} deleted along with their attendance and enrollments.")

    # === TEACHERS ===

    async def list_teachers(self, search: Optional[str] = None) -> List[Teacher]:
        if search:
            return await self.teacher_client.search(search)
        return await self.teacher_client.get_all()

    async def get_teacher(self, teacher_id: int) -> Teacher:
        teacher = await self.teacher_client.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found.")
        return teacher

    async def create_teacher(self, name: str, email: str, department: str) -> Teacher:
        try:
            teacher = await self.teacher_client.create(name, email, department)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Teacher email '{email}' already exists.")
            raise ConflictError("Email already exists.") from e
        logger.info(f"Teacher {teacher.teacher_id} ('{name}') created.")
        return teacher

    async def update_teacher(self, teacher_id: int, name: str, email: str, department: str) -> Teacher:
        try:
            updated = await self.teacher_client.update(teacher_id, name, email, department)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Email already exists.") from e
        if not updated:
            raise NotFoundError("Teacher not found.")
        logger.info(f"Teacher {teacher_id} updated.")
        return await self.get_teacher(teacher_id)

    async def delete_teacher(self, teacher_id: int):
        try:
            deleted = await self.teacher_client.delete(teacher_id)
        except asyncpg.ForeignKeyViolationError as e:
            logger.warning(f"Refused to delete teacher {teacher_id}: sessions still reference it.")
            raise ConflictError("Teacher still has sessions; delete or reassign them first.") from e
        if not deleted:
            raise NotFoundError("Teacher not found.")
        logger.info(f"Teacher {teacher_id} deleted.")

    # === COURSES ===

    async def list_courses(self, search: Optional[str] = None, department: Optional[str] = None) -> List[Course]:
        if search:
            return await self.course_client.search(search)
        if department:
            return await self.course_client.get_by_department(department)
        return await self.course_client.get_all()

    async def get_course(self, course_id: int) -> Course:
        course = await self.course_client.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found.")
        return course

    async def create_course(self, course_code: str, course_name: str, department: str) -> Course:
        try:
            course = await self.course_client.create(course_code, course_name, department)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Course code '{course_code}' already exists.")
            raise ConflictError("Course code already exists.") from e
        logger.info(f"Course {course.course_id} ('{course_code}') created.")
        return course

    async def update_course(self, course_id: int, course_code: str, course_name: str, department: str) -> Course:
        try:
            updated = await self.course_client.update(course_id, course_code, course_name, department)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Course code already exists.") from e
        if not updated:
            raise NotFoundError("Course not found.")
        logger.info(f"Course {course_id} updated.")
        return await self.get_course(course_id)

    async def delete_course(self, course_id: int):
        """Fails with ConflictError while sessions reference the course; enrollments cascade."""
        try:
            deleted = await self.course_client.delete(course_id)
        except asyncpg.ForeignKeyViolationError as e:
            logger.warning(f"Refused to delete course {course_id}: sessions still reference it.")
            raise ConflictError("Course has sessions; delete them before deleting the course.") from e
        if not deleted:
            raise NotFoundError("Course not found.")
        logger.info(f"Course {course_id} deleted.")

    # === SESSIONS ===

    async def _resolve_course_and_teacher(self, course_code: str, teacher_email: str):
        course = await self.course_client.get_by_code(course_code)
        if not course:
            raise ValidationError(f"No course with code '{course_code}'.")
        teacher = await self.teacher_client.get_by_email(teacher_email)
        if not teacher:
            raise ValidationError(f"No teacher with email '{teacher_email}'.")
        return course, teacher

    async def list_sessions(self, teacher_id: Optional[int] = None, course_id: Optional[int] = None) -> List[Session]:
        if teacher_id is not None:
            return await self.session_client.get_by_teacher(teacher_id)
        if course_id is not None:
            return await self.session_client.get_by_course(course_id)
        return await self.session_client.get_all()

    async def get_session(self, session_id: str) -> Session:
        session = await self.session_client.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found.")
        return session

    async def create_session(self, course_code: str, teacher_email: str, session_date: date,
                             start_time: time, end_time: time, location: Optional[str] = None) -> Session:
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time.")
        course, teacher = await self._resolve_course_and_teacher(course_code, teacher_email)

        for attempt in range(1, SESSION_ID_ATTEMPTS + 1):
            session_id = generate_session_id(course.course_code, local_today())
            try:
                await self.session_client.create(
                    session_id=session_id, course_id=course.course_id, teacher_id=teacher.teacher_id,
                    session_date=session_date, start_time=start_time, end_time=end_time,
                    location=location or "TBD", status=SessionStatus.SCHEDULED.value
                )
                break
            except asyncpg.UniqueViolationError as e:
                logger.warning(f"Session id '{session_id}' collided (attempt {attempt}).")
                if attempt == SESSION_ID_ATTEMPTS:
                    raise ConflictError("Could not allocate a unique session id, please retry.") from e

        logger.info(f"Session '{session_id}' created for course '{course.course_code}'.")
        return await self.get_session(session_id)

    async def update_session(self, session_id: str, course_code: str, teacher_email: str, session_date: date,
                             start_time: time, end_time: time, location: str, status: SessionStatus) -> Session:
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time.")
        course, teacher = await self._resolve_course_and_teacher(course_code, teacher_email)
        updated = await self.session_client.update(
            session_id=session_id, course_id=course.course_id, teacher_id=teacher.teacher_id,
            session_date=session_date, start_time=start_time, end_time=end_time,
            location=location, status=status.value
        )
        if not updated:
            raise NotFoundError("Session not found.")
        logger.info(f"Session '{session_id}' updated (status '{status.value}').")
        return await self.get_session(session_id)

    async def delete_session(self, session_id: str):
        if not await self.session_client.delete(session_id):
            raise NotFoundError("Session not found.")
        logger.info(f"Session '{session_id}' deleted.")

    # === PROFILE ===

    async def get_profile(self, user_id: int) -> dict:
        profile = await self.user_client.get_admin_profile(user_id)
        if not profile:
            raise NotFoundError("Admin not found.")
        return dict(profile)

    async def update_profile(self, user_id: int, email: str, password: Optional[str] = None):
        """Email and (optional) password are written in one transaction."""
        password_hash = await hash_password(password) if password else None
        try:
            updated = await self.user_client.update_email_and_password(user_id, email, password_hash)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError("Email already in use.") from e
        if not updated:
            raise NotFoundError("Admin not found.")
        logger.info(f"Admin {user_id} updated their profile (password changed: {password_hash is not None}).")
