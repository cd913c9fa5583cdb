# edulog/backend/api/dependencies.py
import logging
from fastapi import Request, Depends, HTTPException, status
import redis.asyncio as redis
import asyncpg

from ..db.redis_client import RedisClient
from ..db.user_client import UserDBClient
from ..db.student_client import StudentDBClient
from ..db.teacher_client import TeacherDBClient
from ..db.course_client import CourseDBClient
from ..db.session_client import SessionDBClient
from ..db.attendance_client import AttendanceDBClient
from ..db.enrollment_client import EnrollmentDBClient
from ..db.dashboard_client import DashboardDBClient
from ..db.report_client import ReportDBClient
from ..services.auth_service import AuthService
from ..services.admin_service import AdminService
from ..services.dashboard_service import DashboardService
from ..services.student_service import StudentService
from ..services.enrollment_service import EnrollmentService
from ..services.attendance_service import AttendanceService
from ..services.report_service import ReportService

logger = logging.getLogger(__name__)


def get_redis_pool(request: Request) -> redis.ConnectionPool:
    """
    Returns the Redis pool created in the lifespan, or 503 when startup could not create it.
    """
    pool = getattr(request.app.state, "redis_pool", None)
    if pool is None:
        logger.error("Redis pool is not available.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Session store is unavailable.")
    return pool


def get_postgres_pool(request: Request) -> asyncpg.Pool:
    """
    Returns the PostgreSQL pool created in the lifespan, or 503 when startup could not create it.
    """
    pool = getattr(request.app.state, "postgres_pool", None)
    if pool is None:
        logger.error("PostgreSQL pool is not available.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database is unavailable.")
    return pool


def get_redis_client(redis_pool: redis.ConnectionPool = Depends(get_redis_pool)) -> RedisClient:
    return RedisClient(pool=redis_pool)


def get_auth_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> AuthService:
    return AuthService(
        user_client=UserDBClient(pool=postgres_pool),
        student_client=StudentDBClient(pool=postgres_pool),
    )


def get_admin_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> AdminService:
    """
    Builds a fresh AdminService per request on top of the shared pool.
    Every db client acquires its own connection per query.
    """
    return AdminService(
        student_client=StudentDBClient(pool=postgres_pool),
        teacher_client=TeacherDBClient(pool=postgres_pool),
        course_client=CourseDBClient(pool=postgres_pool),
        session_client=SessionDBClient(pool=postgres_pool),
        user_client=UserDBClient(pool=postgres_pool),
    )


def get_dashboard_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> DashboardService:
    return DashboardService(dashboard_client=DashboardDBClient(pool=postgres_pool))


def get_student_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> StudentService:
    return StudentService(
        student_client=StudentDBClient(pool=postgres_pool),
        session_client=SessionDBClient(pool=postgres_pool),
        attendance_client=AttendanceDBClient(pool=postgres_pool),
        enrollment_client=EnrollmentDBClient(pool=postgres_pool),
    )


def get_enrollment_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> EnrollmentService:
    return EnrollmentService(
        student_client=StudentDBClient(pool=postgres_pool),
        course_client=CourseDBClient(pool=postgres_pool),
        enrollment_client=EnrollmentDBClient(pool=postgres_pool),
    )


def get_attendance_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> AttendanceService:
    return AttendanceService(
        attendance_client=AttendanceDBClient(pool=postgres_pool),
        student_client=StudentDBClient(pool=postgres_pool),
        dashboard_client=DashboardDBClient(pool=postgres_pool),
    )


def get_report_service(postgres_pool: asyncpg.Pool = Depends(get_postgres_pool)) -> ReportService:
    return ReportService(report_client=ReportDBClient(pool=postgres_pool))
