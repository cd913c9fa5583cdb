import logging
from fastapi import APIRouter, Depends, Query, Request, status
from typing import List

from ..models.enums import Role
from ..models.redis_models import SessionUser
from ..services.student_service import StudentService
from ..services.enrollment_service import EnrollmentService
from .schemas.common import ApiResponse
from .schemas.attendance import AttendanceResponse
from .schemas.course import CourseResponse, EnrolledCourseResponse, EnrollRequest
from .schemas.student import (
    StudentResponse, StudentProfileUpdateRequest, StudentDashboardResponse,
    UpcomingSession, AttendanceHistoryPage
)

from .auth import require_role
from .dependencies import get_student_service, get_enrollment_service
from .utilities.limiter import limiter

logger = logging.getLogger(__name__)

student_only = require_role(Role.STUDENT)

router = APIRouter(
    prefix="/student",
    tags=["Student Endpoints"],
    dependencies=[Depends(student_only)]
)


@router.get("/dashboard", response_model=ApiResponse[StudentDashboardResponse])
async def get_dashboard(
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    """Profile, attendance statistics and the next few sessions in one call."""
    return ApiResponse(data=await service.get_dashboard(user))


@router.get("/sessions", response_model=ApiResponse[List[UpcomingSession]])
async def get_sessions(
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    return ApiResponse(data=await service.get_upcoming_sessions(user))


@router.get("/attendance", response_model=ApiResponse[AttendanceHistoryPage])
async def get_attendance_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    return ApiResponse(data=await service.get_attendance_history(user, page=page, limit=limit))


@router.post(
    "/sessions/{session_id}/clock-in",
    response_model=ApiResponse[AttendanceResponse],
    summary="Mark myself present for a session"
)
@limiter.limit("10/minute")
async def clock_in_to_session(
    request: Request,
    session_id: str,
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    """
    The session must be scheduled or ongoing and belong to a course the
    student is actively enrolled in. Clocking in twice updates the same record.
    """
    record = await service.clock_in_to_session(user, session_id)
    return ApiResponse(data=record, message="Clocked in successfully")


@router.get("/profile", response_model=ApiResponse[StudentResponse])
async def get_profile(
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    return ApiResponse(data=await service.get_profile(user))


@router.put("/profile", response_model=ApiResponse[StudentResponse])
async def update_profile(
    body: StudentProfileUpdateRequest,
    user: SessionUser = Depends(student_only),
    service: StudentService = Depends(get_student_service)
):
    student = await service.update_profile(user, email=body.email, phone=body.phone, password=body.password)
    return ApiResponse(data=student, message="Profile updated successfully")


# --- Courses ---

@router.get("/courses/enrolled", response_model=ApiResponse[List[EnrolledCourseResponse]])
async def get_enrolled_courses(
    user: SessionUser = Depends(student_only),
    service: EnrollmentService = Depends(get_enrollment_service)
):
    return ApiResponse(data=await service.get_enrolled_courses(user))


@router.get("/courses/available", response_model=ApiResponse[List[CourseResponse]])
async def get_available_courses(
    user: SessionUser = Depends(student_only),
    service: EnrollmentService = Depends(get_enrollment_service)
):
    return ApiResponse(data=await service.get_available_courses(user))


@router.get("/courses/all", response_model=ApiResponse[List[CourseResponse]])
async def get_all_courses(service: EnrollmentService = Depends(get_enrollment_service)):
    return ApiResponse(data=await service.get_all_courses())


@router.post("/courses/enroll", response_model=ApiResponse[None], status_code=status.HTTP_201_CREATED)
async def enroll(
    body: EnrollRequest,
    user: SessionUser = Depends(student_only),
    service: EnrollmentService = Depends(get_enrollment_service)
):
    await service.enroll(user, body.course_id)
    return ApiResponse(message="Enrolled successfully")


@router.delete("/courses/drop/{course_id}", response_model=ApiResponse[None])
async def drop(
    course_id: int,
    user: SessionUser = Depends(student_only),
    service: EnrollmentService = Depends(get_enrollment_service)
):
    await service.drop(user, course_id)
    return ApiResponse(message="Course dropped successfully")
