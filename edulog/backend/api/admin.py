import logging
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ..models.enums import Role
from ..models.redis_models import SessionUser
from ..services.admin_service import AdminService
from ..services.dashboard_service import DashboardService
from .schemas.common import ApiResponse
from .schemas.student import StudentRequest, StudentResponse
from .schemas.teacher import TeacherRequest, TeacherResponse
from .schemas.course import CourseRequest, CourseResponse
from .schemas.session import SessionCreateRequest, SessionUpdateRequest, SessionResponse
from .schemas.dashboard import DashboardResponse, DashboardStats, DepartmentStat, RecentLog
from .schemas.user import AdminProfileResponse, AdminProfileUpdateRequest

from .auth import require_role
from .dependencies import get_admin_service, get_dashboard_service

logger = logging.getLogger(__name__)

admin_only = require_role(Role.ADMIN)

router = APIRouter(
    prefix="/admin",
    tags=["Admin Endpoints"],
    dependencies=[Depends(admin_only)]
)


# === STUDENTS ===

@router.get("/students", response_model=ApiResponse[List[StudentResponse]], summary="List all students")
@router.get("/all-students", response_model=ApiResponse[List[StudentResponse]], include_in_schema=False)
async def list_students(service: AdminService = Depends(get_admin_service)):
    return ApiResponse(data=await service.list_students())


@router.get("/students/{student_id}", response_model=ApiResponse[StudentResponse])
async def get_student(student_id: int, service: AdminService = Depends(get_admin_service)):
    return ApiResponse(data=await service.get_student(student_id))


@router.post("/students", response_model=ApiResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
@router.post("/create", response_model=ApiResponse[StudentResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
async def create_student(body: StudentRequest, service: AdminService = Depends(get_admin_service)):
    student = await service.create_student(**body.model_dump())
    return ApiResponse(data=student, message="Student created successfully")


@router.put("/students/{student_id}", response_model=ApiResponse[StudentResponse])
@router.put("/update/{student_id}", response_model=ApiResponse[StudentResponse], include_in_schema=False)
async def update_student(student_id: int, body: StudentRequest, service: AdminService = Depends(get_admin_service)):
    student = await service.update_student(student_id, **body.model_dump())
    return ApiResponse(data=student, message="Student updated successfully")


@router.delete("/students/{student_id}", response_model=ApiResponse[None])
@router.delete("/delete/{student_id}", response_model=ApiResponse[None], include_in_schema=False)
async def delete_student(student_id: int, service: AdminService = Depends(get_admin_service)):
    """Also removes the student's attendance rows and enrollments."""
    await service.delete_student(student_id)
    return ApiResponse(message="Student deleted successfully")


# === TEACHERS ===

@router.get("/teachers", response_model=ApiResponse[List[TeacherResponse]])
async def list_teachers(
    search: Optional[str] = Query(None, description="Matches name, email or department."),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse(data=await service.list_teachers(search))


@router.get("/teachers/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def get_teacher(teacher_id: int, service: AdminService = Depends(get_admin_service)):
    return ApiResponse(data=await service.get_teacher(teacher_id))


@router.post("/teachers", response_model=ApiResponse[TeacherResponse], status_code=status.HTTP_201_CREATED)
async def create_teacher(body: TeacherRequest, service: AdminService = Depends(get_admin_service)):
    teacher = await service.create_teacher(**body.model_dump())
    return ApiResponse(data=teacher, message="Teacher created successfully")


@router.put("/teachers/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def update_teacher(teacher_id: int, body: TeacherRequest, service: AdminService = Depends(get_admin_service)):
    teacher = await service.update_teacher(teacher_id, **body.model_dump())
    return ApiResponse(data=teacher, message="Teacher updated successfully")


@router.delete("/teachers/{teacher_id}", response_model=ApiResponse[None])
async def delete_teacher(teacher_id: int, service: AdminService = Depends(get_admin_service)):
    await service.delete_teacher(teacher_id)
    return ApiResponse(message="Teacher deleted successfully")


# === COURSES ===

@router.get("/courses", response_model=ApiResponse[List[CourseResponse]])
async def list_courses(
    search: Optional[str] = Query(None, description="Matches code, name or department."),
    department: Optional[str] = Query(None),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse(data=await service.list_courses(search=search, department=department))


@router.get("/courses/{course_id}", response_model=ApiResponse[CourseResponse])
async def get_course(course_id: int, service: AdminService = Depends(get_admin_service)):
    return ApiResponse(data=await service.get_course(course_id))


@router.post("/courses", response_model=ApiResponse[CourseResponse], status_code=status.HTTP_201_CREATED)
async def create_course(body: CourseRequest, service: AdminService = Depends(get_admin_service)):
    course = await service.create_course(**body.model_dump())
    return ApiResponse(data=course, message="Course created successfully")


@router.put("/courses/{course_id}", response_model=ApiResponse[CourseResponse])
async def update_course(course_id: int, body: CourseRequest, service: AdminService = Depends(get_admin_service)):
    course = await service.update_course(course_id, **body.model_dump())
    return ApiResponse(data=course, message="Course updated successfully")


@router.delete("/courses/{course_id}", response_model=ApiResponse[None])
async def delete_course(course_id: int, service: AdminService = Depends(get_admin_service)):
    """Refused with 409 while sessions still reference the course."""
    await service.delete_course(course_id)
    return ApiResponse(message="Course deleted successfully")


# === SESSIONS ===

@router.get("/sessions", response_model=ApiResponse[List[SessionResponse]])
async def list_sessions(
    teacher_id: Optional[int] = Query(None),
    course_id: Optional[int] = Query(None),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse(data=await service.list_sessions(teacher_id=teacher_id, course_id=course_id))


@router.get("/sessions/{session_id}", response_model=ApiResponse[SessionResponse])
async def get_session(session_id: str, service: AdminService = Depends(get_admin_service)):
    return ApiResponse(data=await service.get_session(session_id))


@router.post("/sessions", response_model=ApiResponse[SessionResponse], status_code=status.HTTP_201_CREATED)
async def create_session(body: SessionCreateRequest, service: AdminService = Depends(get_admin_service)):
    session = await service.create_session(**body.model_dump())
    return ApiResponse(data=session, message="Session created successfully")


@router.put("/sessions/{session_id}", response_model=ApiResponse[SessionResponse])
async def update_session(session_id: str, body: SessionUpdateRequest, service: AdminService = Depends(get_admin_service)):
    session = await service.update_session(session_id, **body.model_dump())
    return ApiResponse(data=session, message="Session updated successfully")


@router.delete("/sessions/{session_id}", response_model=ApiResponse[None])
async def delete_session(session_id: str, service: AdminService = Depends(get_admin_service)):
    await service.delete_session(session_id)
    return ApiResponse(message="Session deleted successfully")


# === DASHBOARD & PROFILE ===

@router.get("/dashboard", response_model=ApiResponse[DashboardResponse])
async def get_dashboard(service: DashboardService = Depends(get_dashboard_service)):
    dashboard = await service.get_dashboard()
    return ApiResponse(data=DashboardResponse(
        stats=DashboardStats(
            total_students=dashboard.total_students,
            attendance_today=dashboard.attendance_today,
            absent_students=dashboard.absent_students,
        ),
        department_stats=[DepartmentStat(**row) for row in dashboard.department_stats],
        recent_logs=[RecentLog.model_validate(row) for row in dashboard.recent_logs],
    ))


@router.get("/profile", response_model=ApiResponse[AdminProfileResponse])
async def get_profile(
    user: SessionUser = Depends(admin_only),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse(data=await service.get_profile(user.id))


@router.put("/profile", response_model=ApiResponse[AdminProfileResponse])
async def update_profile(
    body: AdminProfileUpdateRequest,
    user: SessionUser = Depends(admin_only),
    service: AdminService = Depends(get_admin_service)
):
    await service.update_profile(user.id, email=body.email, password=body.password)
    return ApiResponse(data=await service.get_profile(user.id), message="Profile updated successfully")
