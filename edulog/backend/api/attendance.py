import logging
from fastapi import APIRouter, Depends, Request, status
from typing import List

from ..models.enums import Role
from ..models.redis_models import SessionUser
from ..services.attendance_service import AttendanceService
from .schemas.common import ApiResponse
from .schemas.attendance import (
    AttendanceRequest, AttendanceResponse, AttendanceStats, DepartmentCount, StudentPercentage
)

from .auth import require_role
from .dependencies import get_attendance_service
from .utilities.limiter import limiter

logger = logging.getLogger(__name__)

student_only = require_role(Role.STUDENT)
admin_only = require_role(Role.ADMIN)

router = APIRouter(prefix="/attendance", tags=["Attendance"])


# --- Student day-level clock ---

@router.post("/clock-in", response_model=ApiResponse[AttendanceResponse])
@limiter.limit("10/minute")
async def clock_in(
    request: Request,
    user: SessionUser = Depends(student_only),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Marks the student present for today; a second clock-in reopens the same row."""
    return ApiResponse(data=await service.clock_in(user), message="Clocked in successfully")


@router.post("/clock-out", response_model=ApiResponse[AttendanceResponse])
@limiter.limit("10/minute")
async def clock_out(
    request: Request,
    user: SessionUser = Depends(student_only),
    service: AttendanceService = Depends(get_attendance_service)
):
    return ApiResponse(data=await service.clock_out(user), message="Clocked out successfully")


# --- Admin statistics ---
# Declared before '/{attendance_id}' so the literal paths win.

@router.get("/stats", response_model=ApiResponse[AttendanceStats], dependencies=[Depends(admin_only)])
async def get_stats(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_status_counts())


@router.get("/stats/total-students", response_model=ApiResponse[int], dependencies=[Depends(admin_only)])
async def get_total_students(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_total_students())


@router.get("/stats/attendance-today", response_model=ApiResponse[float], dependencies=[Depends(admin_only)])
async def get_attendance_today(service: AttendanceService = Depends(get_attendance_service)):
    """Percentage of all students marked present today, two decimals."""
    return ApiResponse(data=await service.get_attendance_today())


@router.get("/stats/absent-students", response_model=ApiResponse[int], dependencies=[Depends(admin_only)])
async def get_absent_students(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_absent_today())


@router.get("/stats/department-wise", response_model=ApiResponse[List[DepartmentCount]],
            dependencies=[Depends(admin_only)])
async def get_department_stats(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_department_stats())


@router.get("/percentage", response_model=ApiResponse[List[StudentPercentage]], dependencies=[Depends(admin_only)])
async def get_percentages(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_percentages())


@router.get("/student/{student_id}", response_model=ApiResponse[List[AttendanceResponse]],
            dependencies=[Depends(admin_only)])
async def get_student_records(student_id: int, service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_student_records(student_id))


# --- Admin records ---

@router.get("", response_model=ApiResponse[List[AttendanceResponse]], dependencies=[Depends(admin_only)])
async def list_records(service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.list_records())


@router.post("", response_model=ApiResponse[AttendanceResponse], status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(admin_only)])
async def create_record(body: AttendanceRequest, service: AttendanceService = Depends(get_attendance_service)):
    record = await service.create_record(**body.model_dump())
    return ApiResponse(data=record, message="Attendance record created successfully")


@router.get("/{attendance_id}", response_model=ApiResponse[AttendanceResponse], dependencies=[Depends(admin_only)])
async def get_record(attendance_id: int, service: AttendanceService = Depends(get_attendance_service)):
    return ApiResponse(data=await service.get_record(attendance_id))


@router.put("/{attendance_id}", response_model=ApiResponse[AttendanceResponse], dependencies=[Depends(admin_only)])
async def update_record(
    attendance_id: int,
    body: AttendanceRequest,
    service: AttendanceService = Depends(get_attendance_service)
):
    record = await service.update_record(attendance_id, **body.model_dump())
    return ApiResponse(data=record, message="Attendance record updated successfully")


@router.delete("/{attendance_id}", response_model=ApiResponse[None], dependencies=[Depends(admin_only)])
async def delete_record(attendance_id: int, service: AttendanceService = Depends(get_attendance_service)):
    await service.delete_record(attendance_id)
    return ApiResponse(message="Attendance record deleted successfully")
