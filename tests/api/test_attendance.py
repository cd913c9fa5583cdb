import pytest
from datetime import date
from unittest.mock import AsyncMock

from edulog.backend.main import app
from edulog.backend.api.dependencies import get_attendance_service, get_report_service
from edulog.backend.models.db_models import Attendance
from edulog.backend.services.exceptions import NotFoundError, ValidationError


@pytest.fixture
def attendance_service():
    service = AsyncMock()
    app.dependency_overrides[get_attendance_service] = lambda: service
    return service


def test_clock_out_without_open_row(client, attendance_service, login, student_user):
    attendance_service.clock_out.side_effect = NotFoundError("No open clock-in found for today.")

    response = client.post("/api/attendance/clock-out", headers=login(student_user))

    assert response.status_code == 404


def test_clock_in_is_student_only(client, attendance_service, login, admin_user):
    response = client.post("/api/attendance/clock-in", headers=login(admin_user))

    assert response.status_code == 403
    attendance_service.clock_in.assert_not_called()


def test_admin_record_routes_reject_students(client, attendance_service, login, student_user):
    response = client.get("/api/attendance", headers=login(student_user))

    assert response.status_code == 403


def test_stats_routes_are_not_shadowed_by_record_ids(client, attendance_service, login, admin_user):
    attendance_service.get_attendance_today.return_value = 42.86
    attendance_service.get_status_counts.return_value = {"present": 3, "absent": 1, "late": 0}
    headers = login(admin_user)

    today = client.get("/api/attendance/stats/attendance-today", headers=headers)
    counts = client.get("/api/attendance/stats", headers=headers)

    assert today.json()["data"] == 42.86
    assert counts.json()["data"] == {"present": 3, "absent": 1, "late": 0}
    attendance_service.get_record.assert_not_called()


def test_admin_creates_record(client, attendance_service, login, admin_user):
    attendance_service.create_record.return_value = Attendance(
        attendance_id=4, student_id=7, date=date(2026, 10, 19), status="Late"
    )

    response = client.post("/api/attendance", headers=login(admin_user),
                           json={"student_id": 7, "date": "2026-10-19", "status": "Late"})

    assert response.status_code == 201
    kwargs = attendance_service.create_record.await_args.kwargs
    assert kwargs["session_id"] is None
    assert kwargs["status"].value == "Late"


def test_reports_reject_inverted_range(client, login, admin_user):
    report_service = AsyncMock()
    report_service.get_reports.side_effect = ValidationError("startDate cannot be after endDate.")
    app.dependency_overrides[get_report_service] = lambda: report_service

    response = client.get("/api/reports?startDate=2026-10-19&endDate=2026-10-01",
                          headers=login(admin_user))

    assert response.status_code == 400
    filters = report_service.get_reports.await_args.args[0]
    assert filters.start_date == date(2026, 10, 19)
    assert filters.end_date == date(2026, 10, 1)


def test_reports_treat_empty_filters_as_absent(client, login, admin_user):
    report_service = AsyncMock()
    report_service.get_reports.return_value = []
    app.dependency_overrides[get_report_service] = lambda: report_service

    response = client.get(
        "/api/reports?startDate=&endDate=&roleFilter=&courseFilter=&statusFilter=&studentNameFilter=jane",
        headers=login(admin_user)
    )

    assert response.status_code == 200
    filters = report_service.get_reports.await_args.args[0]
    assert filters.start_date is None
    assert filters.end_date is None
    assert filters.role is None
    assert filters.course is None
    assert filters.status is None
    assert filters.student_name == "jane"


def test_reports_reject_malformed_date(client, login, admin_user):
    report_service = AsyncMock()
    app.dependency_overrides[get_report_service] = lambda: report_service

    response = client.get("/api/reports?startDate=19-10-2026", headers=login(admin_user))

    assert response.status_code == 400
    assert response.json()["success"] is False
    report_service.get_reports.assert_not_awaited()
