import pytest
from datetime import date, time
from unittest.mock import AsyncMock

from edulog.backend.main import app
from edulog.backend.api.dependencies import get_admin_service, get_dashboard_service
from edulog.backend.models.db_models import Course, Session, Student
from edulog.backend.services.dashboard_service import DashboardData
from edulog.backend.services.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def admin_service():
    service = AsyncMock()
    app.dependency_overrides[get_admin_service] = lambda: service
    return service


@pytest.fixture
def admin_headers(login, admin_user):
    return login(admin_user)


def sample_student() -> Student:
    return Student(student_id=7, name="Jane Doe", email="jane@school.edu", department="CS",
                   course_id=1, year_of_study=2, phone=None, course_name="Algorithms")


# --- Access control ---

def test_admin_routes_require_a_token(client, admin_service):
    response = client.get("/api/admin/students")

    assert response.status_code == 401
    admin_service.list_students.assert_not_called()


def test_admin_routes_reject_student_tokens(client, admin_service, login, student_user):
    headers = login(student_user)

    for method, path in [("get", "/api/admin/students"), ("delete", "/api/admin/courses/1"),
                         ("get", "/api/admin/dashboard"), ("get", "/api/admin/profile")]:
        response = client.request(method.upper(), path, headers=headers)
        assert response.status_code == 403, path

    admin_service.list_students.assert_not_called()
    admin_service.delete_course.assert_not_called()


# --- Students ---

def test_list_students_and_alias(client, admin_service, admin_headers):
    admin_service.list_students.return_value = [sample_student()]

    for path in ("/api/admin/students", "/api/admin/all-students"):
        response = client.get(path, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"][0]["course_name"] == "Algorithms"


def test_create_student_validates_year_of_study(client, admin_service, admin_headers):
    response = client.post("/api/admin/students", headers=admin_headers, json={
        "name": "Jane", "email": "jane@school.edu", "department": "CS", "year_of_study": 12
    })

    assert response.status_code == 400
    admin_service.create_student.assert_not_called()


def test_create_student_duplicate_email(client, admin_service, admin_headers):
    admin_service.create_student.side_effect = ConflictError("Email already exists.")

    response = client.post("/api/admin/create", headers=admin_headers, json={
        "name": "Jane", "email": "jane@school.edu", "department": "CS", "year_of_study": 2
    })

    assert response.status_code == 409


def test_delete_missing_student(client, admin_service, admin_headers):
    admin_service.delete_student.side_effect = NotFoundError("Student not found.")

    response = client.delete("/api/admin/delete/99", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Student not found."}


# --- Courses & sessions ---

def test_course_delete_with_sessions_conflicts(client, admin_service, admin_headers):
    admin_service.delete_course.side_effect = ConflictError("Course has sessions; delete them before deleting the course.")

    response = client.delete("/api/admin/courses/1", headers=admin_headers)

    assert response.status_code == 409
    admin_service.delete_course.assert_awaited_once_with(1)


def test_list_courses_passes_filters(client, admin_service, admin_headers):
    admin_service.list_courses.return_value = [Course(course_id=1, course_code="CS101", course_name="Intro", department="CS")]

    response = client.get("/api/admin/courses?department=CS", headers=admin_headers)

    assert response.status_code == 200
    admin_service.list_courses.assert_awaited_once_with(search=None, department="CS")


def test_create_session_returns_generated_id(client, admin_service, admin_headers):
    admin_service.create_session.return_value = Session(
        session_id="CS101-20261019-4821", course_id=1, teacher_id=3, session_date=date(2026, 10, 20),
        start_time=time(9, 0), end_time=time(10, 30), course_code="CS101", teacher_email="ada@school.edu"
    )

    response = client.post("/api/admin/sessions", headers=admin_headers, json={
        "course_code": "CS101", "teacher_email": "ada@school.edu", "session_date": "2026-10-20",
        "start_time": "09:00:00", "end_time": "10:30:00"
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["session_id"] == "CS101-20261019-4821"
    assert data["location"] == "TBD"
    assert data["status"] == "scheduled"


def test_create_session_with_unknown_course_code(client, admin_service, admin_headers):
    admin_service.create_session.side_effect = ValidationError("No course with code 'NOPE'.")

    response = client.post("/api/admin/sessions", headers=admin_headers, json={
        "course_code": "NOPE", "teacher_email": "ada@school.edu", "session_date": "2026-10-20",
        "start_time": "09:00:00", "end_time": "10:30:00"
    })

    assert response.status_code == 400


def test_create_session_rejects_end_before_start(client, admin_service, admin_headers):
    response = client.post("/api/admin/sessions", headers=admin_headers, json={
        "course_code": "CS101", "teacher_email": "ada@school.edu", "session_date": "2026-10-20",
        "start_time": "11:00:00", "end_time": "10:00:00"
    })

    assert response.status_code == 400
    admin_service.create_session.assert_not_called()


# --- Dashboard & profile ---

def test_dashboard_uses_camel_case_keys(client, admin_headers):
    dashboard_service = AsyncMock()
    dashboard_service.get_dashboard.return_value = DashboardData(
        total_students=10,
        attendance_today=40,
        absent_students=6,
        department_stats=[{"department": "CS", "student_count": 10}],
        recent_logs=[{"name": "Jane Doe", "status": "Present", "date": date(2026, 10, 19), "course_name": "Algorithms"}],
    )
    app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service

    response = client.get("/api/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["stats"] == {"totalStudents": 10, "attendanceToday": 40, "absentStudents": 6}
    assert data["departmentStats"] == [{"department": "CS", "studentCount": 10}]
    assert data["recentLogs"][0]["course"] == "Algorithms"


def test_profile_update_validates_email_and_password(client, admin_service, admin_headers):
    bad_email = client.put("/api/admin/profile", headers=admin_headers, json={"email": "not-an-email"})
    short_password = client.put("/api/admin/profile", headers=admin_headers,
                                json={"email": "admin@school.edu", "password": "short"})

    assert bad_email.status_code == 400
    assert short_password.status_code == 400
    admin_service.update_profile.assert_not_called()


def test_profile_update_uses_the_token_identity(client, admin_service, admin_headers, admin_user):
    admin_service.get_profile.return_value = {
        "user_id": admin_user.id, "name": "admin", "email": "boss@school.edu", "role": "admin", "created_at": None
    }

    response = client.put("/api/admin/profile", headers=admin_headers,
                          json={"email": "boss@school.edu", "password": "longenough"})

    assert response.status_code == 200
    admin_service.update_profile.assert_awaited_once_with(admin_user.id, email="boss@school.edu", password="longenough")
