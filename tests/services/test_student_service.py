import asyncpg
import pytest
import pytest_asyncio
from datetime import date, time
from unittest.mock import AsyncMock

from edulog.backend.models.db_models import Session, Student
from edulog.backend.models.enums import Role, SessionStatus
from edulog.backend.models.redis_models import SessionUser
from edulog.backend.services.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from edulog.backend.services.student_service import StudentService


@pytest.fixture
def student_user() -> SessionUser:
    # The token's student_id claim deliberately disagrees with the linked row.
    return SessionUser(id=2, username="jdoe", role=Role.STUDENT, student_id=999)


@pytest.fixture
def student() -> Student:
    return Student(student_id=7, name="Jane Doe", email="jane@school.edu", department="CS",
                   course_id=1, year_of_study=2, phone="555-0100")


def make_session(status: SessionStatus = SessionStatus.SCHEDULED) -> Session:
    return Session(session_id="CS101-20261019-1234", course_id=1, teacher_id=3, session_date=date(2026, 10, 19),
                   start_time=time(9, 0), end_time=time(10, 0), status=status)


@pytest_asyncio.fixture
async def service_instance(student):
    """StudentService over mocked db clients; the logged-in user resolves to `student`."""
    mock_student_client = AsyncMock()
    mock_session_client = AsyncMock()
    mock_attendance_client = AsyncMock()
    mock_enrollment_client = AsyncMock()
    mock_student_client.get_by_user_id.return_value = student
    service = StudentService(
        student_client=mock_student_client,
        session_client=mock_session_client,
        attendance_client=mock_attendance_client,
        enrollment_client=mock_enrollment_client,
    )
    return service, mock_student_client, mock_session_client, mock_attendance_client, mock_enrollment_client


@pytest.mark.asyncio
class TestStudentService:

    async def test_user_without_student_row(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.get_by_user_id.return_value = None

        with pytest.raises(NotFoundError, match="Student profile not found."):
            await service.get_profile(student_user)

    async def test_dashboard_combines_stats_and_first_three_sessions(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.get_attendance_stats.return_value = {
            "total_sessions": 4, "present_count": 3, "absent_count": 1, "late_count": 0, "attendance_percentage": 75.0
        }
        mock_student_client.get_streak_and_trend.return_value = {"current_streak": 2, "attendance_trend": -5.0}
        mock_student_client.get_upcoming_sessions.return_value = [{"session_id": str(i)} for i in range(5)]

        dashboard = await service.get_dashboard(student_user)

        assert dashboard["student"].student_id == 7
        assert dashboard["stats"]["present_count"] == 3
        assert dashboard["stats"]["current_streak"] == 2
        assert [s["session_id"] for s in dashboard["upcoming_sessions"]] == ["0", "1", "2"]
        mock_student_client.get_attendance_stats.assert_awaited_once_with(7)

    async def test_dashboard_without_attendance_has_zero_stats(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.get_attendance_stats.return_value = None
        mock_student_client.get_streak_and_trend.return_value = None
        mock_student_client.get_upcoming_sessions.return_value = []

        dashboard = await service.get_dashboard(student_user)

        assert dashboard["stats"]["total_sessions"] == 0
        assert dashboard["stats"]["attendance_trend"] == 0.0

    async def test_second_page_offsets_by_limit(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.get_attendance_history.return_value = [{"attendance_id": i} for i in range(11, 16)]
        mock_student_client.count_attendance.return_value = 15

        page = await service.get_attendance_history(student_user, page=2, limit=10)

        mock_student_client.get_attendance_history.assert_awaited_once_with(7, 10, 10)
        assert len(page["items"]) == 5
        assert page == {"items": page["items"], "page": 2, "limit": 10, "total": 15}

    async def test_page_must_be_positive(self, service_instance, student_user):
        service, *_ = service_instance

        with pytest.raises(ValidationError):
            await service.get_attendance_history(student_user, page=0, limit=10)

    async def test_clock_in_uses_linked_student_and_upsert(self, service_instance, student_user):
        service, _, mock_session_client, mock_attendance_client, mock_enrollment_client = service_instance
        mock_session_client.get_by_id.return_value = make_session()
        mock_enrollment_client.is_enrolled.return_value = True

        await service.clock_in_to_session(student_user, "CS101-20261019-1234")
        await service.clock_in_to_session(student_user, "CS101-20261019-1234")

        assert mock_attendance_client.clock_in_session.await_count == 2
        kwargs = mock_attendance_client.clock_in_session.await_args.kwargs
        assert kwargs["student_id"] == 7
        assert kwargs["session_id"] == "CS101-20261019-1234"
        mock_attendance_client.create.assert_not_called()
        mock_enrollment_client.is_enrolled.assert_awaited_with(7, 1)

    async def test_clock_in_unknown_session(self, service_instance, student_user):
        service, _, mock_session_client, mock_attendance_client, _ = service_instance
        mock_session_client.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.clock_in_to_session(student_user, "missing")

        mock_attendance_client.clock_in_session.assert_not_called()

    @pytest.mark.parametrize("status", [SessionStatus.COMPLETED, SessionStatus.CANCELLED])
    async def test_clock_in_closed_session(self, service_instance, student_user, status):
        service, _, mock_session_client, mock_attendance_client, _ = service_instance
        mock_session_client.get_by_id.return_value = make_session(status)

        with pytest.raises(ValidationError):
            await service.clock_in_to_session(student_user, "CS101-20261019-1234")

        mock_attendance_client.clock_in_session.assert_not_called()

    async def test_clock_in_not_enrolled(self, service_instance, student_user):
        service, _, mock_session_client, mock_attendance_client, mock_enrollment_client = service_instance
        mock_session_client.get_by_id.return_value = make_session(SessionStatus.ONGOING)
        mock_enrollment_client.is_enrolled.return_value = False

        with pytest.raises(AuthorizationError):
            await service.clock_in_to_session(student_user, "CS101-20261019-1234")

        mock_attendance_client.clock_in_session.assert_not_called()

    async def test_update_profile_keeps_missing_fields(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.update_profile.return_value = 1

        await service.update_profile(student_user, phone="555-0199")

        mock_student_client.update_profile.assert_awaited_once_with(
            student_id=7, user_id=2, email="jane@school.edu", phone="555-0199", password_hash=None
        )

    async def test_update_profile_hashes_new_password(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.update_profile.return_value = 1

        await service.update_profile(student_user, password="new-password")

        password_hash = mock_student_client.update_profile.await_args.kwargs["password_hash"]
        assert password_hash and password_hash != "new-password"

    async def test_update_profile_duplicate_email(self, service_instance, student_user):
        service, mock_student_client, *_ = service_instance
        mock_student_client.update_profile.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(ConflictError):
            await service.update_profile(student_user, email="taken@school.edu")
