import asyncpg
import bcrypt
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from edulog.backend.models.db_models import Student, User
from edulog.backend.models.enums import Role
from edulog.backend.services.auth_service import AuthService
from edulog.backend.services.exceptions import AuthenticationError, ConflictError, ValidationError


def make_user(password: str = "correct-horse") -> User:
    hashed = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode()
    return User(user_id=1, username="jdoe", email="jdoe@school.edu", password=hashed, role=Role.STUDENT, student_id=7)


@pytest_asyncio.fixture
async def service_instance():
    mock_user_client = AsyncMock()
    mock_student_client = AsyncMock()
    service = AuthService(user_client=mock_user_client, student_client=mock_student_client)
    return service, mock_user_client, mock_student_client


@pytest.mark.asyncio
class TestAuthService:

    async def test_register_duplicate_username_conflicts_without_insert(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = make_user()

        with pytest.raises(ConflictError, match="Username already exists."):
            await service.register("jdoe", "other@school.edu", Role.STUDENT, "secret")

        mock_user_client.create_user.assert_not_called()

    async def test_register_stores_a_bcrypt_hash(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = None
        mock_user_client.create_user.return_value = make_user()

        await service.register("jdoe", "jdoe@school.edu", Role.ADMIN, "secret")

        kwargs = mock_user_client.create_user.await_args.kwargs
        assert kwargs["role"] == "admin"
        assert kwargs["password_hash"] != "secret"
        assert bcrypt.checkpw(b"secret", kwargs["password_hash"].encode())

    async def test_register_links_existing_student(self, service_instance):
        service, mock_user_client, mock_student_client = service_instance
        mock_user_client.get_by_username.return_value = None
        mock_student_client.get_by_id.return_value = Student(
            student_id=7, name="Jane", email="jane@school.edu", department="CS", year_of_study=1
        )
        mock_user_client.create_user.return_value = make_user()

        await service.register("jdoe", "jdoe@school.edu", Role.STUDENT, "secret", student_id=7)

        assert mock_user_client.create_user.await_args.kwargs["student_id"] == 7

    async def test_register_rejects_missing_student(self, service_instance):
        service, mock_user_client, mock_student_client = service_instance
        mock_user_client.get_by_username.return_value = None
        mock_student_client.get_by_id.return_value = None

        with pytest.raises(ValidationError):
            await service.register("jdoe", "jdoe@school.edu", Role.STUDENT, "secret", student_id=99)

        mock_user_client.create_user.assert_not_called()

    async def test_register_rejects_student_link_on_admin(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = None

        with pytest.raises(ValidationError):
            await service.register("boss", "boss@school.edu", Role.ADMIN, "secret", student_id=7)

    async def test_register_race_on_unique_index_conflicts(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = None
        mock_user_client.create_user.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(ConflictError):
            await service.register("jdoe", "jdoe@school.edu", Role.STUDENT, "secret")

    async def test_authenticate_success(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = make_user("correct-horse")

        user = await service.authenticate("jdoe", "correct-horse")

        assert user.user_id == 1

    async def test_authenticate_wrong_password(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = make_user("correct-horse")

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await service.authenticate("jdoe", "battery-staple")

    async def test_authenticate_unknown_user(self, service_instance):
        service, mock_user_client, _ = service_instance
        mock_user_client.get_by_username.return_value = None

        with pytest.raises(AuthenticationError):
            await service.authenticate("ghost", "whatever")
