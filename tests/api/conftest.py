# tests/api/conftest.py
import uuid
import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from fastapi.testclient import TestClient

from edulog.backend.main import app
from edulog.backend.api.auth import create_access_token
from edulog.backend.api.dependencies import get_redis_client
from edulog.backend.models.enums import Role
from edulog.backend.models.redis_models import SessionUser, UserSessionRedis


class InMemoryRedisClient:
    """Stands in for RedisClient in API tests; same method names, dict storage."""

    def __init__(self):
        self.sessions: Dict[int, UserSessionRedis] = {}

    async def save_user_session(self, session: UserSessionRedis, ttl: int):
        self.sessions[session.user_data.id] = session

    async def get_user_session(self, user_id: int) -> Optional[UserSessionRedis]:
        return self.sessions.get(user_id)

    async def delete_user_session(self, user_id: int) -> int:
        return 1 if self.sessions.pop(user_id, None) else 0


@pytest.fixture
def redis_client() -> InMemoryRedisClient:
    return InMemoryRedisClient()


@pytest.fixture
def client(redis_client):
    """
    TestClient without the lifespan, so no real pools are created. Service
    dependencies are overridden per test through app.dependency_overrides.
    """
    app.dependency_overrides[get_redis_client] = lambda: redis_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user() -> SessionUser:
    return SessionUser(id=1, username="admin", role=Role.ADMIN)


@pytest.fixture
def student_user() -> SessionUser:
    return SessionUser(id=2, username="jdoe", role=Role.STUDENT, student_id=7)


@pytest.fixture
def login(redis_client):
    """Opens a session for a user and returns the Authorization header of a matching token."""
    def _login(user: SessionUser) -> Dict[str, str]:
        now = datetime.now(timezone.utc)
        session = UserSessionRedis(
            user_data=user,
            session_id=uuid.uuid4(),
            session_start_time=now,
            session_end_time=now + timedelta(hours=1),
        )
        redis_client.sessions[user.id] = session
        token = create_access_token(
            data={"id": user.id, "role": user.role.value, "student_id": user.student_id, "sid": str(session.session_id)},
            expires_delta=timedelta(hours=1),
        )
        return {"Authorization": f"Bearer {token}"}
    return _login
