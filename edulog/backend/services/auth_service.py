import logging
from typing import Optional
import asyncpg

from ..db.user_client import UserDBClient
from ..db.student_client import StudentDBClient
from ..models.db_models import User
from ..models.enums import Role
from ..tools.passwords import hash_password, verify_password
from .exceptions import AuthenticationError, ConflictError, ValidationError

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration and credential checks. Token issuing and the Redis login
    session live in the auth router.
    """
    def __init__(self, user_client: UserDBClient, student_client: StudentDBClient):
        self.user_client = user_client
        self.student_client = student_client

    async def register(self, username: str, email: str, role: Role, password: str,
                       student_id: Optional[int] = None) -> User:
        logger.info(f"Registration attempt for '{username}' as '{role.value}'.")

        if await self.user_client.get_by_username(username):
            logger.warning(f"Username '{username}' is already taken.")
            raise ConflictError("Username already exists.")

        if student_id is not None:
            if role != Role.STUDENT:
                raise ValidationError("Only student accounts can be linked to a student record.")
            if not await self.student_client.get_by_id(student_id):
                raise ValidationError(f"Student {student_id} does not exist.")

        password_hash = await hash_password(password)
        try:
            user = await self.user_client.create_user(
                username=username, email=email, role=role.value,
                password_hash=password_hash, student_id=student_id
            )
        except asyncpg.UniqueViolationError as e:
            # Lost the race against a concurrent registration, or the email is taken.
            logger.warning(f"Registration for '{username}' hit a unique constraint: {e}")
            raise ConflictError("Username or email already exists.") from e

        logger.info(f"User '{username}' created with id {user.user_id}.")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Returns the account when the password matches, otherwise raises AuthenticationError."""
        user = await self.user_client.get_by_username(username)
        if not user:
            logger.warning(f"Login failed: unknown user '{username}'.")
            raise AuthenticationError("Invalid credentials")

        if not await verify_password(password, user.password):
            logger.warning(f"Login failed: wrong password for '{username}'.")
            raise AuthenticationError("Invalid credentials")

        return user
