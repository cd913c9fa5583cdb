import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from datetime import datetime, timedelta, timezone
from uuid import uuid4
from typing import Optional
import jwt
from pydantic import ValidationError

from .schemas.common import ApiResponse
from .schemas.user import TokenData, LoginRequest, LoginResponse, RegisterRequest, UserResponse
from ..models.enums import Role
from ..models.redis_models import SessionUser, UserSessionRedis
from ..db.redis_client import RedisClient
from ..services.auth_service import AuthService
from ..config.config import settings
from .dependencies import get_redis_client, get_auth_service
from .utilities.limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: timedelta) -> str:
    """Signs a JWT carrying the given claims plus an 'exp' claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    redis_client: RedisClient = Depends(get_redis_client)
) -> SessionUser:
    """
    Decodes the bearer token, validates its claims and requires the login
    session the token was issued with to still exist in Redis.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenData.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as e:
        logger.warning(f"Token validation error: {e}")
        raise credentials_exception

    user_session = await redis_client.get_user_session(token_data.id)
    if user_session is None or user_session.session_id != token_data.sid:
        logger.warning(f"User {token_data.id} presented a token without an active session. Denying access.")
        raise credentials_exception

    return user_session.user_data


def require_role(*roles: Role):
    """Dependency factory that lets only the given roles through (403 otherwise)."""
    async def role_checker(user: SessionUser = Depends(get_current_user)) -> SessionUser:
        if user.role not in roles:
            logger.warning(f"User {user.id} with role '{user.role.value}' was refused a {'/'.join(r.value for r in roles)} route.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action."
            )
        return user
    return role_checker


@router.post("/login", response_model=ApiResponse[LoginResponse])
@limiter.limit("20/minute")
async def login(
    request: Request,
    login_request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    redis_client: RedisClient = Depends(get_redis_client)
):
    """Checks the credentials, opens a Redis login session and returns a bearer token."""
    logger.info(f"Login attempt for user '{login_request.username}'.")
    user = await service.authenticate(login_request.username, login_request.password)

    ttl = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    now = datetime.now(timezone.utc)
    session_user = SessionUser(id=user.user_id, username=user.username, role=user.role, student_id=user.student_id)
    redis_session = UserSessionRedis(
        user_data=session_user,
        session_id=uuid4(),
        session_start_time=now,
        session_end_time=now + timedelta(seconds=ttl),
    )
    await redis_client.save_user_session(redis_session, ttl=ttl)

    token_payload = {
        "id": user.user_id,
        "role": user.role.value,
        "student_id": user.student_id,
        "sid": str(redis_session.session_id),
    }
    access_token = create_access_token(data=token_payload, expires_delta=timedelta(seconds=ttl))

    logger.info(f"User '{user.username}' ({user.role.value}) logged in.")
    return ApiResponse(
        data=LoginResponse(token=access_token, role=user.role, student_id=user.student_id),
        message="Login successful",
    )


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register(
    request: Request,
    register_request: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    user = await service.register(
        username=register_request.username,
        email=register_request.email,
        role=register_request.role,
        password=register_request.password,
        student_id=register_request.student_id,
    )
    return ApiResponse(data=UserResponse.model_validate(user), message="User registered successfully")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    current_user: SessionUser = Depends(get_current_user),
    redis_client: RedisClient = Depends(get_redis_client)
):
    """Deletes the Redis session, so the token stops working right away."""
    await redis_client.delete_user_session(current_user.id)
    logger.info(f"Session for user {current_user.id} deleted.")
    return ApiResponse(message="Logged out")
