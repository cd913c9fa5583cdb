# edulog/backend/api/utilities/limiter.py

from fastapi import Request
import jwt

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config.config import settings


def get_limiter_key(request: Request) -> str:
    """
    Rate limit key: the account id from a bearer token when one decodes,
    otherwise the client IP address.
    """
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer ") and settings.SECRET_KEY:
        token = auth_header.split(" ", 1)[1]
        try:
            # Expiry is irrelevant here, only the identity is needed.
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM],
                options={"verify_exp": False}
            )
            user_id = payload.get("id")
            if user_id is not None:
                return f"user:{user_id}"
        except jwt.PyJWTError:
            pass

    return get_remote_address(request)


# In-memory storage when no dedicated Redis URL is configured.
limiter = Limiter(
    key_func=get_limiter_key,
    storage_uri=settings.RATE_LIMITER_REDIS_URL or "memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)
