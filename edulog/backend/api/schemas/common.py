# edulog/backend/api/schemas/common.py
from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

# Loose email shape shared by every request that accepts an address.
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every successful response."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Envelope for every failed response."""
    success: bool = False
    error: str
    details: Optional[Any] = None
