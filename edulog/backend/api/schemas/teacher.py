# edulog/backend/api/schemas/teacher.py
from pydantic import BaseModel, ConfigDict, Field

from .common import EMAIL_PATTERN


class TeacherRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    department: str = Field(..., min_length=1, max_length=255)


class TeacherResponse(BaseModel):
    teacher_id: int
    name: str
    email: str
    department: str

    model_config = ConfigDict(from_attributes=True)
