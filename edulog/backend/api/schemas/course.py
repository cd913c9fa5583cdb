# edulog/backend/api/schemas/course.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Optional

from ...models.enums import EnrollmentStatus


class CourseRequest(BaseModel):
    course_code: str = Field(..., min_length=1, max_length=32)
    course_name: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)


class CourseResponse(BaseModel):
    course_id: int
    course_code: str
    course_name: str
    department: str

    model_config = ConfigDict(from_attributes=True)


class EnrolledCourseResponse(CourseResponse):
    enrollment_date: date
    status: EnrollmentStatus


class EnrollRequest(BaseModel):
    course_id: int
