# edulog/backend/api/schemas/dashboard.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import List, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardStats(CamelModel):
    total_students: int
    attendance_today: int
    absent_students: int


class DepartmentStat(CamelModel):
    department: str
    student_count: int


class RecentLog(CamelModel):
    name: str
    status: str
    date: date
    course: Optional[str] = Field(None, validation_alias="course_name")


class DashboardResponse(CamelModel):
    stats: DashboardStats
    department_stats: List[DepartmentStat]
    recent_logs: List[RecentLog]
