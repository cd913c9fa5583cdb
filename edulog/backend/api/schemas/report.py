# edulog/backend/api/schemas/report.py
from pydantic import BaseModel, ConfigDict
from datetime import date
from decimal import Decimal
from typing import Optional


class ReportResponse(BaseModel):
    report_id: int
    date: date
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    role: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    status: Optional[str] = None
    course_name: Optional[str] = None
    student_name: Optional[str] = None
    user_role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
