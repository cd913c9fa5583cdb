import pytest
from unittest.mock import AsyncMock

from edulog.backend.services.dashboard_service import DashboardService, attendance_percentage


@pytest.mark.parametrize("present, total, expected", [
    (4, 10, 40),
    (0, 0, 0),
    (1, 8, 13),   # 12.5 rounds up
    (2, 3, 67),
    (5, 5, 100),
])
def test_attendance_percentage(present, total, expected):
    assert attendance_percentage(present, total) == expected


@pytest.mark.asyncio
async def test_dashboard_ten_students_four_present():
    mock_dashboard_client = AsyncMock()
    mock_dashboard_client.total_students.return_value = 10
    mock_dashboard_client.present_today.return_value = 4
    mock_dashboard_client.absent_today.return_value = 6
    mock_dashboard_client.department_stats.return_value = [{"department": "CS", "student_count": 10}]
    mock_dashboard_client.recent_logs.return_value = []

    dashboard = await DashboardService(mock_dashboard_client).get_dashboard()

    assert dashboard.total_students == 10
    assert dashboard.attendance_today == 40
    assert dashboard.absent_students == 6
    assert dashboard.department_stats == [{"department": "CS", "student_count": 10}]


@pytest.mark.asyncio
async def test_dashboard_with_no_students():
    mock_dashboard_client = AsyncMock()
    mock_dashboard_client.total_students.return_value = 0
    mock_dashboard_client.present_today.return_value = 0
    mock_dashboard_client.absent_today.return_value = 0
    mock_dashboard_client.department_stats.return_value = []
    mock_dashboard_client.recent_logs.return_value = []

    dashboard = await DashboardService(mock_dashboard_client).get_dashboard()

    assert dashboard.attendance_today == 0
