from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from src.staff_ledger.staff_ledger.attendance.model import AttendanceRecord
from src.staff_ledger.staff_ledger.attendance.service import AttendanceService
from src.staff_ledger.staff_ledger.core.enums import AttendanceStatus, CorrectionStatus
from src.staff_ledger.staff_ledger.leaves.service import LeaveService
from src.staff_ledger.staff_ledger.shifts.service import ShiftService
from src.staff_ledger.staff_ledger.stats.calculator import AttendanceStatsCalculator, effective_status
from src.staff_ledger.staff_ledger.stats.service import DashboardService

TODAY = date(2024, 1, 10)


def _record(day: int, status: AttendanceStatus, clock_in=None, clock_out=None, **kwargs) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=f"r{day}",
        work_date=date(2024, 1, day),
        clock_in=clock_in,
        clock_out=clock_out,
        status=status,
        location="Main Bakery",
        **kwargs,
    )


def test_attendance_rate_eighty_percent():
    records = [
        _record(1, AttendanceStatus.PRESENT, time(9, 0), time(17, 0)),
        _record(2, AttendanceStatus.PRESENT, time(9, 0), time(17, 0)),
        _record(3, AttendanceStatus.PRESENT, time(9, 0), time(17, 0)),
        _record(4, AttendanceStatus.LATE, time(9, 30), time(17, 0)),
        _record(5, AttendanceStatus.ABSENT),
    ]

    stats = AttendanceStatsCalculator().summarize(records, today=TODAY)

    assert stats.attendance_rate == 80.0
    assert stats.present_days == 3
    assert stats.late_days == 1
    assert stats.absent_days == 1
    assert stats.total_hours == 31.5
    assert stats.as_dict()["attendanceRate"] == 80.0


def test_empty_slice_has_zero_rate():
    stats = AttendanceStatsCalculator().summarize([], today=TODAY)
    assert stats.attendance_rate == 0
    assert stats.total_days == 0


def test_past_unfinished_days_count_as_absent():
    assert effective_status(_record(9, AttendanceStatus.PENDING), TODAY) == AttendanceStatus.ABSENT
    assert effective_status(_record(9, AttendanceStatus.INVALID), TODAY) == AttendanceStatus.ABSENT
    assert effective_status(_record(10, AttendanceStatus.PENDING), TODAY) == AttendanceStatus.PENDING
    assert effective_status(_record(9, AttendanceStatus.ON_LEAVE), TODAY) == AttendanceStatus.ON_LEAVE
    assert effective_status(_record(9, AttendanceStatus.IN_PROGRESS, time(9, 0)), TODAY) == AttendanceStatus.IN_PROGRESS


def test_in_progress_and_correction_counts():
    records = [
        _record(10, AttendanceStatus.IN_PROGRESS, time(9, 0)),
        _record(9, AttendanceStatus.HALF_DAY, time(9, 0), time(11, 0), correction_status=CorrectionStatus.REQUESTED),
    ]
    stats = AttendanceStatsCalculator().summarize(records, today=TODAY)
    assert stats.in_progress_days == 1
    assert stats.half_days == 1
    assert stats.correction_days == 1
    assert stats.attendance_rate == 50.0


def test_overnight_hours_are_counted():
    records = [_record(9, AttendanceStatus.LATE, time(22, 0), time(6, 0))]
    assert AttendanceStatsCalculator().summarize(records, today=TODAY).total_hours == 8.0


def test_chart_covers_thirty_days_oldest_first():
    records = [_record(10, AttendanceStatus.PRESENT, time(9, 0), time(17, 0))]
    chart = AttendanceStatsCalculator().chart(records, today=TODAY)

    assert len(chart) == 30
    assert chart[0]["fullDate"] == (TODAY - timedelta(days=29)).isoformat()
    assert chart[-1] == {"date": "Jan 10", "day": "Wed", "fullDate": "2024-01-10", "hours": 8.0}
    assert chart[-2]["hours"] == 0


@pytest.fixture
def dashboard_setup(ledger, shifts_repo, zone, fixed_now):
    attendance = AttendanceService(ledger, zone=zone)
    leaves = LeaveService(ledger, zone=zone)
    shifts = ShiftService(shifts_repo, ledger, zone=zone)

    yesterday = fixed_now - timedelta(days=1)
    attendance.clock_in("emp-1", location="Main Bakery", now=yesterday)
    attendance.clock_out("emp-1", now=yesterday.replace(hour=17))
    attendance.clock_in("emp-1", location="Main Bakery", now=fixed_now)

    leaves.request_leave("emp-1", start_date="2024-01-20", end_date="2024-01-22", leave_type="vacation", now=fixed_now)
    for day in (10, 11, 12):
        shifts.create_shift(
            "emp-1", start_date=f"2024-01-{day}", start_time="12:00", end_date=f"2024-01-{day}", end_time="18:00"
        )

    return DashboardService(ledger, shifts, zone=zone)


def test_dashboard(dashboard_setup, fixed_now):
    data = dashboard_setup.dashboard("emp-1", now=fixed_now).as_dict()

    assert data["todaysShift"]["start"] == "2024-01-10T12:00:00+01:00"
    assert len(data["upcomingShifts"]) == 3
    assert data["pendingLeaves"] == 1
    assert data["monthlyHours"] == 8.0
    assert data["attendanceChart"][-2]["hours"] == 8.0
    assert [a["message"] for a in data["recentActivities"]] == [
        "Clocked in at 09:00:00",
        "Clocked out at 17:00:00",
        "pending vacation leave",
    ]
