from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import format_time, now_local, to_local
from ..core.constants import DASHBOARD_RECENT_ACTIVITIES
from ..core.enums import RequestStatus
from ..employees.model import Employee
from ..employees.service import EmployeeLedger
from ..shifts.model import Shift
from ..shifts.service import ShiftService
from .calculator import AttendanceStatsCalculator, record_hours


@dataclass(frozen=True)
class Dashboard:
    todays_shift: Optional[Shift]
    upcoming_shifts: list[Shift]
    pending_leaves: int
    monthly_hours: float
    attendance_chart: list[dict]
    recent_activities: list[dict]

    def as_dict(self) -> dict:
        return {
            "todaysShift": self.todays_shift.as_dict() if self.todays_shift else None,
            "upcomingShifts": [s.as_dict() for s in self.upcoming_shifts],
            "pendingLeaves": self.pending_leaves,
            "monthlyHours": self.monthly_hours,
            "attendanceChart": self.attendance_chart,
            "recentActivities": self.recent_activities,
        }


def recent_activities(employee: Employee, *, limit: int = DASHBOARD_RECENT_ACTIVITIES) -> list[dict]:
    """Latest attendance days first, topped up with the latest leaves."""
    activities = []
    for record in sorted(employee.attendance, key=lambda r: r.work_date, reverse=True)[:limit]:
        if record.clock_out:
            message = f"Clocked out at {format_time(record.clock_out)}"
        elif record.clock_in:
            message = f"Clocked in at {format_time(record.clock_in)}"
        else:
            message = f"Marked {record.status.value}"
        activities.append({"date": record.work_date.isoformat(), "message": message, "type": "attendance"})

    remaining = limit - len(activities)
    if remaining > 0:
        for leave in sorted(employee.leaves, key=lambda lv: lv.start_date, reverse=True)[:remaining]:
            activities.append(
                {
                    "date": leave.start_date.isoformat(),
                    "message": f"{leave.status.value} {leave.leave_type.value} leave",
                    "type": "leave",
                }
            )
    return activities


class DashboardService:
    def __init__(
        self,
        ledger: EmployeeLedger,
        shifts: ShiftService,
        *,
        zone: ZoneInfo,
        calculator: Optional[AttendanceStatsCalculator] = None,
    ):
        self._ledger = ledger
        self._shifts = shifts
        self._zone = zone
        self._calculator = calculator or AttendanceStatsCalculator()

    def dashboard(self, employee_id: str, *, now: Optional[datetime] = None) -> Dashboard:
        now = to_local(now, self._zone) if now else now_local(self._zone)
        today = now.date()
        employee = self._ledger.get(employee_id)

        pending_leaves = sum(
            1 for lv in employee.leaves if lv.status == RequestStatus.PENDING and lv.end_date >= today
        )
        monthly_hours = sum(
            record_hours(r)
            for r in employee.attendance
            if r.work_date.year == today.year and r.work_date.month == today.month
        )

        return Dashboard(
            todays_shift=self._shifts.todays_shift(employee.employee_id, now=now),
            upcoming_shifts=self._shifts.upcoming_for(employee.employee_id, now=now),
            pending_leaves=pending_leaves,
            monthly_hours=round(monthly_hours, 2),
            attendance_chart=self._calculator.chart(employee.attendance, today=today),
            recent_activities=recent_activities(employee),
        )
