from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date
from ..core.enums import LeaveType, RequestStatus


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave interval, whole site-local days on both ends."""

    leave_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType
    status: RequestStatus
    created_at: datetime
    notes: str = ""

    @property
    def days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date

    def as_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "type": self.leave_type.value,
            "status": self.status.value,
            "notes": self.notes,
            "days": self.days,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class LeaveRow:
    """Read-model for the cross-employee leave listing."""

    employee_id: str
    leave: LeaveRequest

    def as_dict(self) -> dict:
        return {"employeeId": self.employee_id, **self.leave.as_dict()}


@dataclass(frozen=True)
class LeaveFilter:
    start: Optional[date] = None
    end: Optional[date] = None
    employee_id: Optional[str] = None
    status: Optional[RequestStatus] = None
    leave_type: Optional[LeaveType] = None

    def matches(self, row: LeaveRow) -> bool:
        leave = row.leave
        if self.employee_id and row.employee_id != self.employee_id:
            return False
        if self.status and leave.status != self.status:
            return False
        if self.leave_type and leave.leave_type != self.leave_type:
            return False
        if self.start and leave.start_date < self.start:
            return False
        if self.end and leave.end_date > self.end:
            return False
        return True
