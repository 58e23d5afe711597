from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_date, format_time
from ..core.enums import AttendanceStatus, CorrectionStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one site-local day."""

    record_id: str
    work_date: date
    clock_in: Optional[time]
    clock_out: Optional[time]
    status: AttendanceStatus
    location: str
    hours_worked: float = 0.0
    notes: str = ""
    manager_note: Optional[str] = None
    correction_status: CorrectionStatus = CorrectionStatus.NONE
    last_updated: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "id": self.record_id,
            "date": format_date(self.work_date),
            "clockIn": format_time(self.clock_in),
            "clockOut": format_time(self.clock_out),
            "status": self.status.value,
            "location": self.location,
            "hoursWorked": self.hours_worked,
            "notes": self.notes,
            "managerNote": self.manager_note,
            "correctionStatus": self.correction_status.value,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for cross-employee listings."""

    employee_id: str
    record: AttendanceRecord

    def as_dict(self) -> dict:
        return {"employeeId": self.employee_id, **self.record.as_dict()}
