from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..core.enums import EmployeeStatus
from ..corrections.model import CorrectionRequest
from ..leaves.model import LeaveRequest


@dataclass(frozen=True)
class Employee:
    """Aggregate root: the employee plus the collections it exclusively owns.

    Note: the aggregate is immutable. Every ``with_*``/``without_*`` call
    returns a new aggregate, so a service can build the whole new state and
    persist it with a single repository ``update``.
    """

    employee_id: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    attendance: Tuple[AttendanceRecord, ...] = ()
    leaves: Tuple[LeaveRequest, ...] = ()
    correction_requests: Tuple[CorrectionRequest, ...] = ()
    planned_shift_ids: Tuple[str, ...] = ()
    version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status in {EmployeeStatus.ACTIVE, EmployeeStatus.ON_LEAVE}

    # Attendance
    def attendance_for(self, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance if r.work_date == work_date), None)

    def attendance_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance if r.record_id == record_id), None)

    def with_attendance(self, record: AttendanceRecord) -> "Employee":
        others = tuple(r for r in self.attendance if r.record_id != record.record_id)
        return replace(self, attendance=others + (record,))

    def without_attendance(self, record_id: str) -> "Employee":
        return replace(self, attendance=tuple(r for r in self.attendance if r.record_id != record_id))

    # Leaves
    def leave_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        return next((lv for lv in self.leaves if lv.leave_id == leave_id), None)

    def with_leave(self, leave: LeaveRequest) -> "Employee":
        if self.leave_by_id(leave.leave_id):
            return replace(self, leaves=tuple(leave if lv.leave_id == leave.leave_id else lv for lv in self.leaves))
        return replace(self, leaves=self.leaves + (leave,))

    def without_leave(self, leave_id: str) -> "Employee":
        return replace(self, leaves=tuple(lv for lv in self.leaves if lv.leave_id != leave_id))

    # Corrections
    def correction_by_id(self, correction_id: str) -> Optional[CorrectionRequest]:
        return next((c for c in self.correction_requests if c.correction_id == correction_id), None)

    def with_correction(self, correction: CorrectionRequest) -> "Employee":
        if self.correction_by_id(correction.correction_id):
            items = tuple(
                correction if c.correction_id == correction.correction_id else c for c in self.correction_requests
            )
            return replace(self, correction_requests=items)
        return replace(self, correction_requests=self.correction_requests + (correction,))

    # Planned shifts
    def with_planned_shift(self, shift_id: str) -> "Employee":
        if shift_id in self.planned_shift_ids:
            return self
        return replace(self, planned_shift_ids=self.planned_shift_ids + (shift_id,))

    def without_planned_shift(self, shift_id: str) -> "Employee":
        return replace(self, planned_shift_ids=tuple(s for s in self.planned_shift_ids if s != shift_id))
