from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import combine, now_local, parse_iso_date, to_local
from ..common.ids import new_id
from ..common.validators import require_enum, require_fields
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import NotFoundError, PolicyError, StateConflictError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeLedger
from ..notifications.notifier import LoggingNotifier, Notifier
from .model import LeaveFilter, LeaveRequest, LeaveRow

logger = logging.getLogger(__name__)


def _has_overlap(employee: Employee, leave: LeaveRequest) -> bool:
    return any(
        other.leave_id != leave.leave_id
        and other.status != RequestStatus.REJECTED
        and other.overlaps(leave.start_date, leave.end_date)
        for other in employee.leaves
    )


class LeaveService:
    def __init__(self, ledger: EmployeeLedger, *, zone: ZoneInfo, notifier: Optional[Notifier] = None):
        self._ledger = ledger
        self._zone = zone
        self._notifier = notifier or LoggingNotifier()

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self._zone) if now else now_local(self._zone)

    def request_leave(
        self,
        employee_id: str,
        *,
        start_date,
        end_date,
        leave_type,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        require_fields("Start date, end date, and type are required", startDate=start_date, endDate=end_date, type=leave_type)
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
        kind = require_enum(LeaveType, leave_type, "leave type", code="INVALID_LEAVE_TYPE")

        if end < start:
            raise ValidationError("End date must be on or after start date", code="INVALID_DATE_RANGE")

        now = self._now(now)
        if start < now.date():
            raise ValidationError("Cannot request leave for past dates", code="PAST_DATE")

        leave = LeaveRequest(
            leave_id=new_id(),
            start_date=start,
            end_date=end,
            leave_type=kind,
            status=RequestStatus.PENDING,
            created_at=now,
            notes=(notes or "").strip(),
        )

        def change(employee: Employee):
            if _has_overlap(employee, leave):
                raise StateConflictError("Existing leave overlaps with this period", code="OVERLAPPING_LEAVE")
            return employee.with_leave(leave), leave

        self._ledger.apply(employee_id, change, require_active=True)
        logger.info(f"Leave requested | Employee: {employee_id} | {start} - {end} | Days: {leave.days}")
        return leave

    def update_status(self, leave_id: str, *, status) -> LeaveRow:
        new_status = require_enum(RequestStatus, status, "status", code="INVALID_STATUS")
        owner = self._ledger.find_by_leave_id(leave_id)

        def change(employee: Employee):
            leave = employee.leave_by_id(leave_id)
            if not leave:
                raise NotFoundError("Leave request not found", code="LEAVE_NOT_FOUND")
            if leave.status == new_status:
                raise StateConflictError(f"Leave request is already {new_status.value}", code="NO_CHANGE")

            updated = replace(leave, status=new_status)
            if leave.status == RequestStatus.REJECTED and _has_overlap(employee, updated):
                raise StateConflictError("Existing leave overlaps with this period", code="OVERLAPPING_LEAVE")
            return employee.with_leave(updated), updated

        leave = self._ledger.apply(owner.employee_id, change)
        logger.info(f"Leave status updated | Employee: {owner.employee_id} | Leave: {leave_id} | Status: {new_status.value}")
        self._notifier.notify(
            owner.employee_id,
            f"Leave request {new_status.value}",
            f"Your {leave.leave_type.value} leave from {leave.start_date} to {leave.end_date} is now {new_status.value}",
            payload={"leaveId": leave_id, "status": new_status.value},
        )
        return LeaveRow(employee_id=owner.employee_id, leave=leave)

    def cancel(self, employee_id: str, *, leave_id: str, now: Optional[datetime] = None) -> LeaveRequest:
        now = self._now(now)

        def change(employee: Employee):
            leave = employee.leave_by_id(leave_id)
            if not leave:
                raise NotFoundError("Leave request not found", code="LEAVE_NOT_FOUND")
            if leave.status != RequestStatus.PENDING:
                raise StateConflictError("Only pending leaves can be cancelled", code="NOT_PENDING")
            if combine(leave.start_date, time(0, 0), self._zone) < now:
                raise PolicyError("Cannot cancel leave that has already started", code="ALREADY_STARTED")
            return employee.without_leave(leave_id), leave

        leave = self._ledger.apply(employee_id, change)
        logger.info(f"Leave cancelled | Employee: {employee_id} | Leave: {leave_id}")
        return leave

    def list_for_employee(self, employee_id: str, *, status=None, year: Optional[int] = None) -> list[LeaveRequest]:
        status_e = require_enum(RequestStatus, status, "status", code="INVALID_STATUS") if status else None
        leaves = [
            lv
            for lv in self._ledger.get(employee_id).leaves
            if (status_e is None or lv.status == status_e) and (year is None or lv.start_date.year == int(year))
        ]
        leaves.sort(key=lambda lv: lv.created_at, reverse=True)
        return leaves

    def list_all(
        self,
        *,
        start=None,
        end=None,
        employee_id: Optional[str] = None,
        status=None,
        leave_type=None,
    ) -> list[LeaveRow]:
        criteria = LeaveFilter(
            start=parse_iso_date(start) if start else None,
            end=parse_iso_date(end) if end else None,
            employee_id=str(employee_id) if employee_id else None,
            status=require_enum(RequestStatus, status, "status", code="INVALID_STATUS") if status else None,
            leave_type=require_enum(LeaveType, leave_type, "leave type", code="INVALID_LEAVE_TYPE") if leave_type else None,
        )
        rows = [
            row
            for employee in self._ledger.list_all()
            for row in (LeaveRow(employee_id=employee.employee_id, leave=lv) for lv in employee.leaves)
            if criteria.matches(row)
        ]
        rows.sort(key=lambda row: (row.leave.start_date, row.employee_id))
        return rows
