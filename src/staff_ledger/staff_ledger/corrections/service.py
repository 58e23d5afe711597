from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import now_local, parse_iso_date, parse_time, to_local
from ..common.ids import new_id
from ..common.validators import require_enum, require_fields
from ..core.constants import CORRECTION_WINDOW_DAYS, UNRECORDED_LOCATION
from ..core.enums import AttendanceStatus, CorrectionStatus, CorrectionType, RequestStatus
from ..core.exceptions import NotFoundError, PolicyError, StateConflictError
from ..employees.model import Employee
from ..employees.service import EmployeeLedger
from ..notifications.notifier import LoggingNotifier, Notifier
from .model import CorrectionRequest, CorrectionRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrectionSubmission:
    correction: CorrectionRequest
    record: AttendanceRecord

    def as_dict(self) -> dict:
        return {**self.correction.as_dict(), "attendanceRecord": self.record.as_dict()}


class CorrectionService:
    """Employee-submitted attendance corrections and their review.

    The request window is counted in site-local calendar days and is
    inclusive on both ends: ``today - 7 <= date <= today``.
    """

    def __init__(
        self,
        ledger: EmployeeLedger,
        *,
        zone: ZoneInfo,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        notifier: Optional[Notifier] = None,
        window_days: int = CORRECTION_WINDOW_DAYS,
    ):
        self._ledger = ledger
        self._zone = zone
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._notifier = notifier or LoggingNotifier()
        self._window_days = int(window_days)

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self._zone) if now else now_local(self._zone)

    def request_correction(
        self,
        employee_id: str,
        *,
        work_date,
        correction_type,
        reason: Optional[str],
        correct_time: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CorrectionSubmission:
        require_fields(
            "Date, correction type, and reason are required",
            date=work_date,
            correctionType=correction_type,
            reason=reason,
        )
        day = parse_iso_date(work_date)
        kind = require_enum(CorrectionType, correction_type, "correction type", code="INVALID_CORRECTION_TYPE")
        requested_time = parse_time(correct_time) if kind != CorrectionType.ABSENCE else None

        now = self._now(now)
        today = now.date()
        if day < today - timedelta(days=self._window_days):
            raise PolicyError(
                f"Can only request corrections for dates within the last {self._window_days} days",
                code="CORRECTION_TOO_OLD",
            )
        if day > today:
            raise PolicyError("Cannot request corrections for future dates", code="FUTURE_CORRECTION")

        def change(employee: Employee):
            record = employee.attendance_for(day)
            if not record and kind != CorrectionType.ABSENCE:
                raise NotFoundError("No attendance record found for this date", code="NO_ATTENDANCE_RECORD")

            if not record:
                record = AttendanceRecord(
                    record_id=new_id(),
                    work_date=day,
                    clock_in=None,
                    clock_out=None,
                    status=AttendanceStatus.PENDING,
                    location=UNRECORDED_LOCATION,
                    correction_status=CorrectionStatus.REQUESTED,
                    last_updated=now,
                )
            else:
                record = replace(record, correction_status=CorrectionStatus.REQUESTED, last_updated=now)

            correction = CorrectionRequest(
                correction_id=new_id(),
                work_date=day,
                correction_type=kind,
                requested_time=requested_time,
                reason=str(reason).strip(),
                status=RequestStatus.PENDING,
                requested_at=now,
            )
            updated = employee.with_attendance(record).with_correction(correction)
            return updated, CorrectionSubmission(correction=correction, record=record)

        submission = self._ledger.apply(employee_id, change, require_active=True)
        logger.info(f"Correction requested | Employee: {employee_id} | Date: {day} | Type: {kind.value}")
        return submission

    def _pending(self, employee: Employee, correction_id: str) -> CorrectionRequest:
        correction = employee.correction_by_id(correction_id)
        if not correction:
            raise NotFoundError("Correction request not found", code="CORRECTION_NOT_FOUND")
        if correction.status != RequestStatus.PENDING:
            raise StateConflictError("Correction request has already been decided", code="NOT_PENDING")
        return correction

    def approve(
        self,
        employee_id: str,
        *,
        correction_id: str,
        manager_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CorrectionSubmission:
        now = self._now(now)
        note = (manager_note or "").strip() or None

        def change(employee: Employee):
            correction = self._pending(employee, correction_id)
            record = employee.attendance_for(correction.work_date)
            if not record:
                raise NotFoundError("No attendance record found to apply the correction", code="ATTENDANCE_NOT_FOUND")

            clock_in, clock_out = record.clock_in, record.clock_out
            if correction.correction_type == CorrectionType.CLOCK_IN:
                clock_in = correction.requested_time
            elif correction.correction_type == CorrectionType.CLOCK_OUT:
                clock_out = correction.requested_time

            status, hours = self._factory.decide_day(clock_in=clock_in, clock_out=clock_out)
            record = replace(
                record,
                clock_in=clock_in,
                clock_out=clock_out,
                status=status,
                hours_worked=hours,
                correction_status=CorrectionStatus.APPROVED,
                manager_note=note or record.manager_note,
                last_updated=now,
            )
            correction = replace(correction, status=RequestStatus.APPROVED, decided_at=now, manager_note=note)
            updated = employee.with_attendance(record).with_correction(correction)
            return updated, CorrectionSubmission(correction=correction, record=record)

        submission = self._ledger.apply(employee_id, change)
        logger.info(
            f"Correction approved | Employee: {employee_id} | Date: {submission.record.work_date} | Status: {submission.record.status.value}"
        )
        self._notifier.notify(
            str(employee_id),
            "Attendance correction approved",
            f"Your {submission.correction.correction_type.value} correction for {submission.record.work_date} was approved",
            payload={"correctionId": correction_id, "status": submission.record.status.value},
        )
        return submission

    def reject(
        self,
        employee_id: str,
        *,
        correction_id: str,
        manager_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CorrectionRequest:
        now = self._now(now)
        note = (manager_note or "").strip() or None

        def change(employee: Employee):
            correction = self._pending(employee, correction_id)
            correction = replace(correction, status=RequestStatus.REJECTED, decided_at=now, manager_note=note)
            updated = employee.with_correction(correction)
            record = employee.attendance_for(correction.work_date)
            if record:
                updated = updated.with_attendance(
                    replace(record, correction_status=CorrectionStatus.REJECTED, last_updated=now)
                )
            return updated, correction

        correction = self._ledger.apply(employee_id, change)
        logger.info(f"Correction rejected | Employee: {employee_id} | Date: {correction.work_date}")
        self._notifier.notify(
            str(employee_id),
            "Attendance correction rejected",
            f"Your {correction.correction_type.value} correction for {correction.work_date} was rejected",
            payload={"correctionId": correction_id, "managerNote": note},
        )
        return correction

    def list_for_employee(self, employee_id: str, *, status=None) -> list[CorrectionRequest]:
        status_e = require_enum(RequestStatus, status, "status", code="INVALID_STATUS") if status else None
        items = [
            c for c in self._ledger.get(employee_id).correction_requests if status_e is None or c.status == status_e
        ]
        items.sort(key=lambda c: c.requested_at, reverse=True)
        return items

    def list_pending(self) -> list[CorrectionRow]:
        rows = [
            CorrectionRow(employee_id=e.employee_id, correction=c)
            for e in self._ledger.list_all()
            for c in e.correction_requests
            if c.status == RequestStatus.PENDING
        ]
        rows.sort(key=lambda row: row.correction.requested_at)
        return rows
