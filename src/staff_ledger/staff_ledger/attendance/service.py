from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import (
    clock_out_instant,
    combine,
    duration_hours,
    now_local,
    parse_iso_date,
    parse_time,
    to_local,
)
from ..common.datetime_utils import today as site_today
from ..common.ids import new_id
from ..common.validators import require_enum
from ..core.constants import MIN_SHIFT_DURATION_MINUTES, MIN_SHIFT_INTERVAL_HOURS, UNRECORDED_LOCATION
from ..core.enums import AttendanceStatus, CorrectionStatus, RequestStatus
from ..core.exceptions import NotFoundError, PolicyError, StateConflictError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeLedger
from ..stats.calculator import AttendanceStats, AttendanceStatsCalculator
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceView:
    records: list[AttendanceRecord]
    stats: AttendanceStats
    pending_corrections: int

    def as_dict(self) -> dict:
        return {
            "records": [r.as_dict() for r in self.records],
            "stats": self.stats.as_dict(),
            "pendingCorrections": self.pending_corrections,
        }


class AttendanceService:
    def __init__(
        self,
        ledger: EmployeeLedger,
        *,
        zone: ZoneInfo,
        strategy_factory: AttendanceStrategyFactory | None = None,
        calculator: AttendanceStatsCalculator | None = None,
        min_shift_interval_hours: float = MIN_SHIFT_INTERVAL_HOURS,
        min_shift_duration_minutes: int = MIN_SHIFT_DURATION_MINUTES,
    ):
        self._ledger = ledger
        self._zone = zone
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._calculator = calculator or AttendanceStatsCalculator()
        self._min_interval_hours = float(min_shift_interval_hours)
        self._min_duration_minutes = int(min_shift_duration_minutes)

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self._zone) if now else now_local(self._zone)

    def _last_clock_out(self, employee: Employee, today: date) -> Optional[datetime]:
        finished = [r for r in employee.attendance if r.clock_in and r.clock_out and r.work_date <= today]
        if not finished:
            return None
        last = max(finished, key=lambda r: r.work_date)
        return clock_out_instant(last.work_date, last.clock_in, last.clock_out, self._zone)

    def clock_in(
        self,
        employee_id: str,
        *,
        location: Optional[str],
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = self._now(now)
        today = now.date()
        current_time = now.time().replace(microsecond=0, tzinfo=None)

        def change(employee: Employee):
            existing = employee.attendance_for(today)
            if existing and existing.clock_in:
                raise StateConflictError("You have already clocked in today", code="ALREADY_CLOCKED_IN")

            last_out = self._last_clock_out(employee, today)
            if last_out is not None:
                hours_since = (now - last_out).total_seconds() / 3600
                if hours_since < self._min_interval_hours:
                    remaining = self._min_interval_hours - hours_since
                    logger.warning(f"Clock-in rejected | Employee: {employee.employee_id} | Rest remaining: {remaining:.1f}h")
                    raise PolicyError(
                        f"You must wait at least {self._min_interval_hours:g} hours between shifts "
                        f"({remaining:.1f} hours remaining)",
                        code="MIN_SHIFT_INTERVAL",
                    )

            if not location or not str(location).strip():
                raise ValidationError("Location is required for clock-in", code="LOCATION_REQUIRED")

            decision = self._factory.for_clock_in(clock_in=current_time).decide_clock_in(
                clock_in=current_time, threshold=self._factory.late_threshold
            )
            if decision.note:
                logger.info(f"Clock-in flagged | Employee: {employee.employee_id} | {decision.note}")
            record = AttendanceRecord(
                record_id=existing.record_id if existing else new_id(),
                work_date=today,
                clock_in=current_time,
                clock_out=None,
                status=decision.status,
                location=str(location).strip(),
                hours_worked=0.0,
                notes=(notes or "").strip(),
                correction_status=existing.correction_status if existing else CorrectionStatus.NONE,
                last_updated=now,
            )
            return employee.with_attendance(record), record

        record = self._ledger.apply(employee_id, change, require_active=True)
        logger.info(f"Clock-in | Employee: {employee_id} | Date: {today} | Status: {record.status.value}")
        return record

    def clock_out(
        self,
        employee_id: str,
        *,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = self._now(now)
        today = now.date()
        current_time = now.time().replace(microsecond=0, tzinfo=None)

        def change(employee: Employee):
            record = employee.attendance_for(today)
            if not record or record.clock_in is None:
                raise StateConflictError("Clock in first before clocking out", code="NO_CLOCK_IN_RECORD")
            if record.clock_out is not None:
                raise StateConflictError("Already clocked out today", code="ALREADY_CLOCKED_OUT")

            started = combine(record.work_date, record.clock_in, self._zone)
            elapsed_minutes = int((now - started).total_seconds() // 60)
            if elapsed_minutes < self._min_duration_minutes:
                raise PolicyError(
                    f"Minimum shift duration is {self._min_duration_minutes} minutes",
                    code="MIN_SHIFT_DURATION",
                )

            hours = duration_hours(record.clock_in, current_time)
            decision = self._factory.for_clock_out(hours_worked=hours, current_status=record.status).decide_clock_out(
                hours_worked=hours, current=record.status
            )
            if decision.note:
                logger.warning(f"Clock-out flagged | Employee: {employee.employee_id} | {decision.note}")
            updated = replace(
                record,
                clock_out=current_time,
                hours_worked=hours,
                status=decision.status,
                notes=notes.strip() if notes else record.notes,
                last_updated=now,
            )
            return employee.with_attendance(updated), updated

        record = self._ledger.apply(employee_id, change, require_active=True)
        logger.info(
            f"Clock-out | Employee: {employee_id} | Date: {today} | Hours: {record.hours_worked:.2f} | Status: {record.status.value}"
        )
        return record

    def override_status(
        self,
        employee_id: str,
        *,
        work_date,
        status,
        manager_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Administrative override: set status/note directly, bypassing the state machine."""
        work_date = parse_iso_date(work_date)
        status = require_enum(AttendanceStatus, status, "attendance status", code="INVALID_STATUS")
        now = self._now(now)

        def change(employee: Employee):
            record = employee.attendance_for(work_date)
            if not record:
                raise NotFoundError("Attendance record not found", code="ATTENDANCE_NOT_FOUND")
            updated = replace(
                record,
                status=status,
                manager_note=manager_note.strip() if manager_note else record.manager_note,
                last_updated=now,
            )
            return employee.with_attendance(updated), updated

        record = self._ledger.apply(employee_id, change)
        logger.info(f"Attendance override | Employee: {employee_id} | Date: {work_date} | Status: {status.value}")
        return record

    def record_manual(
        self,
        employee_id: str,
        *,
        work_date,
        clock_in=None,
        clock_out=None,
        notes: Optional[str] = None,
        location: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Administrative entry of a day's times; status is recomputed from the times."""
        work_date = parse_iso_date(work_date)
        new_in = parse_time(clock_in) if clock_in else None
        new_out = parse_time(clock_out) if clock_out else None
        now = self._now(now)

        def change(employee: Employee):
            existing = employee.attendance_for(work_date)
            base = existing or AttendanceRecord(
                record_id=new_id(),
                work_date=work_date,
                clock_in=None,
                clock_out=None,
                status=AttendanceStatus.ABSENT,
                location=UNRECORDED_LOCATION,
            )
            effective_in = new_in or base.clock_in
            effective_out = new_out or base.clock_out
            if effective_out and not effective_in:
                raise ValidationError("Clock-out requires a clock-in time", code="MISSING_FIELDS")

            status, hours = self._factory.decide_day(clock_in=effective_in, clock_out=effective_out)
            record = replace(
                base,
                clock_in=effective_in,
                clock_out=effective_out,
                status=status,
                hours_worked=hours,
                location=location.strip() if location else base.location,
                notes=notes.strip() if notes else base.notes,
                last_updated=now,
            )
            return employee.with_attendance(record), record

        record = self._ledger.apply(employee_id, change)
        logger.info(f"Attendance recorded | Employee: {employee_id} | Date: {work_date} | Status: {record.status.value}")
        return record

    def delete_record(self, employee_id: str, *, record_id: str) -> None:
        def change(employee: Employee):
            if not employee.attendance_by_id(record_id):
                raise NotFoundError("Attendance record not found or already deleted", code="ATTENDANCE_NOT_FOUND")
            return employee.without_attendance(record_id), None

        self._ledger.apply(employee_id, change)
        logger.info(f"Attendance deleted | Employee: {employee_id} | Record: {record_id}")

    def get_today_record(self, employee_id: str, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        return self._ledger.get(employee_id).attendance_for(self._now(now).date())

    def get_attendance(
        self,
        employee_id: str,
        *,
        start=None,
        end=None,
        status=None,
        today: Optional[date] = None,
    ) -> AttendanceView:
        start_d = parse_iso_date(start) if start else None
        end_d = parse_iso_date(end) if end else None
        status_e = require_enum(AttendanceStatus, status, "attendance status", code="INVALID_STATUS") if status else None
        today = today or site_today(self._zone)

        employee = self._ledger.get(employee_id)
        records = [
            r
            for r in employee.attendance
            if (start_d is None or r.work_date >= start_d)
            and (end_d is None or r.work_date <= end_d)
            and (status_e is None or r.status == status_e)
        ]
        records.sort(key=lambda r: r.work_date, reverse=True)

        pending = sum(1 for c in employee.correction_requests if c.status == RequestStatus.PENDING)
        return AttendanceView(
            records=records,
            stats=self._calculator.summarize(records, today=today),
            pending_corrections=pending,
        )

    def list_all(self, *, start=None, end=None, employee_id: Optional[str] = None, status=None) -> list[AttendanceRow]:
        start_d = parse_iso_date(start) if start else None
        end_d = parse_iso_date(end) if end else None
        status_e = require_enum(AttendanceStatus, status, "attendance status", code="INVALID_STATUS") if status else None

        rows: list[AttendanceRow] = []
        for employee in self._ledger.list_all():
            if employee_id and employee.employee_id != str(employee_id):
                continue
            for r in employee.attendance:
                if start_d and r.work_date < start_d:
                    continue
                if end_d and r.work_date > end_d:
                    continue
                if status_e and r.status != status_e:
                    continue
                rows.append(AttendanceRow(employee_id=employee.employee_id, record=r))

        rows.sort(key=lambda row: row.record.work_date, reverse=True)
        return rows
