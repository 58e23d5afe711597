from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import combine, now_local, parse_iso_date, parse_shift_time, to_local
from ..common.ids import new_id
from ..common.validators import require_enum, require_fields
from ..core.constants import DASHBOARD_UPCOMING_SHIFTS, DEFAULT_LOCATION
from ..core.enums import ShiftStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeLedger
from ..notifications.notifier import LoggingNotifier, Notifier
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftService:
    """Planned shifts. A shift lives in its own repository and is referenced
    from the owning employee's planned-shift list.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        ledger: EmployeeLedger,
        *,
        zone: ZoneInfo,
        notifier: Optional[Notifier] = None,
    ):
        self._shifts = shifts
        self._ledger = ledger
        self._zone = zone
        self._notifier = notifier or LoggingNotifier()

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self._zone) if now else now_local(self._zone)

    def _compose(self, start_date, start_time, end_date, end_time) -> tuple[datetime, datetime]:
        start = combine(parse_iso_date(start_date), parse_shift_time(start_time), self._zone)
        end = combine(parse_iso_date(end_date), parse_shift_time(end_time), self._zone)
        if start > end:
            raise ValidationError("Shift end must be after shift start", code="INVALID_CHRONOLOGY")
        return start, end

    def create_shift(
        self,
        employee_id: str,
        *,
        start_date,
        start_time,
        end_date,
        end_time,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Shift:
        require_fields(
            "Employee, start and end date/time are required",
            employeeId=employee_id,
            startDate=start_date,
            startTime=start_time,
            endDate=end_date,
            endTime=end_time,
        )
        start, end = self._compose(start_date, start_time, end_date, end_time)
        employee = self._ledger.get(employee_id)

        shift = self._shifts.add(
            Shift(
                shift_id=new_id(),
                employee_id=employee.employee_id,
                start=start,
                end=end,
                location=location.strip() if location and location.strip() else DEFAULT_LOCATION,
                notes=notes.strip() if notes else None,
            )
        )

        def change(emp: Employee):
            return emp.with_planned_shift(shift.shift_id), None

        try:
            self._ledger.apply(employee.employee_id, change)
        except Exception:
            self._shifts.delete(shift.shift_id)
            logger.error(f"Shift creation rolled back | Employee: {employee.employee_id} | Shift: {shift.shift_id}")
            raise

        logger.info(f"Shift created | Employee: {employee.employee_id} | {start.isoformat()} - {end.isoformat()}")
        self._notifier.notify(
            employee.employee_id,
            "New shift scheduled",
            f"You are scheduled at {shift.location} from {start.strftime('%Y-%m-%d %H:%M')} to {end.strftime('%Y-%m-%d %H:%M')}",
            payload={"shiftId": shift.shift_id},
        )
        return shift

    def get_shift(self, shift_id: str) -> Shift:
        shift = self._shifts.get_by_id(str(shift_id))
        if not shift:
            raise NotFoundError("Shift not found", code="SHIFT_NOT_FOUND")
        return shift

    def update_shift(
        self,
        shift_id: str,
        *,
        start_date=None,
        start_time=None,
        end_date=None,
        end_time=None,
        location: Optional[str] = None,
        status=None,
        notes: Optional[str] = None,
    ) -> Shift:
        shift = self.get_shift(shift_id)
        updated = shift

        if any(v for v in (start_date, start_time, end_date, end_time)):
            local_start = shift.start.astimezone(self._zone)
            local_end = shift.end.astimezone(self._zone)
            start, end = self._compose(
                start_date or local_start.date(),
                start_time or local_start.strftime("%H:%M"),
                end_date or local_end.date(),
                end_time or local_end.strftime("%H:%M"),
            )
            updated = replace(updated, start=start, end=end)

        if status:
            updated = replace(updated, status=require_enum(ShiftStatus, status, "shift status", code="INVALID_STATUS"))
        if location and location.strip():
            updated = replace(updated, location=location.strip())
        if notes is not None:
            updated = replace(updated, notes=notes.strip() or None)

        if updated != shift and not self._shifts.update(updated):
            raise NotFoundError("Shift not found", code="SHIFT_NOT_FOUND")

        logger.info(f"Shift updated | Shift: {shift_id} | Status: {updated.status.value}")
        return updated

    def delete_shift(self, shift_id: str) -> None:
        shift = self.get_shift(shift_id)
        if not self._shifts.delete(shift.shift_id):
            raise NotFoundError("Shift not found", code="SHIFT_NOT_FOUND")

        def change(employee: Employee):
            if shift.shift_id not in employee.planned_shift_ids:
                return employee, None
            return employee.without_planned_shift(shift.shift_id), None

        try:
            self._ledger.apply(shift.employee_id, change)
        except NotFoundError:
            logger.warning(f"Shift deleted for missing employee | Employee: {shift.employee_id} | Shift: {shift_id}")
            return
        except Exception:
            self._shifts.add(shift)
            logger.error(f"Shift deletion rolled back | Employee: {shift.employee_id} | Shift: {shift_id}")
            raise

        logger.info(f"Shift deleted | Employee: {shift.employee_id} | Shift: {shift_id}")

    def list_shifts(
        self,
        *,
        employee_id: Optional[str] = None,
        start=None,
        end=None,
        statuses: Optional[Iterable] = None,
    ) -> list[Shift]:
        """Shifts whose site-local start day lies within [start, end]."""
        start_d = parse_iso_date(start) if start else None
        end_d = parse_iso_date(end) if end else None
        wanted = (
            {require_enum(ShiftStatus, s, "shift status", code="INVALID_STATUS") for s in statuses}
            if statuses
            else None
        )

        out = []
        for shift in self._shifts.list_all(employee_id=str(employee_id) if employee_id else None):
            day = shift.start.astimezone(self._zone).date()
            if start_d and day < start_d:
                continue
            if end_d and day > end_d:
                continue
            if wanted and shift.status not in wanted:
                continue
            out.append(shift)
        out.sort(key=lambda s: s.start)
        return out

    def schedule_for(self, employee_id: str, *, start=None, end=None) -> list[Shift]:
        self._ledger.get(employee_id)
        active = [s for s in ShiftStatus if s != ShiftStatus.CANCELLED]
        return self.list_shifts(employee_id=employee_id, start=start, end=end, statuses=active)

    def upcoming_for(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        limit: int = DASHBOARD_UPCOMING_SHIFTS,
    ) -> list[Shift]:
        now = self._now(now)
        upcoming = [
            s
            for s in self.list_shifts(employee_id=employee_id, statuses=[ShiftStatus.SCHEDULED])
            if s.start > now
        ]
        return upcoming[:limit]

    def todays_shift(self, employee_id: str, *, now: Optional[datetime] = None) -> Optional[Shift]:
        today = self._now(now).date()
        shifts = self.schedule_for(employee_id, start=today, end=today)
        return shifts[0] if shifts else None
