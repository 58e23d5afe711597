from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..attendance.model import AttendanceRecord
from ..core.enums import (
    AttendanceStatus,
    CorrectionStatus,
    CorrectionType,
    EmployeeStatus,
    LeaveType,
    RequestStatus,
)
from ..core.exceptions import StateConflictError
from ..corrections.model import CorrectionRequest
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_utc_naive, normalize_mysql_time, to_utc_naive
from ..leaves.model import LeaveRequest
from .model import Employee
from .repository import EmployeeRepository

_CHILD_TABLES = ("attendance_records", "leave_requests", "correction_requests", "employee_planned_shifts")


class MySQLEmployeeRepository(EmployeeRepository):
    """Stores the Employee aggregate across one parent row and four child tables.

    ``update`` rewrites every child row inside a single transaction guarded by
    the ``version`` column.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, zone: ZoneInfo):
        self._conn_factory = conn_factory
        self._zone = zone

    def _attendance(self, r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=r["record_id"],
            work_date=r["work_date"],
            clock_in=normalize_mysql_time(r.get("clock_in")),
            clock_out=normalize_mysql_time(r.get("clock_out")),
            status=AttendanceStatus(r["status"]),
            location=r["location"],
            hours_worked=float(r.get("hours_worked") or Decimal("0")),
            notes=r.get("notes") or "",
            manager_note=r.get("manager_note"),
            correction_status=CorrectionStatus(r.get("correction_status") or "none"),
            last_updated=from_utc_naive(r.get("last_updated"), self._zone),
        )

    def _leave(self, r: dict) -> LeaveRequest:
        return LeaveRequest(
            leave_id=r["leave_id"],
            start_date=r["start_date"],
            end_date=r["end_date"],
            leave_type=LeaveType(r["leave_type"]),
            status=RequestStatus(r["status"]),
            created_at=from_utc_naive(r["created_at"], self._zone),
            notes=r.get("notes") or "",
        )

    def _correction(self, r: dict) -> CorrectionRequest:
        return CorrectionRequest(
            correction_id=r["correction_id"],
            work_date=r["work_date"],
            correction_type=CorrectionType(r["correction_type"]),
            requested_time=normalize_mysql_time(r.get("requested_time")),
            reason=r["reason"],
            status=RequestStatus(r["status"]),
            requested_at=from_utc_naive(r["requested_at"], self._zone),
            decided_at=from_utc_naive(r.get("decided_at"), self._zone),
            manager_note=r.get("manager_note"),
        )

    def _load(self, cur, employee_rows: list[dict]) -> list[Employee]:
        if not employee_rows:
            return []

        ids = [r["employee_id"] for r in employee_rows]
        placeholders = ",".join(["%s"] * len(ids))
        children: dict[str, dict[str, list]] = defaultdict(lambda: defaultdict(list))

        cur.execute(f"SELECT * FROM attendance_records WHERE employee_id IN ({placeholders}) ORDER BY work_date", ids)
        for r in fetchall(cur):
            children[r["employee_id"]]["attendance"].append(self._attendance(r))

        cur.execute(f"SELECT * FROM leave_requests WHERE employee_id IN ({placeholders}) ORDER BY created_at", ids)
        for r in fetchall(cur):
            children[r["employee_id"]]["leaves"].append(self._leave(r))

        cur.execute(
            f"SELECT * FROM correction_requests WHERE employee_id IN ({placeholders}) ORDER BY requested_at", ids
        )
        for r in fetchall(cur):
            children[r["employee_id"]]["corrections"].append(self._correction(r))

        cur.execute(
            f"SELECT employee_id, shift_id FROM employee_planned_shifts WHERE employee_id IN ({placeholders}) ORDER BY position",
            ids,
        )
        for r in fetchall(cur):
            children[r["employee_id"]]["shifts"].append(r["shift_id"])

        out = []
        for r in employee_rows:
            owned = children[r["employee_id"]]
            out.append(
                Employee(
                    employee_id=r["employee_id"],
                    status=EmployeeStatus(r["status"]),
                    attendance=tuple(owned["attendance"]),
                    leaves=tuple(owned["leaves"]),
                    correction_requests=tuple(owned["corrections"]),
                    planned_shift_ids=tuple(owned["shifts"]),
                    version=int(r["version"]),
                )
            )
        return out

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, status, version FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            if not r:
                return None
            return self._load(cur, [r])[0]

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, status, version FROM employees ORDER BY employee_id")
            return self._load(cur, fetchall(cur))

    def find_by_leave_id(self, leave_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM leave_requests WHERE leave_id=%s", (leave_id,))
            r = fetchone(cur)
        return self.get_by_id(r["employee_id"]) if r else None

    def update(self, employee: Employee) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET version=version+1 WHERE employee_id=%s AND version=%s",
                (employee.employee_id, employee.version),
            )
            if cur.rowcount == 0:
                raise StateConflictError(
                    "Employee record was modified concurrently, retry the request", code="CONCURRENT_UPDATE"
                )

            for table in _CHILD_TABLES:
                cur.execute(f"DELETE FROM {table} WHERE employee_id=%s", (employee.employee_id,))

            if employee.attendance:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(
                        record_id, employee_id, work_date, clock_in, clock_out, status, location,
                        hours_worked, notes, manager_note, correction_status, last_updated
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            r.record_id,
                            employee.employee_id,
                            r.work_date,
                            r.clock_in,
                            r.clock_out,
                            r.status.value,
                            r.location,
                            r.hours_worked,
                            r.notes or None,
                            r.manager_note,
                            r.correction_status.value,
                            to_utc_naive(r.last_updated) if r.last_updated else None,
                        )
                        for r in employee.attendance
                    ],
                )

            if employee.leaves:
                cur.executemany(
                    """
                    INSERT INTO leave_requests(leave_id, employee_id, start_date, end_date, leave_type, status, notes, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            lv.leave_id,
                            employee.employee_id,
                            lv.start_date,
                            lv.end_date,
                            lv.leave_type.value,
                            lv.status.value,
                            lv.notes or None,
                            to_utc_naive(lv.created_at),
                        )
                        for lv in employee.leaves
                    ],
                )

            if employee.correction_requests:
                cur.executemany(
                    """
                    INSERT INTO correction_requests(
                        correction_id, employee_id, work_date, correction_type, requested_time,
                        reason, status, requested_at, decided_at, manager_note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            c.correction_id,
                            employee.employee_id,
                            c.work_date,
                            c.correction_type.value,
                            c.requested_time,
                            c.reason,
                            c.status.value,
                            to_utc_naive(c.requested_at),
                            to_utc_naive(c.decided_at) if c.decided_at else None,
                            c.manager_note,
                        )
                        for c in employee.correction_requests
                    ],
                )

            if employee.planned_shift_ids:
                cur.executemany(
                    "INSERT INTO employee_planned_shifts(employee_id, shift_id, position) VALUES(%s,%s,%s)",
                    [(employee.employee_id, shift_id, i) for i, shift_id in enumerate(employee.planned_shift_ids)],
                )

        return replace(employee, version=employee.version + 1)
