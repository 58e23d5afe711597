from __future__ import annotations

from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..core.enums import ShiftStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_utc_naive, to_utc_naive
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = "shift_id, employee_id, start_at, end_at, location, status, notes"


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, zone: ZoneInfo):
        self._conn_factory = conn_factory
        self._zone = zone

    def _to_shift(self, r: dict) -> Shift:
        return Shift(
            shift_id=r["shift_id"],
            employee_id=r["employee_id"],
            start=from_utc_naive(r["start_at"], self._zone),
            end=from_utc_naive(r["end_at"], self._zone),
            location=r["location"],
            status=ShiftStatus(r["status"]),
            notes=r.get("notes"),
        )

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=%s", (shift_id,))
            r = fetchone(cur)
            return self._to_shift(r) if r else None

    def add(self, shift: Shift) -> Shift:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO shifts({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    shift.shift_id,
                    shift.employee_id,
                    to_utc_naive(shift.start),
                    to_utc_naive(shift.end),
                    shift.location,
                    shift.status.value,
                    shift.notes,
                ),
            )
        return shift

    def update(self, shift: Shift) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET start_at=%s, end_at=%s, location=%s, status=%s, notes=%s
                WHERE shift_id=%s
                """,
                (
                    to_utc_naive(shift.start),
                    to_utc_naive(shift.end),
                    shift.location,
                    shift.status.value,
                    shift.notes,
                    shift.shift_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, shift_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE shift_id=%s", (shift_id,))
            return cur.rowcount > 0

    def list_all(self, *, employee_id: Optional[str] = None) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            if employee_id:
                cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE employee_id=%s", (employee_id,))
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM shifts")
            return [self._to_shift(r) for r in fetchall(cur)]
