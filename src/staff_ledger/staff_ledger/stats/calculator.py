from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import duration_hours
from ..core.constants import DASHBOARD_CHART_DAYS
from ..core.enums import AttendanceStatus, CorrectionStatus


def effective_status(record: AttendanceRecord, today: date) -> AttendanceStatus:
    """Read-time status: a past day that never reached a terminal status is absent."""
    if record.status.is_terminal or record.status == AttendanceStatus.IN_PROGRESS:
        return record.status
    if record.work_date < today:
        return AttendanceStatus.ABSENT
    return record.status


def record_hours(record: AttendanceRecord) -> float:
    if record.clock_in and record.clock_out:
        return duration_hours(record.clock_in, record.clock_out)
    return 0.0


@dataclass(frozen=True)
class AttendanceStats:
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    half_days: int
    in_progress_days: int
    correction_days: int
    total_hours: float
    attendance_rate: float

    def as_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "lateDays": self.late_days,
            "absentDays": self.absent_days,
            "halfDays": self.half_days,
            "inProgressDays": self.in_progress_days,
            "correctionDays": self.correction_days,
            "totalHours": self.total_hours,
            "attendanceRate": self.attendance_rate,
        }


class AttendanceStatsCalculator:
    """Pure aggregation over a read-only slice of attendance records."""

    def summarize(self, records: Sequence[AttendanceRecord], *, today: date) -> AttendanceStats:
        counts = {status: 0 for status in AttendanceStatus}
        correction_days = 0
        total_hours = 0.0

        for r in records:
            if r.correction_status == CorrectionStatus.REQUESTED:
                correction_days += 1
            counts[effective_status(r, today)] += 1
            total_hours += record_hours(r)

        total = len(records)
        attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE] + counts[AttendanceStatus.HALF_DAY]
        rate = round(attended / total * 100, 2) if total else 0

        return AttendanceStats(
            total_days=total,
            present_days=counts[AttendanceStatus.PRESENT],
            late_days=counts[AttendanceStatus.LATE],
            absent_days=counts[AttendanceStatus.ABSENT],
            half_days=counts[AttendanceStatus.HALF_DAY],
            in_progress_days=counts[AttendanceStatus.IN_PROGRESS],
            correction_days=correction_days,
            total_hours=round(total_hours, 2),
            attendance_rate=rate,
        )

    def chart(
        self,
        records: Iterable[AttendanceRecord],
        *,
        today: date,
        days: int = DASHBOARD_CHART_DAYS,
    ) -> list[dict]:
        """Rolling per-day hours, oldest first, ending with ``today``."""
        by_date = {r.work_date: r for r in records}
        out: list[dict] = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            record = by_date.get(day)
            out.append(
                {
                    "date": f"{day.strftime('%b')} {day.day}",
                    "day": day.strftime("%a"),
                    "fullDate": day.strftime("%Y-%m-%d"),
                    "hours": record_hours(record) if record else 0,
                }
            )
        return out
