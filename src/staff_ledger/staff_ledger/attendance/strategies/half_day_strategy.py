from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Clock-out with some hours worked, but fewer than a full day."""

    def decide_clock_in(self, *, clock_in: time, threshold: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PENDING)

    def decide_clock_out(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)
