from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class InvalidStrategy(AttendanceStrategy):
    """Clock-out that yields no worked time at all."""

    def decide_clock_in(self, *, clock_in: time, threshold: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PENDING)

    def decide_clock_out(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.INVALID, note="No time worked between clock-in and clock-out")
