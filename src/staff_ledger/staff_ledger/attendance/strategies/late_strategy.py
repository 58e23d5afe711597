from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Clock-in after the late threshold; a full day keeps the late mark."""

    def decide_clock_in(self, *, clock_in: time, threshold: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Clocked in after {threshold.strftime('%H:%M')}")

    def decide_clock_out(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)
