from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time clock-in, full-day clock-out."""

    def decide_clock_in(self, *, clock_in: time, threshold: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.IN_PROGRESS)

    def decide_clock_out(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
