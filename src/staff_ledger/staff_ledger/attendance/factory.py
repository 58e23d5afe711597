from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional, Tuple

from ..common.datetime_utils import duration_hours
from ..core.constants import FULL_DAY_HOURS, LATE_THRESHOLD
from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.invalid_strategy import InvalidStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    late_threshold: time = LATE_THRESHOLD
    full_day_hours: float = FULL_DAY_HOURS

    def for_clock_in(self, *, clock_in: time) -> AttendanceStrategy:
        if clock_in > self.late_threshold:
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self, *, hours_worked: float, current_status: AttendanceStatus) -> AttendanceStrategy:
        if hours_worked >= self.full_day_hours:
            if current_status == AttendanceStatus.LATE:
                return LateStrategy()
            return NormalStrategy()
        if hours_worked > 0:
            return HalfDayStrategy()
        return InvalidStrategy()

    def decide_day(self, *, clock_in: Optional[time], clock_out: Optional[time]) -> Tuple[AttendanceStatus, float]:
        """Status and hours for a day from its times alone.

        Used when times are set outside the live clock-in/out flow (manual
        entry, approved corrections).
        """
        if clock_in is None:
            return AttendanceStatus.ABSENT, 0.0

        opening = self.for_clock_in(clock_in=clock_in).decide_clock_in(
            clock_in=clock_in, threshold=self.late_threshold
        )
        if clock_out is None:
            return opening.status, 0.0

        hours = duration_hours(clock_in, clock_out)
        closing = self.for_clock_out(hours_worked=hours, current_status=opening.status).decide_clock_out(
            hours_worked=hours, current=opening.status
        )
        return closing.status, hours
