from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, *, clock_in: time, threshold: time) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
