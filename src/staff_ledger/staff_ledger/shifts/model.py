from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class Shift:
    """Domain entity: a planned shift (not actual attendance).

    ``start`` and ``end`` are timezone-aware instants.
    """

    shift_id: str
    employee_id: str
    start: datetime
    end: datetime
    location: str
    status: ShiftStatus = ShiftStatus.SCHEDULED
    notes: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "employeeId": self.employee_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "location": self.location,
            "status": self.status.value,
            "notes": self.notes,
        }
