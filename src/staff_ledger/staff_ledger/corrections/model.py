from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_date, format_time
from ..core.enums import CorrectionType, RequestStatus


@dataclass(frozen=True)
class CorrectionRequest:
    correction_id: str
    work_date: date
    correction_type: CorrectionType
    requested_time: Optional[time]
    reason: str
    status: RequestStatus
    requested_at: datetime
    decided_at: Optional[datetime] = None
    manager_note: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.correction_id,
            "date": format_date(self.work_date),
            "type": self.correction_type.value,
            "correctTime": format_time(self.requested_time),
            "reason": self.reason,
            "status": self.status.value,
            "requestedAt": self.requested_at.isoformat(),
            "decidedAt": self.decided_at.isoformat() if self.decided_at else None,
            "managerNote": self.manager_note,
        }


@dataclass(frozen=True)
class CorrectionRow:
    """Read-model for the cross-employee review queue."""

    employee_id: str
    correction: CorrectionRequest

    def as_dict(self) -> dict:
        return {"employeeId": self.employee_id, **self.correction.as_dict()}
