from __future__ import annotations

from enum import Enum


class EmployeeStatus(str, Enum):
    """Employment status read from the identity record (never written here)."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    ON_LEAVE = "on leave"


class AttendanceStatus(str, Enum):
    """Status of one attendance day as persisted."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    INVALID = "invalid"
    ABSENT = "absent"
    ON_LEAVE = "on leave"

    @property
    def is_terminal(self) -> bool:
        return self in {
            AttendanceStatus.PRESENT,
            AttendanceStatus.LATE,
            AttendanceStatus.HALF_DAY,
            AttendanceStatus.ABSENT,
            AttendanceStatus.ON_LEAVE,
        }


class CorrectionStatus(str, Enum):
    """Correction marker carried on the attendance record itself."""

    NONE = "none"
    REQUESTED = "requested"
    APPROVED = "approved"
    REJECTED = "rejected"


class CorrectionType(str, Enum):
    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"
    ABSENCE = "absence"


class RequestStatus(str, Enum):
    """Approval workflow status (leave requests, correction requests)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    EMERGENCY = "emergency"


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
