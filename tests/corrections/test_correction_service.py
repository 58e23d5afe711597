from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from src.staff_ledger.staff_ledger.attendance.service import AttendanceService
from src.staff_ledger.staff_ledger.core.enums import AttendanceStatus, CorrectionStatus, RequestStatus
from src.staff_ledger.staff_ledger.core.exceptions import NotFoundError, PolicyError, StateConflictError, ValidationError
from src.staff_ledger.staff_ledger.corrections.service import CorrectionService


@pytest.fixture
def attendance(ledger, zone) -> AttendanceService:
    return AttendanceService(ledger, zone=zone)


@pytest.fixture
def svc(ledger, zone, notifier) -> CorrectionService:
    return CorrectionService(ledger, zone=zone, notifier=notifier)


def _days_ago(now, days: int) -> str:
    return (now.date() - timedelta(days=days)).isoformat()


def test_absence_correction_seven_days_back_is_accepted(svc, ledger, fixed_now):
    submission = svc.request_correction(
        "emp-1", work_date=_days_ago(fixed_now, 7), correction_type="absence", reason="Was at the depot", now=fixed_now
    )

    assert submission.correction.status == RequestStatus.PENDING
    assert submission.record.status == AttendanceStatus.PENDING
    assert submission.record.location == "Not recorded"
    assert ledger.get("emp-1").attendance_for(date(2024, 1, 3)).correction_status == CorrectionStatus.REQUESTED


def test_correction_eight_days_back_is_too_old(svc, fixed_now):
    with pytest.raises(PolicyError) as exc:
        svc.request_correction(
            "emp-1", work_date=_days_ago(fixed_now, 8), correction_type="absence", reason="Forgot", now=fixed_now
        )
    assert exc.value.code == "CORRECTION_TOO_OLD"


def test_future_correction_rejected(svc, fixed_now):
    with pytest.raises(PolicyError) as exc:
        svc.request_correction(
            "emp-1", work_date=_days_ago(fixed_now, -1), correction_type="absence", reason="Plan", now=fixed_now
        )
    assert exc.value.code == "FUTURE_CORRECTION"


def test_missing_reason(svc, fixed_now):
    with pytest.raises(ValidationError) as exc:
        svc.request_correction("emp-1", work_date="2024-01-09", correction_type="clock-in", reason="", now=fixed_now)
    assert exc.value.code == "MISSING_FIELDS"


def test_unknown_correction_type(svc, fixed_now):
    with pytest.raises(ValidationError) as exc:
        svc.request_correction("emp-1", work_date="2024-01-09", correction_type="lunch", reason="x", now=fixed_now)
    assert exc.value.code == "INVALID_CORRECTION_TYPE"


def test_time_correction_needs_existing_record(svc, fixed_now):
    with pytest.raises(NotFoundError) as exc:
        svc.request_correction(
            "emp-1",
            work_date="2024-01-09",
            correction_type="clock-in",
            correct_time="09:00",
            reason="Scanner down",
            now=fixed_now,
        )
    assert exc.value.code == "NO_ATTENDANCE_RECORD"


def test_approve_clock_in_correction_recomputes_status(svc, attendance, notifier, fixed_now):
    attendance.record_manual("emp-1", work_date="2024-01-09", clock_in="09:30", clock_out="17:30", now=fixed_now)
    submission = svc.request_correction(
        "emp-1",
        work_date="2024-01-09",
        correction_type="clock-in",
        correct_time="09:00",
        reason="Scanner down",
        now=fixed_now,
    )

    approved = svc.approve("emp-1", correction_id=submission.correction.correction_id, now=fixed_now)

    assert approved.record.clock_in == time(9, 0)
    assert approved.record.status == AttendanceStatus.PRESENT
    assert approved.record.hours_worked == 8.5
    assert approved.record.correction_status == CorrectionStatus.APPROVED
    assert approved.correction.status == RequestStatus.APPROVED
    assert notifier.sent[-1][0] == "emp-1"


def test_approved_absence_without_times_is_absent(svc, fixed_now):
    submission = svc.request_correction(
        "emp-1", work_date="2024-01-08", correction_type="absence", reason="Sick", now=fixed_now
    )
    approved = svc.approve("emp-1", correction_id=submission.correction.correction_id, now=fixed_now)
    assert approved.record.status == AttendanceStatus.ABSENT


def test_reject_marks_record_and_request(svc, attendance, ledger, fixed_now):
    attendance.record_manual("emp-1", work_date="2024-01-09", clock_in="09:30", clock_out="17:30", now=fixed_now)
    submission = svc.request_correction(
        "emp-1",
        work_date="2024-01-09",
        correction_type="clock-out",
        correct_time="18:00",
        reason="Stayed late",
        now=fixed_now,
    )

    rejected = svc.reject(
        "emp-1", correction_id=submission.correction.correction_id, manager_note="No evidence", now=fixed_now
    )

    assert rejected.status == RequestStatus.REJECTED
    record = ledger.get("emp-1").attendance_for(date(2024, 1, 9))
    assert record.correction_status == CorrectionStatus.REJECTED
    assert record.clock_out == time(17, 30)


def test_decided_request_cannot_be_decided_again(svc, fixed_now):
    submission = svc.request_correction(
        "emp-1", work_date="2024-01-08", correction_type="absence", reason="Sick", now=fixed_now
    )
    svc.reject("emp-1", correction_id=submission.correction.correction_id, now=fixed_now)

    with pytest.raises(StateConflictError) as exc:
        svc.approve("emp-1", correction_id=submission.correction.correction_id, now=fixed_now)
    assert exc.value.code == "NOT_PENDING"


def test_pending_queue_and_employee_listing(svc, employees, fixed_now):
    employees.add("emp-2")
    svc.request_correction("emp-1", work_date="2024-01-08", correction_type="absence", reason="a", now=fixed_now)
    svc.request_correction(
        "emp-2", work_date="2024-01-09", correction_type="absence", reason="b", now=fixed_now + timedelta(minutes=1)
    )

    assert [row.employee_id for row in svc.list_pending()] == ["emp-1", "emp-2"]
    assert len(svc.list_for_employee("emp-1", status="pending")) == 1
    assert svc.list_for_employee("emp-1", status="approved") == []
