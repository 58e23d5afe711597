from __future__ import annotations

import time
from dataclasses import replace
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.staff_ledger.staff_ledger.core.enums import EmployeeStatus
from src.staff_ledger.staff_ledger.core.exceptions import StateConflictError
from src.staff_ledger.staff_ledger.employees.model import Employee
from src.staff_ledger.staff_ledger.employees.service import EmployeeLedger
from src.staff_ledger.staff_ledger.shifts.model import Shift

LAGOS = ZoneInfo("Africa/Lagos")


class InMemoryEmployees:
    """Employee repository fake with the same version check as the MySQL one."""

    def __init__(self, *employees: Employee):
        self._items: dict[str, Employee] = {e.employee_id: e for e in employees}
        self.updates = 0
        self.fail_next_update: Optional[Exception] = None
        self.update_delay = 0.0

    def add(self, employee_id: str, status: EmployeeStatus = EmployeeStatus.ACTIVE) -> Employee:
        employee = Employee(employee_id=employee_id, status=status)
        self._items[employee_id] = employee
        return employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._items.get(employee_id)

    def update(self, employee: Employee) -> Employee:
        if self.update_delay:
            time.sleep(self.update_delay)
        if self.fail_next_update is not None:
            error, self.fail_next_update = self.fail_next_update, None
            raise error
        stored = self._items.get(employee.employee_id)
        if stored is None or stored.version != employee.version:
            raise StateConflictError("Employee record was modified concurrently", code="CONCURRENT_UPDATE")
        saved = replace(employee, version=employee.version + 1)
        self._items[employee.employee_id] = saved
        self.updates += 1
        return saved

    def list_all(self):
        return list(self._items.values())

    def find_by_leave_id(self, leave_id: str) -> Optional[Employee]:
        for employee in self._items.values():
            if employee.leave_by_id(leave_id):
                return employee
        return None


class InMemoryShifts:
    def __init__(self):
        self._items: dict[str, Shift] = {}

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        return self._items.get(shift_id)

    def add(self, shift: Shift) -> Shift:
        self._items[shift.shift_id] = shift
        return shift

    def update(self, shift: Shift) -> bool:
        if shift.shift_id not in self._items:
            return False
        self._items[shift.shift_id] = shift
        return True

    def delete(self, shift_id: str) -> bool:
        return self._items.pop(shift_id, None) is not None

    def list_all(self, *, employee_id: Optional[str] = None):
        return [s for s in self._items.values() if employee_id is None or s.employee_id == employee_id]


class RecordingNotifier:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    def notify(self, employee_id, title, message, *, payload=None):
        self.sent.append((employee_id, title, message))


@pytest.fixture
def zone() -> ZoneInfo:
    return LAGOS


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 0, 0, tzinfo=LAGOS)


@pytest.fixture
def employees() -> InMemoryEmployees:
    repo = InMemoryEmployees()
    repo.add("emp-1")
    return repo


@pytest.fixture
def shifts_repo() -> InMemoryShifts:
    return InMemoryShifts()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ledger(employees) -> EmployeeLedger:
    return EmployeeLedger(employees)
