from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple, TypeVar

from ..common.locks import EmployeeLocks
from ..core.exceptions import NotFoundError, PolicyError
from .model import Employee
from .repository import EmployeeRepository

T = TypeVar("T")


class EmployeeLedger:
    """Use case boundary around one Employee aggregate.

    ``apply`` is the only write path: it takes the employee's lock, loads the
    aggregate, runs a pure change function and stores the result in one
    ``update`` call.
    """

    def __init__(self, employees: EmployeeRepository, locks: Optional[EmployeeLocks] = None):
        self._employees = employees
        self._locks = locks or EmployeeLocks()

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")
        return employee

    def get_active(self, employee_id: str) -> Employee:
        employee = self.get(employee_id)
        if not employee.is_active:
            raise PolicyError(f"Employee account is {employee.status.value}", code="EMPLOYEE_INACTIVE")
        return employee

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def find_by_leave_id(self, leave_id: str) -> Employee:
        employee = self._employees.find_by_leave_id(str(leave_id))
        if not employee:
            raise NotFoundError("Leave request not found", code="LEAVE_NOT_FOUND")
        return employee

    def apply(
        self,
        employee_id: str,
        change: Callable[[Employee], Tuple[Employee, T]],
        *,
        require_active: bool = False,
    ) -> T:
        with self._locks.hold(str(employee_id)):
            employee = self.get_active(employee_id) if require_active else self.get(employee_id)
            updated, result = change(employee)
            if updated is not employee:
                self._employees.update(updated)
            return result
