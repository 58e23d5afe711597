from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for the Employee aggregate.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def update(self, employee: Employee) -> Employee:
        """Persist the whole aggregate atomically.

        Returns the stored aggregate (with its version bumped). Raises
        StateConflictError(code="CONCURRENT_UPDATE") when the stored version
        no longer matches ``employee.version``.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def find_by_leave_id(self, leave_id: str) -> Optional[Employee]:
        raise NotImplementedError
