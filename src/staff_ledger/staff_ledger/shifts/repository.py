from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def add(self, shift: Shift) -> Shift:
        raise NotImplementedError

    def update(self, shift: Shift) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: str) -> bool:
        raise NotImplementedError

    def list_all(self, *, employee_id: Optional[str] = None) -> Sequence[Shift]:
        """All shifts (optionally for one employee), unordered."""

        raise NotImplementedError
