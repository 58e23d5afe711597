from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class EmployeeLocks:
    """Per-employee critical sections for read-modify-write of one aggregate.

    Two requests for the same employee run one after the other; requests for
    different employees never block each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, employee_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[employee_id] = lock
            return lock

    @contextmanager
    def hold(self, employee_id: str) -> Iterator[None]:
        lock = self._lock_for(str(employee_id))
        with lock:
            yield
