from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Outbound channel towards the employee (email, push, ...)."""

    def notify(self, employee_id: str, title: str, message: str, *, payload: Optional[dict[str, Any]] = None) -> None:
        raise NotImplementedError


class LoggingNotifier:
    """Default notifier: writes the notification to the application log."""

    def notify(self, employee_id: str, title: str, message: str, *, payload: Optional[dict[str, Any]] = None) -> None:
        log_message = f"Notify: {title} | Employee: {employee_id} | {message}"
        if payload:
            log_message += f" | Details: {payload}"
        logger.info(log_message)
