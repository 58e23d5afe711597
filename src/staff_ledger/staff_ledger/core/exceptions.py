from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every error carries a stable machine-readable ``code`` next to the
    human-readable message.
    """

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(DomainError):
    """Raised when input data is missing or malformed (caller-fixable)."""

    default_code = "VALIDATION_ERROR"


class StateConflictError(DomainError):
    """Raised when an operation would break a ledger invariant."""

    default_code = "STATE_CONFLICT"


class NotFoundError(DomainError):
    """Raised when an employee, leave, shift or record does not exist."""

    default_code = "NOT_FOUND"


class PolicyError(DomainError):
    """Raised when a business rule rejects an otherwise valid request."""

    default_code = "POLICY_VIOLATION"


class ServerError(DomainError):
    """Raised when the persistence layer fails."""

    default_code = "SERVER_ERROR"
