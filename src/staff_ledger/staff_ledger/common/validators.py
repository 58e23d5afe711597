from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_fields(message: str, **fields) -> None:
    """Fail with MISSING_FIELDS when any of the given values is empty."""
    missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
    if missing:
        raise ValidationError(f"{message} (missing: {', '.join(missing)})", code="MISSING_FIELDS")


def require_enum(enum_cls: Type[E], value, field_name: str, *, code: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name} (expected one of: {allowed})", code=code)
