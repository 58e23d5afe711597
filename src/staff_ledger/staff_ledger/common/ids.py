from __future__ import annotations

import uuid


def new_id() -> str:
    """Opaque identifier for entries owned by an employee aggregate."""
    return uuid.uuid4().hex
