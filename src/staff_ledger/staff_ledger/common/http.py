from __future__ import annotations

from typing import Any

from flask import jsonify, request


def json_body() -> dict:
    """Request JSON as a dict; missing or malformed bodies read as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def ok(data: Any = None, *, status: int = 200, message: str | None = None):
    payload: dict[str, Any] = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return jsonify(payload), status


def query_list(name: str) -> list[str]:
    """Repeated or comma-separated query values: ?status=a&status=b or ?status=a,b."""
    values = []
    for raw in request.args.getlist(name):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values
