from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    def _year_arg():
        value = request.args.get("year")
        if not value:
            return None
        if not value.isdigit():
            raise ValidationError("Year must be a number", code="INVALID_YEAR")
        return int(value)

    @app.route("/api/employees/<employee_id>/leaves", methods=["POST"], endpoint="leaves_request")
    def request_leave(employee_id: str):
        data = json_body()
        leave = service.request_leave(
            employee_id,
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            leave_type=data.get("type"),
            notes=data.get("notes"),
        )
        return ok(leave.as_dict(), status=201, message="Leave request submitted")

    @app.route("/api/employees/<employee_id>/leaves", methods=["GET"], endpoint="leaves_list")
    def list_for_employee(employee_id: str):
        leaves = service.list_for_employee(employee_id, status=request.args.get("status"), year=_year_arg())
        return ok([lv.as_dict() for lv in leaves])

    @app.route("/api/employees/<employee_id>/leaves/<leave_id>", methods=["DELETE"], endpoint="leaves_cancel")
    def cancel(employee_id: str, leave_id: str):
        service.cancel(employee_id, leave_id=leave_id)
        return ok(message="Leave request cancelled")

    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_all")
    def list_all():
        rows = service.list_all(
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            employee_id=request.args.get("employeeId"),
            status=request.args.get("status"),
            leave_type=request.args.get("type"),
        )
        return ok([row.as_dict() for row in rows])

    @app.route("/api/leaves/<leave_id>/status", methods=["PUT"], endpoint="leaves_status")
    def update_status(leave_id: str):
        row = service.update_status(leave_id, status=json_body().get("status"))
        return ok(row.as_dict(), message=f"Leave request {row.leave.status.value}")
