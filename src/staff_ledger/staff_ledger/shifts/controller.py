from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, query_list
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.shift_service

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    def create_shift():
        data = json_body()
        shift = service.create_shift(
            data.get("employeeId"),
            start_date=data.get("startDate"),
            start_time=data.get("startTime"),
            end_date=data.get("endDate"),
            end_time=data.get("endTime"),
            location=data.get("location"),
            notes=data.get("notes"),
        )
        return ok(shift.as_dict(), status=201, message="Shift created")

    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    def list_shifts():
        shifts = service.list_shifts(
            employee_id=request.args.get("employeeId"),
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            statuses=query_list("status"),
        )
        return ok([s.as_dict() for s in shifts])

    @app.route("/api/shifts/<shift_id>", methods=["GET"], endpoint="shifts_get")
    def get_shift(shift_id: str):
        return ok(service.get_shift(shift_id).as_dict())

    @app.route("/api/shifts/<shift_id>", methods=["PUT"], endpoint="shifts_update")
    def update_shift(shift_id: str):
        data = json_body()
        shift = service.update_shift(
            shift_id,
            start_date=data.get("startDate"),
            start_time=data.get("startTime"),
            end_date=data.get("endDate"),
            end_time=data.get("endTime"),
            location=data.get("location"),
            status=data.get("status"),
            notes=data.get("notes"),
        )
        return ok(shift.as_dict())

    @app.route("/api/shifts/<shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    def delete_shift(shift_id: str):
        service.delete_shift(shift_id)
        return ok(message="Shift deleted")

    @app.route("/api/employees/<employee_id>/schedule", methods=["GET"], endpoint="shifts_schedule")
    def schedule(employee_id: str):
        shifts = service.schedule_for(employee_id, start=request.args.get("startDate"), end=request.args.get("endDate"))
        return ok([s.as_dict() for s in shifts])
