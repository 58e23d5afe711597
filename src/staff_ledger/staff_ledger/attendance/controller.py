from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/employees/<employee_id>/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    def clock_in(employee_id: str):
        data = json_body()
        record = service.clock_in(employee_id, location=data.get("location"), notes=data.get("notes"))
        return ok(record.as_dict(), status=201, message="Clocked in successfully")

    @app.route("/api/employees/<employee_id>/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    def clock_out(employee_id: str):
        data = json_body()
        record = service.clock_out(employee_id, notes=data.get("notes"))
        return ok(record.as_dict(), message="Clocked out successfully")

    @app.route("/api/employees/<employee_id>/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today_record(employee_id: str):
        record = service.get_today_record(employee_id)
        return ok(record.as_dict() if record else None)

    @app.route("/api/employees/<employee_id>/attendance", methods=["GET"], endpoint="attendance_history")
    def history(employee_id: str):
        view = service.get_attendance(
            employee_id,
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            status=request.args.get("status"),
        )
        return ok(view.as_dict())

    @app.route("/api/employees/<employee_id>/attendance/<work_date>", methods=["PUT"], endpoint="attendance_record")
    def record_manual(employee_id: str, work_date: str):
        data = json_body()
        record = service.record_manual(
            employee_id,
            work_date=work_date,
            clock_in=data.get("clockIn"),
            clock_out=data.get("clockOut"),
            notes=data.get("notes"),
            location=data.get("location"),
        )
        return ok(record.as_dict())

    @app.route(
        "/api/employees/<employee_id>/attendance/<work_date>/status",
        methods=["PUT"],
        endpoint="attendance_override",
    )
    def override_status(employee_id: str, work_date: str):
        data = json_body()
        record = service.override_status(
            employee_id,
            work_date=work_date,
            status=data.get("status"),
            manager_note=data.get("managerNote"),
        )
        return ok(record.as_dict())

    @app.route("/api/employees/<employee_id>/attendance/<record_id>", methods=["DELETE"], endpoint="attendance_delete")
    def delete_record(employee_id: str, record_id: str):
        service.delete_record(employee_id, record_id=record_id)
        return ok(message="Attendance record deleted")

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_all")
    def list_all():
        rows = service.list_all(
            start=request.args.get("startDate"),
            end=request.args.get("endDate"),
            employee_id=request.args.get("employeeId"),
            status=request.args.get("status"),
        )
        return ok([row.as_dict() for row in rows])
