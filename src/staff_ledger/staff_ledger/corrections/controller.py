from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.correction_service

    @app.route("/api/employees/<employee_id>/corrections", methods=["POST"], endpoint="corrections_request")
    def request_correction(employee_id: str):
        data = json_body()
        submission = service.request_correction(
            employee_id,
            work_date=data.get("date"),
            correction_type=data.get("correctionType"),
            reason=data.get("reason"),
            correct_time=data.get("correctTime"),
        )
        return ok(submission.as_dict(), status=201, message="Correction request submitted")

    @app.route("/api/employees/<employee_id>/corrections", methods=["GET"], endpoint="corrections_list")
    def list_for_employee(employee_id: str):
        items = service.list_for_employee(employee_id, status=request.args.get("status"))
        return ok([c.as_dict() for c in items])

    @app.route("/api/corrections/pending", methods=["GET"], endpoint="corrections_pending")
    def list_pending():
        return ok([row.as_dict() for row in service.list_pending()])

    @app.route(
        "/api/employees/<employee_id>/corrections/<correction_id>/approve",
        methods=["POST"],
        endpoint="corrections_approve",
    )
    def approve(employee_id: str, correction_id: str):
        data = json_body()
        submission = service.approve(employee_id, correction_id=correction_id, manager_note=data.get("managerNote"))
        return ok(submission.as_dict(), message="Correction approved")

    @app.route(
        "/api/employees/<employee_id>/corrections/<correction_id>/reject",
        methods=["POST"],
        endpoint="corrections_reject",
    )
    def reject(employee_id: str, correction_id: str):
        data = json_body()
        correction = service.reject(employee_id, correction_id=correction_id, manager_note=data.get("managerNote"))
        return ok(correction.as_dict(), message="Correction rejected")
