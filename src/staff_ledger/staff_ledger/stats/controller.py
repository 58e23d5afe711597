from __future__ import annotations

from flask import Flask

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<employee_id>/dashboard", methods=["GET"], endpoint="stats_dashboard")
    def dashboard(employee_id: str):
        return ok(container.dashboard_service.dashboard(employee_id).as_dict())
