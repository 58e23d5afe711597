from __future__ import annotations

import pytest

from src.staff_ledger.staff_ledger.container import build_container
from src.staff_ledger.staff_ledger.main import create_app


@pytest.fixture
def client(monkeypatch, employees, shifts_repo, notifier):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(
        site_timezone="Africa/Lagos",
        employees_repo=employees,
        shifts_repo=shifts_repo,
        notifier=notifier,
    )
    app = create_app(container)
    return app.test_client()


def test_clock_in_twice_returns_conflict(client):
    res = client.post("/api/employees/emp-1/attendance/clock-in", json={"location": "Main Bakery"})
    assert res.status_code == 201
    assert res.get_json()["success"] is True
    assert res.get_json()["data"]["clockIn"] is not None

    res = client.post("/api/employees/emp-1/attendance/clock-in", json={"location": "Main Bakery"})
    assert res.status_code == 409
    assert res.get_json() == {
        "success": False,
        "message": "You have already clocked in today",
        "code": "ALREADY_CLOCKED_IN",
    }


def test_missing_location_is_bad_request(client):
    res = client.post("/api/employees/emp-1/attendance/clock-in", json={})
    assert res.status_code == 400
    assert res.get_json()["code"] == "LOCATION_REQUIRED"


def test_unknown_employee_is_not_found(client):
    res = client.get("/api/employees/ghost/attendance")
    assert res.status_code == 404
    assert res.get_json()["code"] == "EMPLOYEE_NOT_FOUND"


def test_shift_chronology_error(client):
    res = client.post(
        "/api/shifts",
        json={
            "employeeId": "emp-1",
            "startDate": "2024-01-10",
            "startTime": "09:00",
            "endDate": "2024-01-10",
            "endTime": "08:00",
        },
    )
    assert res.status_code == 400
    assert res.get_json()["code"] == "INVALID_CHRONOLOGY"


def test_shift_lifecycle(client):
    res = client.post(
        "/api/shifts",
        json={
            "employeeId": "emp-1",
            "startDate": "2024-01-10",
            "startTime": "09:00",
            "endDate": "2024-01-10",
            "endTime": "17:00",
            "location": "Front counter",
        },
    )
    assert res.status_code == 201
    shift_id = res.get_json()["data"]["id"]

    res = client.get("/api/shifts?employeeId=emp-1&status=scheduled,completed")
    assert [s["id"] for s in res.get_json()["data"]] == [shift_id]

    res = client.put(f"/api/shifts/{shift_id}", json={"status": "cancelled"})
    assert res.get_json()["data"]["status"] == "cancelled"

    assert client.delete(f"/api/shifts/{shift_id}").status_code == 200
    assert client.get(f"/api/shifts/{shift_id}").status_code == 404


def test_leave_flow(client, notifier):
    res = client.post(
        "/api/employees/emp-1/leaves",
        json={"startDate": "2099-03-01", "endDate": "2099-03-03", "type": "vacation"},
    )
    assert res.status_code == 201
    leave_id = res.get_json()["data"]["id"]
    assert res.get_json()["data"]["days"] == 3

    res = client.post(
        "/api/employees/emp-1/leaves",
        json={"startDate": "2099-03-02", "endDate": "2099-03-02", "type": "sick"},
    )
    assert res.status_code == 409
    assert res.get_json()["code"] == "OVERLAPPING_LEAVE"

    res = client.put(f"/api/leaves/{leave_id}/status", json={"status": "approved"})
    assert res.status_code == 200
    assert res.get_json()["data"]["employeeId"] == "emp-1"
    assert notifier.sent

    res = client.delete(f"/api/employees/emp-1/leaves/{leave_id}")
    assert res.status_code == 409
    assert res.get_json()["code"] == "NOT_PENDING"

    res = client.get("/api/employees/emp-1/leaves?year=abc")
    assert res.status_code == 400


def test_correction_policy_error_is_unprocessable(client):
    res = client.post(
        "/api/employees/emp-1/corrections",
        json={"date": "2000-01-01", "correctionType": "absence", "reason": "Old"},
    )
    assert res.status_code == 422
    assert res.get_json()["code"] == "CORRECTION_TOO_OLD"


def test_dashboard_shape(client):
    res = client.get("/api/employees/emp-1/dashboard")
    data = res.get_json()["data"]
    assert res.status_code == 200
    assert set(data) == {
        "todaysShift",
        "upcomingShifts",
        "pendingLeaves",
        "monthlyHours",
        "attendanceChart",
        "recentActivities",
    }
    assert len(data["attendanceChart"]) == 30


def test_unknown_route_is_json(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.get_json()["success"] is False
