from __future__ import annotations

from datetime import timedelta

import pytest

from src.field_attendance.field_attendance.core.enums import EmployeeKind
from src.field_attendance.field_attendance.employees.model import EmployeeRef
from src.field_attendance.field_attendance.main import create_app
from tests.fakes import InMemoryAttendance, fake_container, make_employee

COORDS = {"latitude": 12.97, "longitude": 77.59}
BASE = "/api/employees/sales-employee/se-1/attendance"


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def container(fixed_now, attendance):
    return fake_container(
        fixed_now,
        [make_employee(EmployeeKind.SALES_EMPLOYEE, "se-1", "Ravi"), make_employee(EmployeeKind.HR, "hr-1")],
        attendance=attendance,
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def test_work_mode_on_then_conflict(client):
    res = client.post(f"{BASE}/work-mode-on", json=COORDS)
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["data"]["isActive"] is True
    assert body["data"]["workType"] == "Field Work"
    assert body["data"]["totalWorkDuration"] is None

    res = client.post(f"{BASE}/work-mode-on", json=COORDS)
    assert res.status_code == 409
    assert res.get_json() == {"success": False, "message": "work mode already active"}


def test_work_mode_on_requires_coordinates(client):
    res = client.post(f"{BASE}/work-mode-on", json={"workType": "Field Work"})
    assert res.status_code == 400
    assert res.get_json()["message"] == "location coordinates required"


def test_unknown_employee_kind_is_rejected(client):
    res = client.post("/api/employees/interns/x-1/attendance/work-mode-on", json=COORDS)
    assert res.status_code == 400


def test_unknown_employee_is_not_found(client):
    res = client.post("/api/employees/hr/missing/attendance/work-mode-on", json=COORDS)
    assert res.status_code == 404


def test_session_round_trip_over_http(client, attendance, fixed_now):
    client.post(f"{BASE}/work-mode-on", json={"coordinates": COORDS})
    res = client.post(f"{BASE}/travel-log", json={"latitude": 13.0, "longitude": 77.6, "distanceFromStart": 4.2})
    assert res.status_code == 200
    assert res.get_json()["data"]["totalDistanceTravelled"] == 4.2

    active = client.get(f"{BASE}/active-session").get_json()["data"]
    assert active["isActive"] is True
    assert active["currentLocation"] == {"latitude": 13.0, "longitude": 77.6}

    # move the clock past a full day
    later = fake_container(
        fixed_now + timedelta(hours=8), [make_employee(EmployeeKind.SALES_EMPLOYEE, "se-1")], attendance=attendance
    )
    off = later.attendance_service.close_session(EmployeeRef(EmployeeKind.SALES_EMPLOYEE, "se-1"), COORDS)
    assert off.status.value == "Present"

    today = client.get(f"{BASE}/today").get_json()["data"]
    assert today["isActive"] is False
    assert today["status"] == "Present"
    assert today["totalWorkDuration"] == 8.0

    res = client.post(f"{BASE}/work-mode-off", json=COORDS)
    assert res.status_code == 409


def test_work_mode_off_without_session(client):
    res = client.post(f"{BASE}/work-mode-off", json=COORDS)
    assert res.status_code == 404


def test_update_status_errors_map_to_http_codes(client):
    assert client.put("/api/hr/update-status/absent-se-1", json={"status": "Present"}).status_code == 422
    assert client.put("/api/hr/update-status/42", json={"status": "Present"}).status_code == 404
    assert client.put("/api/hr/update-status/42", json={"status": "Pending"}).status_code == 400


def test_approve_attendance(client):
    client.post(f"{BASE}/work-mode-on", json=COORDS)
    client.put("/api/hr/update-status/1", json={"status": "Half Day"})

    res = client.put("/api/hr/approve-attendance/1", json={"approvedBy": "hr-1"})

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["status"] == "Approved"
    assert data["approvedBy"] == "hr-1"
    assert data["id"] == "1"


def test_daily_attendance_with_holiday(client, fixed_now):
    res = client.post(
        "/api/holidays",
        json={"date": fixed_now.date().isoformat(), "title": "HR retreat", "departments": ["hr"], "status": "Full Day Holiday"},
    )
    assert res.status_code == 201

    res = client.post(
        "/api/holidays",
        json={"date": fixed_now.date().isoformat(), "title": "Again", "departments": ["HR"], "status": "Full Day Holiday"},
    )
    assert res.status_code == 409

    body = client.get(f"/api/hr/daily-attendance?date={fixed_now.date().isoformat()}").get_json()["data"]
    statuses = {row["id"]: row["status"] for row in body["attendance"]}
    assert statuses == {"absent-hr-1": "Holiday", "absent-se-1": "Absent"}
    assert body["isHoliday"] is True
    assert body["summary"]["total"] == 2
    assert body["summary"]["presentPercentage"] == "0.0"


def test_daily_attendance_rejects_bad_date(client):
    res = client.get("/api/hr/daily-attendance?date=10-03-2025")
    assert res.status_code == 400
    assert res.get_json()["message"] == "Invalid date format. Use YYYY-MM-DD"


def test_holiday_check_and_delete(client):
    client.post(
        "/api/holidays",
        json={"date": "2025-08-15", "title": "Independence Day", "departments": ["ceo"], "status": "Full Day Holiday"},
    )

    check = client.get("/api/holidays/check/ceo/2025-08-15").get_json()["data"]
    assert check["isHoliday"] is True
    assert check["holiday"]["title"] == "Independence Day"

    assert client.delete("/api/holidays/1").status_code == 200
    assert client.delete("/api/holidays/1").status_code == 404


def test_manual_attendance_and_pending_requests(client):
    res = client.post("/api/hr/employees/sales-employee/se-1/attendance", json={"date": "2025-03-01", "status": "Leave"})
    assert res.status_code == 200
    assert res.get_json()["data"]["workType"] == "Office Work"

    res = client.get("/api/hr/pending-requests")
    assert res.get_json()["data"] == []


def test_update_status_accepts_awaiting_approval(client):
    client.post(f"{BASE}/work-mode-on", json=COORDS)

    res = client.put("/api/hr/update-status/1", json={"status": "AwaitingApproval"})

    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "AwaitingApproval"


def test_history_rejects_non_numeric_limit(client):
    res = client.get(f"{BASE}/history?limit=abc")
    assert res.status_code == 400


def test_holiday_update_over_http(client):
    client.post(
        "/api/holidays",
        json={"date": "2025-08-15", "title": "Independence Day", "departments": ["hr"], "status": "Full Day Holiday"},
    )
    client.post(
        "/api/holidays",
        json={"date": "2025-08-16", "title": "Audit", "departments": ["accountant"], "status": "Half Day Holiday"},
    )

    res = client.put("/api/holidays/1", json={"title": "I-Day", "departments": ["hr", "ceo"]})
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["title"] == "I-Day"
    assert data["departments"] == ["ceo", "hr"]

    assert client.put("/api/holidays/2", json={"date": "2025-08-15", "departments": ["ceo"]}).status_code == 409
    assert client.put("/api/holidays/1", json={"departments": []}).status_code == 400
    assert client.put("/api/holidays/99", json={"title": "Nope"}).status_code == 404


def _titles(res):
    return [h["title"] for h in res.get_json()["data"]]


def test_holiday_fetch_and_department_listing(client):
    for day, title, dept, status in [
        ("2025-08-15", "Independence Day", "hr", "Full Day Holiday"),
        ("2025-08-20", "Audit", "accountant", "Half Day Holiday"),
        ("2026-01-26", "Republic Day", "hr", "Full Day Holiday"),
    ]:
        client.post("/api/holidays", json={"date": day, "title": title, "departments": [dept], "status": status})

    assert _titles(client.get("/api/holidays/fetch")) == ["Independence Day", "Audit", "Republic Day"]
    assert _titles(client.get("/api/holidays/fetch?department=All&month=8&year=2025")) == ["Independence Day", "Audit"]
    assert _titles(client.get("/api/holidays/fetch", query_string={"status": "Half Day Holiday"})) == ["Audit"]
    assert _titles(client.get("/api/holidays/department/hr?year=2026")) == ["Republic Day"]
    assert _titles(client.get("/api/holidays/department/HR")) == ["Independence Day", "Republic Day"]
    assert client.get("/api/holidays/department/marketing").status_code == 400


def test_hr_attendance_history_over_http(client):
    client.post("/api/hr/employees/sales-employee/se-1/attendance", json={"date": "2025-03-01", "status": "Leave"})
    client.post("/api/hr/employees/hr/hr-1/attendance", json={"date": "2025-03-02", "status": "Present"})

    res = client.get("/api/hr/attendance-history")
    assert res.status_code == 200
    assert [r["date"] for r in res.get_json()["data"]] == ["2025-03-02", "2025-03-01"]

    res = client.get("/api/hr/attendance-history?department=sales-employee&status=all")
    assert [r["status"] for r in res.get_json()["data"]] == ["Leave"]

    res = client.get("/api/hr/attendance-history?startDate=2025-03-02&endDate=2025-03-31")
    assert len(res.get_json()["data"]) == 1

    assert client.get("/api/hr/attendance-history?status=Pending").status_code == 400


def test_hr_employee_listing(client):
    res = client.get("/api/hr/employees")

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert [e["employeeId"] for e in data] == ["hr-1", "se-1"]
    assert data[1]["department"] == "Sales Employee"
