from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.field_attendance.field_attendance.core.constants import OFFICE_WORK
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, Department, EmployeeKind
from src.field_attendance.field_attendance.core.exceptions import (
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from src.field_attendance.field_attendance.employees.model import EmployeeRef
from tests.fakes import InMemoryAttendance, fake_container, make_employee

SALES = EmployeeRef(EmployeeKind.SALES_EMPLOYEE, "se-1")
TELE = EmployeeRef(EmployeeKind.TELECALLER, "tc-1")
COORDS = {"latitude": 12.97, "longitude": 77.59}


@pytest.fixture
def repo():
    return InMemoryAttendance()


@pytest.fixture
def service(fixed_now, repo):
    return fake_container(
        fixed_now,
        [make_employee(EmployeeKind.SALES_EMPLOYEE, "se-1"), make_employee(EmployeeKind.TELECALLER, "tc-1")],
        attendance=repo,
    ).attendance_service


@pytest.fixture
def closed_id(service, fixed_now):
    service.open_session(SALES, COORDS, now=fixed_now)
    service.close_session(SALES, COORDS, now=fixed_now + timedelta(hours=5))
    return str(service.history(SALES)[0].attendance_id)


def test_set_status_overrides_without_recomputing_duration(service, closed_id):
    record = service.set_status(closed_id, "Late Arrival", "traffic", approved_by="hr-1")

    assert record.status == AttendanceStatus.LATE_ARRIVAL
    assert record.remarks == "traffic"
    assert record.approved_by == "hr-1"
    assert record.total_work_duration == 5.0


@pytest.mark.parametrize("status", ["present", "Pending", "Half-Day", "", None])
def test_set_status_rejects_unknown_status(service, closed_id, status):
    with pytest.raises(ValidationError):
        service.set_status(closed_id, status)


def test_set_status_to_awaiting_approval(service, closed_id):
    record = service.set_status(closed_id, "AwaitingApproval")

    assert record.status == AttendanceStatus.AWAITING_APPROVAL
    assert [str(r.attendance_id) for r in service.pending_requests()] == [closed_id]


@pytest.mark.parametrize("status", ["Active", "Holiday"])
def test_set_status_accepts_any_known_status(service, closed_id, status):
    assert service.set_status(closed_id, status).status == AttendanceStatus(status)


def test_set_status_on_synthetic_row(service):
    with pytest.raises(InvalidOperationError):
        service.set_status("absent-se-1", "Present")


def test_invalid_status_is_reported_before_synthetic_id(service):
    with pytest.raises(ValidationError):
        service.set_status("absent-se-1", "Pending")


@pytest.mark.parametrize("record_id", ["999", "abc", ""])
def test_set_status_on_unknown_record(service, record_id):
    with pytest.raises(NotFoundError):
        service.set_status(record_id, "Present")


def test_approve_defaults_to_approved(service, closed_id):
    assert service.approve(closed_id).status == AttendanceStatus.APPROVED
    assert service.approve(closed_id, "Rejected", "no proof").status == AttendanceStatus.REJECTED


def test_pending_requests_lists_closed_reviewable_records(service, fixed_now, closed_id):
    service.open_session(TELE, COORDS, now=fixed_now)

    pending = service.pending_requests()
    assert [str(r.attendance_id) for r in pending] == [closed_id]

    assert service.pending_requests(department="sales-employee")
    assert service.pending_requests(department="Telecaller") == []
    assert service.pending_requests(status="Half Day")
    assert service.pending_requests(work_date=fixed_now.date() - timedelta(days=1)) == []

    service.approve(closed_id)
    assert service.pending_requests() == []


def test_pending_requests_rejects_unknown_filters(service):
    with pytest.raises(ValidationError):
        service.pending_requests(status="Approved")
    with pytest.raises(ValidationError):
        service.pending_requests(department="marketing")


def test_manual_attendance_upserts_one_record_per_day(service, repo):
    day = date(2025, 3, 1)

    first = service.record_manual_attendance(SALES, day, "Leave", "sick")
    second = service.record_manual_attendance(SALES, day, "Present", approved_by="hr-1")

    assert first.attendance_id == second.attendance_id
    assert len(repo.records) == 1
    assert second.status == AttendanceStatus.PRESENT
    assert second.work_type == OFFICE_WORK
    assert second.department == Department.SALES_EMPLOYEE
    assert second.is_open is False


def test_manual_attendance_validates(service):
    with pytest.raises(ValidationError):
        service.record_manual_attendance(SALES, date(2025, 3, 1), "Active")
    with pytest.raises(NotFoundError):
        service.record_manual_attendance(EmployeeRef(EmployeeKind.HR, "ghost"), date(2025, 3, 1), "Present")


def test_history_filters_by_month_and_limit(service):
    for day in (date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 14), date(2025, 3, 1)):
        service.record_manual_attendance(SALES, day, "Present")

    february = service.history(SALES, month="2025-02")
    assert [r.work_date for r in february] == [date(2025, 2, 14), date(2025, 2, 1)]
    assert len(service.history(SALES, limit=2)) == 2

    with pytest.raises(ValidationError):
        service.history(SALES, month="2025/02")
    with pytest.raises(ValidationError):
        service.history(SALES, limit=0)


@pytest.mark.parametrize("limit", ["abc", None, "2.5"])
def test_history_rejects_non_integer_limit(service, limit):
    with pytest.raises(ValidationError):
        service.history(SALES, limit=limit)


def test_hr_history_across_employees(service, fixed_now):
    service.record_manual_attendance(SALES, date(2025, 3, 1), "Present")
    service.record_manual_attendance(TELE, date(2025, 3, 1), "Leave")
    service.record_manual_attendance(SALES, date(2025, 2, 20), "Absent")
    service.open_session(TELE, COORDS, now=fixed_now)

    records = service.hr_history()
    assert [(r.employee.employee_id, r.work_date) for r in records][:1] == [("tc-1", fixed_now.date())]
    assert len(records) == 4
    assert records[-1].work_date == date(2025, 2, 20)

    assert [r.status for r in service.hr_history(department="Telecaller")] == [
        AttendanceStatus.ACTIVE,
        AttendanceStatus.LEAVE,
    ]
    assert [r.status for r in service.hr_history(status="Absent")] == [AttendanceStatus.ABSENT]
    assert len(service.hr_history(department="all", status="all")) == 4
    assert {r.employee.employee_id for r in service.hr_history(employee_id="se-1")} == {"se-1"}
    assert len(service.hr_history(limit=2)) == 2


def test_hr_history_date_window_needs_both_ends(service):
    service.record_manual_attendance(SALES, date(2025, 3, 1), "Present")
    service.record_manual_attendance(SALES, date(2025, 2, 20), "Absent")

    window = service.hr_history(start_date=date(2025, 3, 1), end_date=date(2025, 3, 31))
    assert [r.work_date for r in window] == [date(2025, 3, 1)]
    assert len(service.hr_history(start_date=date(2025, 3, 1))) == 2

    with pytest.raises(ValidationError):
        service.hr_history(start_date=date(2025, 3, 31), end_date=date(2025, 3, 1))


def test_hr_history_rejects_unknown_filters(service):
    with pytest.raises(ValidationError):
        service.hr_history(status="Pending")
    with pytest.raises(ValidationError):
        service.hr_history(department="marketing")
    with pytest.raises(ValidationError):
        service.hr_history(limit="abc")
