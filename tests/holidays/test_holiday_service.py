from __future__ import annotations

from datetime import date, time

import pytest

from src.field_attendance.field_attendance.core.enums import Department, HolidayStatus
from src.field_attendance.field_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.field_attendance.field_attendance.holidays.service import HolidayService
from tests.fakes import InMemoryHolidays

DAY = date(2025, 8, 15)


@pytest.fixture
def repo():
    return InMemoryHolidays()


@pytest.fixture
def service(repo):
    return HolidayService(repo)


def _create(service, departments, **kw):
    return service.create_holiday(
        holiday_date=kw.pop("holiday_date", DAY),
        title=kw.pop("title", "Independence Day"),
        departments=departments,
        status=kw.pop("status", "Full Day Holiday"),
        **kw,
    )


def test_create_holiday_with_defaults(service, repo):
    hid = _create(service, ["hr", "Sales Employee"])

    holiday = repo.items[hid]
    assert holiday.departments == frozenset({Department.HR, Department.SALES_EMPLOYEE})
    assert holiday.status == HolidayStatus.FULL_DAY
    assert holiday.start_time == time(9, 0)
    assert holiday.end_time == time(17, 0)


def test_department_booked_twice_on_same_date_conflicts(service):
    _create(service, ["hr", "accountant"])

    with pytest.raises(ConflictError) as exc:
        _create(service, ["accountant", "ceo"], title="Other")

    assert "accountant" in str(exc.value)


def test_disjoint_departments_share_a_date(service):
    _create(service, ["hr"])
    _create(service, ["telecaller"], title="Telecaller day")

    assert len(service.holidays_on(DAY)) == 2


@pytest.mark.parametrize(
    "departments, kw",
    [
        ([], {}),
        (["marketing"], {}),
        (["hr"], {"title": "  "}),
        (["hr"], {"status": "Long Weekend"}),
        (["hr"], {"start_time": "9am"}),
        (["hr"], {"start_time": "14:00", "end_time": "13:00"}),
    ],
)
def test_create_holiday_validation(service, departments, kw):
    with pytest.raises(ValidationError):
        _create(service, departments, **kw)


def test_check_returns_first_holiday_for_department(service):
    _create(service, ["team-leader"], title="TL offsite", status="Half Day Holiday")

    assert service.check(department="Team Leader", holiday_date=DAY).title == "TL offsite"
    assert service.check(department="hr", holiday_date=DAY) is None


def test_list_range_filters_by_department(service):
    _create(service, ["hr"], holiday_date=date(2025, 8, 1), title="A")
    _create(service, ["ceo"], holiday_date=date(2025, 8, 20), title="B")
    _create(service, ["hr"], holiday_date=date(2025, 9, 2), title="C")

    titles = [h.title for h in service.list_range(start=date(2025, 8, 1), end=date(2025, 8, 31))]
    assert titles == ["A", "B"]
    assert [h.title for h in service.list_range(start=date(2025, 8, 1), end=date(2025, 9, 30), department="hr")] == [
        "A",
        "C",
    ]

    with pytest.raises(ValidationError):
        service.list_range(start=date(2025, 9, 1), end=date(2025, 8, 1))


def test_delete_holiday(service, repo):
    hid = _create(service, ["hr"])

    service.delete_holiday(hid)
    assert repo.items == {}

    with pytest.raises(NotFoundError):
        service.delete_holiday(hid)


def test_update_holiday_changes_only_supplied_fields(service):
    hid = _create(service, ["hr"], description="National", start_time="10:00")

    holiday = service.update_holiday(hid, title="I-Day", departments=["hr", "ceo"])

    assert holiday.title == "I-Day"
    assert holiday.departments == frozenset({Department.HR, Department.CEO})
    assert holiday.description == "National"
    assert holiday.start_time == time(10, 0)
    assert holiday.date == DAY


def test_update_holiday_does_not_conflict_with_itself(service):
    hid = _create(service, ["hr", "accountant"])

    holiday = service.update_holiday(hid, departments=["accountant"], status="Half Day Holiday")

    assert holiday.departments == frozenset({Department.ACCOUNTANT})
    assert holiday.status == HolidayStatus.HALF_DAY


def test_update_holiday_conflicts_with_other_holiday(service, repo):
    _create(service, ["hr"])
    other = _create(service, ["ceo"], holiday_date=date(2025, 8, 16), title="Other")

    with pytest.raises(ConflictError) as exc:
        service.update_holiday(other, holiday_date=DAY, departments=["hr", "ceo"])

    assert "hr" in str(exc.value)
    assert repo.items[other].date == date(2025, 8, 16)


def test_update_holiday_moving_date_checks_existing_departments(service):
    _create(service, ["telecaller"])
    other = _create(service, ["telecaller"], holiday_date=date(2025, 8, 16), title="Other")

    with pytest.raises(ConflictError):
        service.update_holiday(other, holiday_date=DAY)


@pytest.mark.parametrize(
    "kw",
    [
        {"departments": []},
        {"departments": ["marketing"]},
        {"title": " "},
        {"status": "Long Weekend"},
        {"end_time": "08:00"},
    ],
)
def test_update_holiday_validation(service, kw):
    hid = _create(service, ["hr"])

    with pytest.raises(ValidationError):
        service.update_holiday(hid, **kw)


def test_update_missing_holiday(service):
    with pytest.raises(NotFoundError):
        service.update_holiday(404, title="Ghost")


def test_list_holidays_filters(service):
    _create(service, ["hr"], holiday_date=date(2025, 8, 1), title="A")
    _create(service, ["ceo"], holiday_date=date(2025, 8, 20), title="B", status="Working Day")
    _create(service, ["hr"], holiday_date=date(2025, 9, 2), title="C")

    assert [h.title for h in service.list_holidays()] == ["A", "B", "C"]
    assert [h.title for h in service.list_holidays(department="All")] == ["A", "B", "C"]
    assert [h.title for h in service.list_holidays(department="HR")] == ["A", "C"]
    assert [h.title for h in service.list_holidays(month="8", year="2025")] == ["A", "B"]
    assert [h.title for h in service.list_holidays(month="09")] == ["A", "B", "C"]
    assert [h.title for h in service.list_holidays(status="Working Day")] == ["B"]

    with pytest.raises(ValidationError):
        service.list_holidays(month="13", year="2025")
    with pytest.raises(ValidationError):
        service.list_holidays(status="Long Weekend")


def test_holidays_by_department(service):
    _create(service, ["hr", "ceo"], holiday_date=date(2025, 8, 15), title="A")
    _create(service, ["hr"], holiday_date=date(2026, 1, 26), title="B")

    assert [h.title for h in service.by_department("hr")] == ["A", "B"]
    assert [h.title for h in service.by_department("hr", year="2026")] == ["B"]
    assert [h.title for h in service.by_department("CEO", year="2026")] == []

    with pytest.raises(ValidationError):
        service.by_department("hr", year="next")
    with pytest.raises(ValidationError):
        service.by_department("marketing")
