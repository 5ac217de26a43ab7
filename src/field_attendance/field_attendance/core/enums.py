from __future__ import annotations

from enum import Enum

from .constants import FIELD_WORK, OFFICE_WORK


class Department(str, Enum):
    """Department tag used for holiday scoping."""

    HR = "hr"
    TEAM_LEADER = "team-leader"
    PROJECT_MANAGER = "project-manager"
    SALES_EMPLOYEE = "sales-employee"
    TELECALLER = "telecaller"
    ACCOUNTANT = "accountant"
    CEO = "ceo"

    @property
    def label(self) -> str:
        return _DEPARTMENT_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "Department":
        v = (value or "").strip().lower()
        for dept in cls:
            if v in {dept.value, dept.label.lower()}:
                return dept
        raise ValueError(f"Unknown department: {value!r}")


_DEPARTMENT_LABELS = {
    Department.HR: "HR",
    Department.TEAM_LEADER: "Team Leader",
    Department.PROJECT_MANAGER: "Project Manager",
    Department.SALES_EMPLOYEE: "Sales Employee",
    Department.TELECALLER: "Telecaller",
    Department.ACCOUNTANT: "Accountant",
    Department.CEO: "CEO",
}


class EmployeeKind(str, Enum):
    """Which directory partition an employee id resolves in."""

    TEAM_LEADER = "TeamLeaderEmployee"
    HR = "HrEmployee"
    ACCOUNTANT = "AccountantEmployee"
    TELECALLER = "TelecallerEmployee"
    SALES_EMPLOYEE = "SalesEmployee"
    PROJECT_MANAGER = "ProjectManagerEmployee"
    CEO = "CeoEmployee"

    @property
    def department(self) -> Department:
        return _KIND_DEPARTMENTS[self]

    @property
    def default_work_type(self) -> str:
        if self in {EmployeeKind.SALES_EMPLOYEE, EmployeeKind.TEAM_LEADER}:
            return FIELD_WORK
        return OFFICE_WORK

    @classmethod
    def from_slug(cls, slug: str) -> "EmployeeKind":
        """Resolve a URL slug (department tag) or stored kind name."""

        v = (slug or "").strip()
        for kind in cls:
            if v == kind.value or v.lower() == kind.department.value:
                return kind
        raise ValueError(f"Unknown employee kind: {slug!r}")


_KIND_DEPARTMENTS = {
    EmployeeKind.TEAM_LEADER: Department.TEAM_LEADER,
    EmployeeKind.HR: Department.HR,
    EmployeeKind.ACCOUNTANT: Department.ACCOUNTANT,
    EmployeeKind.TELECALLER: Department.TELECALLER,
    EmployeeKind.SALES_EMPLOYEE: Department.SALES_EMPLOYEE,
    EmployeeKind.PROJECT_MANAGER: Department.PROJECT_MANAGER,
    EmployeeKind.CEO: Department.CEO,
}


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    ACTIVE = "Active"
    AWAITING_APPROVAL = "AwaitingApproval"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PRESENT = "Present"
    HALF_DAY = "Half Day"
    LEAVE = "Leave"
    ABSENT = "Absent"
    LATE_ARRIVAL = "Late Arrival"
    EARLY_LEAVE = "Early Leave"
    HOLIDAY = "Holiday"


# Statuses HR may enter for a day with no work-mode session.
MANUAL_ENTRY_STATUSES = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.LEAVE,
        AttendanceStatus.ABSENT,
        AttendanceStatus.LATE_ARRIVAL,
        AttendanceStatus.EARLY_LEAVE,
        AttendanceStatus.APPROVED,
        AttendanceStatus.REJECTED,
    }
)

# Closed sessions still waiting for an HR decision.
PENDING_REVIEW_STATUSES = frozenset(
    {
        AttendanceStatus.ACTIVE,
        AttendanceStatus.AWAITING_APPROVAL,
        AttendanceStatus.PRESENT,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.EARLY_LEAVE,
    }
)


class HolidayStatus(str, Enum):
    FULL_DAY = "Full Day Holiday"
    HALF_DAY = "Half Day Holiday"
    WORKING_DAY = "Working Day"


class TravelLogType(str, Enum):
    START = "start"
    SAMPLE = "sample"
    EXTEND = "extend"
    END = "end"
