from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Department, EmployeeKind


@dataclass(frozen=True)
class EmployeeRef:
    """Tagged reference: the kind selects the directory partition."""

    kind: EmployeeKind
    employee_id: str

    @property
    def department(self) -> Department:
        return self.kind.department

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.employee_id}"


@dataclass(frozen=True)
class Employee:
    ref: EmployeeRef
    name: str
    email: Optional[str] = None
    is_active: bool = True

    @property
    def department(self) -> Department:
        return self.ref.department

    def to_dict(self) -> dict:
        return {
            "employeeId": self.ref.employee_id,
            "employeeModel": self.ref.kind.value,
            "name": self.name,
            "email": self.email,
            "department": self.department.label,
        }
