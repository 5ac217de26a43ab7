from __future__ import annotations

from typing import Sequence

from ..core.enums import EmployeeKind
from ..core.exceptions import NotFoundError
from .model import Employee, EmployeeRef
from .repository import EmployeeRepository


class EmployeeDirectory:
    """Lookup of employees across every department partition."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def lookup(self, ref: EmployeeRef) -> Employee:
        employee = self._employees.get(ref)
        if not employee:
            raise NotFoundError(f"Employee not found: {ref}")
        return employee

    def roster(self) -> Sequence[Employee]:
        # Listed partition by partition so the roster order is stable per department.
        out: list[Employee] = []
        for kind in EmployeeKind:
            out.extend(self._employees.list_active(kind))
        return out
