from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeKind
from .model import Employee, EmployeeRef


class EmployeeRepository(Protocol):
    def get(self, ref: EmployeeRef) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, kind: Optional[EmployeeKind] = None) -> Sequence[Employee]:
        raise NotImplementedError
