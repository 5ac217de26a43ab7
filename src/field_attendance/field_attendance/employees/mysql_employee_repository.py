from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, EmployeeRef
from .repository import EmployeeRepository


def _to_employee(r: dict) -> Employee:
    return Employee(
        ref=EmployeeRef(kind=EmployeeKind(r["employee_kind"]), employee_id=str(r["employee_id"])),
        name=r["name"],
        email=r.get("email"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, ref: EmployeeRef) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, employee_kind, name, email, is_active
                FROM employees
                WHERE employee_kind=%s AND employee_id=%s
                """,
                (ref.kind.value, ref.employee_id),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active(self, kind: Optional[EmployeeKind] = None) -> Sequence[Employee]:
        clauses = ["is_active=1"]
        params: list[object] = []
        if kind is not None:
            clauses.append("employee_kind=%s")
            params.append(kind.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, employee_kind, name, email, is_active
                FROM employees
                WHERE {" AND ".join(clauses)}
                ORDER BY employee_kind, name
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]
