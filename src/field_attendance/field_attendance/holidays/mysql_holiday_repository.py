from __future__ import annotations

from datetime import date, time
from typing import FrozenSet, Optional, Sequence

from ..core.enums import Department, HolidayStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from .model import HolidayDescriptor
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _query(self, where: str, params: tuple) -> Sequence[HolidayDescriptor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT h.holiday_id, h.holiday_date, h.title, h.description, h.status,
                       h.start_time, h.end_time, h.created_by, hd.department
                FROM holidays h
                JOIN holiday_departments hd ON hd.holiday_id = h.holiday_id
                WHERE {where}
                ORDER BY h.holiday_date ASC, h.holiday_id ASC
                """,
                params,
            )
            rows = fetchall(cur)

        grouped: dict[int, dict] = {}
        for r in rows:
            g = grouped.setdefault(int(r["holiday_id"]), {"row": r, "departments": set()})
            g["departments"].add(Department(r["department"]))

        return [
            HolidayDescriptor(
                holiday_id=hid,
                date=g["row"]["holiday_date"],
                title=g["row"]["title"],
                description=g["row"].get("description") or "",
                status=HolidayStatus(g["row"]["status"]),
                departments=frozenset(g["departments"]),
                start_time=normalize_mysql_time(g["row"]["start_time"]) or time(9, 0),
                end_time=normalize_mysql_time(g["row"]["end_time"]) or time(17, 0),
                created_by=g["row"].get("created_by"),
            )
            for hid, g in grouped.items()
        ]

    def get_by_id(self, holiday_id: int) -> Optional[HolidayDescriptor]:
        found = self._query("h.holiday_id=%s", (int(holiday_id),))
        return found[0] if found else None

    def find_by_date(self, holiday_date: date) -> Sequence[HolidayDescriptor]:
        return self._query("h.holiday_date=%s", (holiday_date,))

    def find_filtered(
        self,
        *,
        department: Optional[Department] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[HolidayStatus] = None,
    ) -> Sequence[HolidayDescriptor]:
        clauses = ["1=1"]
        params: list[object] = []
        if start_date is not None:
            clauses.append("h.holiday_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("h.holiday_date <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("h.status=%s")
            params.append(status.value)
        if department is not None:
            clauses.append("h.holiday_id IN (SELECT holiday_id FROM holiday_departments WHERE department=%s)")
            params.append(department.value)
        return self._query(" AND ".join(clauses), tuple(params))

    def find_range(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[Department] = None,
    ) -> Sequence[HolidayDescriptor]:
        if department is None:
            return self._query("h.holiday_date BETWEEN %s AND %s", (start_date, end_date))
        # Keep every department of a matching holiday, not only the filtered one.
        return self._query(
            """
            h.holiday_date BETWEEN %s AND %s
            AND h.holiday_id IN (SELECT holiday_id FROM holiday_departments WHERE department=%s)
            """,
            (start_date, end_date, department.value),
        )

    def create(
        self,
        *,
        holiday_date: date,
        title: str,
        description: str,
        status: HolidayStatus,
        departments: FrozenSet[Department],
        start_time: time,
        end_time: time,
        created_by: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO holidays(holiday_date, title, description, status, start_time, end_time, created_by)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (holiday_date, title, description, status.value, start_time, end_time, created_by),
                )
                holiday_id = int(cur.lastrowid)
                cur.executemany(
                    "INSERT INTO holiday_departments(holiday_id, holiday_date, department) VALUES(%s,%s,%s)",
                    [(holiday_id, holiday_date, d.value) for d in sorted(departments, key=lambda d: d.value)],
                )
                return holiday_id
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("Holiday already exists for this date in one of the departments")
            raise

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        title: str,
        description: str,
        status: HolidayStatus,
        departments: FrozenSet[Department],
        start_time: time,
        end_time: time,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT holiday_id FROM holidays WHERE holiday_id=%s FOR UPDATE", (int(holiday_id),))
                if not fetchone(cur):
                    return False
                cur.execute(
                    """
                    UPDATE holidays
                    SET holiday_date=%s, title=%s, description=%s, status=%s, start_time=%s, end_time=%s
                    WHERE holiday_id=%s
                    """,
                    (holiday_date, title, description, status.value, start_time, end_time, int(holiday_id)),
                )
                cur.execute("DELETE FROM holiday_departments WHERE holiday_id=%s", (int(holiday_id),))
                cur.executemany(
                    "INSERT INTO holiday_departments(holiday_id, holiday_date, department) VALUES(%s,%s,%s)",
                    [(int(holiday_id), holiday_date, d.value) for d in sorted(departments, key=lambda d: d.value)],
                )
                return True
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("Holiday already exists for this date in one of the departments")
            raise
