from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Sequence

from ..common.coordinates import Coordinates, coordinates_or_none
from ..core.enums import AttendanceStatus, Department, EmployeeKind, TravelLogType
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..employees.model import EmployeeRef
from .model import AttendanceRecord, TravelLog
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, employee_id, employee_kind, name, work_date,
    work_mode_on_time, on_latitude, on_longitude,
    work_mode_off_time, off_latitude, off_longitude,
    total_distance_travelled, total_work_duration,
    status, work_type, description, remarks, approved_by
"""


def _insert_log(cur, attendance_id: int, log: TravelLog) -> None:
    cur.execute(
        """
        INSERT INTO attendance_travel_logs(attendance_id, logged_at, latitude, longitude, distance_from_start, log_type)
        VALUES(%s,%s,%s,%s,%s,%s)
        """,
        (
            attendance_id,
            log.timestamp,
            log.coordinates.latitude,
            log.coordinates.longitude,
            float(log.distance_from_start),
            log.log_type.value,
        ),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, *, order: str = "work_date DESC", limit: Optional[int] = None):
        sql = f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE {where} ORDER BY {order}"
        if limit is not None:
            sql += " LIMIT %s"
            params = params + (int(limit),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)

            logs_by_id: dict[int, list[TravelLog]] = {}
            ids = [int(r["attendance_id"]) for r in rows]
            if ids:
                placeholders = ",".join(["%s"] * len(ids))
                cur.execute(
                    f"""
                    SELECT attendance_id, logged_at, latitude, longitude, distance_from_start, log_type
                    FROM attendance_travel_logs
                    WHERE attendance_id IN ({placeholders})
                    ORDER BY logged_at ASC, log_id ASC
                    """,
                    tuple(ids),
                )
                for lr in fetchall(cur):
                    logs_by_id.setdefault(int(lr["attendance_id"]), []).append(
                        TravelLog(
                            timestamp=lr["logged_at"],
                            coordinates=Coordinates(float(lr["latitude"]), float(lr["longitude"])),
                            distance_from_start=float(lr["distance_from_start"] or 0),
                            log_type=TravelLogType(lr["log_type"]),
                        )
                    )

        return [self._to_record(r, logs_by_id.get(int(r["attendance_id"]), [])) for r in rows]

    @staticmethod
    def _to_record(r: dict, logs: list[TravelLog]) -> AttendanceRecord:
        duration = r.get("total_work_duration")
        return AttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            employee=EmployeeRef(kind=EmployeeKind(r["employee_kind"]), employee_id=str(r["employee_id"])),
            name=r.get("name"),
            work_date=r["work_date"],
            work_mode_on_time=r.get("work_mode_on_time"),
            work_mode_off_time=r.get("work_mode_off_time"),
            status=AttendanceStatus(r["status"]),
            work_mode_on_coordinates=coordinates_or_none(r.get("on_latitude"), r.get("on_longitude")),
            work_mode_off_coordinates=coordinates_or_none(r.get("off_latitude"), r.get("off_longitude")),
            travel_logs=tuple(logs),
            total_distance_travelled=float(r.get("total_distance_travelled") or 0),
            total_work_duration=float(duration) if duration is not None else None,
            work_type=r.get("work_type"),
            description=r.get("description"),
            remarks=r.get("remarks"),
            approved_by=r.get("approved_by"),
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        rows = self._select("attendance_id=%s", (int(attendance_id),))
        return rows[0] if rows else None

    def get_for_employee_and_date(self, employee: EmployeeRef, work_date: date) -> Optional[AttendanceRecord]:
        rows = self._select(
            "employee_kind=%s AND employee_id=%s AND work_date=%s",
            (employee.kind.value, employee.employee_id, work_date),
        )
        return rows[0] if rows else None

    def create_open(
        self,
        *,
        employee: EmployeeRef,
        name: Optional[str],
        work_date: date,
        work_mode_on_time: datetime,
        coordinates: Coordinates,
        work_type: str,
        first_log: TravelLog,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, employee_kind, name, department, work_date,
                        work_mode_on_time, on_latitude, on_longitude,
                        total_distance_travelled, status, work_type
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        employee.employee_id,
                        employee.kind.value,
                        name,
                        employee.department.value,
                        work_date,
                        work_mode_on_time,
                        coordinates.latitude,
                        coordinates.longitude,
                        float(first_log.distance_from_start),
                        AttendanceStatus.ACTIVE.value,
                        work_type,
                    ),
                )
                attendance_id = int(cur.lastrowid)
                _insert_log(cur, attendance_id, first_log)
                return attendance_id
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("work mode already active")
            raise

    def reopen_closed(self, *, attendance_id: int, coordinates: Coordinates, log: TravelLog) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET work_mode_off_time=NULL, total_work_duration=NULL, status=%s,
                    on_latitude=%s, on_longitude=%s
                WHERE attendance_id=%s AND work_mode_off_time IS NOT NULL
                """,
                (AttendanceStatus.ACTIVE.value, coordinates.latitude, coordinates.longitude, int(attendance_id)),
            )
            if cur.rowcount <= 0:
                return False
            _insert_log(cur, int(attendance_id), log)
            return True

    def append_travel_log(self, *, attendance_id: int, log: TravelLog, total_distance: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # rowcount is 0 when the value does not change, so match on the row instead.
            cur.execute(
                """
                SELECT attendance_id FROM attendance_records
                WHERE attendance_id=%s AND work_mode_on_time IS NOT NULL AND work_mode_off_time IS NULL
                FOR UPDATE
                """,
                (int(attendance_id),),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE attendance_records SET total_distance_travelled=%s WHERE attendance_id=%s",
                (float(total_distance), int(attendance_id)),
            )
            _insert_log(cur, int(attendance_id), log)
            return True

    def close_open(
        self,
        *,
        attendance_id: int,
        work_mode_off_time: datetime,
        coordinates: Optional[Coordinates],
        log: Optional[TravelLog],
        total_distance: Optional[float],
        total_work_duration: float,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET work_mode_off_time=%s,
                    off_latitude=%s, off_longitude=%s,
                    total_distance_travelled=COALESCE(%s, total_distance_travelled),
                    total_work_duration=%s, status=%s
                WHERE attendance_id=%s AND work_mode_off_time IS NULL
                """,
                (
                    work_mode_off_time,
                    coordinates.latitude if coordinates else None,
                    coordinates.longitude if coordinates else None,
                    total_distance,
                    total_work_duration,
                    status.value,
                    int(attendance_id),
                ),
            )
            if cur.rowcount <= 0:
                return False
            if log is not None:
                _insert_log(cur, int(attendance_id), log)
            return True

    def update_status(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
        approved_by: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id FROM attendance_records WHERE attendance_id=%s FOR UPDATE
                """,
                (int(attendance_id),),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, remarks=COALESCE(%s, remarks), approved_by=COALESCE(%s, approved_by)
                WHERE attendance_id=%s
                """,
                (status.value, remarks, approved_by, int(attendance_id)),
            )
            return True

    def upsert_manual(
        self,
        *,
        employee: EmployeeRef,
        name: Optional[str],
        work_date: date,
        status: AttendanceStatus,
        description: Optional[str],
        work_type: str,
        approved_by: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, employee_kind, name, department, work_date,
                    status, description, work_type, approved_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    description=VALUES(description),
                    work_type=VALUES(work_type),
                    approved_by=VALUES(approved_by)
                """,
                (
                    employee.employee_id,
                    employee.kind.value,
                    name,
                    employee.department.value,
                    work_date,
                    status.value,
                    description,
                    work_type,
                    approved_by,
                ),
            )
            return int(cur.lastrowid)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._select("work_date=%s", (work_date,), order="work_mode_on_time ASC")

    def list_for_employee(
        self,
        employee: EmployeeRef,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 30,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["employee_kind=%s", "employee_id=%s"]
        params: list[object] = [employee.kind.value, employee.employee_id]
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        return self._select(" AND ".join(clauses), tuple(params), limit=limit)

    def list_closed(
        self,
        *,
        statuses: Collection[AttendanceStatus],
        work_date: Optional[date] = None,
        department: Optional[Department] = None,
    ) -> Sequence[AttendanceRecord]:
        if not statuses:
            return []
        placeholders = ",".join(["%s"] * len(statuses))
        clauses = ["work_mode_off_time IS NOT NULL", f"status IN ({placeholders})"]
        params: list[object] = [s.value for s in statuses]
        if work_date is not None:
            clauses.append("work_date=%s")
            params.append(work_date)
        if department is not None:
            clauses.append("department=%s")
            params.append(department.value)
        return self._select(" AND ".join(clauses), tuple(params), order="work_date DESC, work_mode_off_time DESC")

    def list_filtered(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[Department] = None,
        status: Optional[AttendanceStatus] = None,
        employee_id: Optional[str] = None,
        limit: int = 100,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if department is not None:
            clauses.append("department=%s")
            params.append(department.value)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        return self._select(
            " AND ".join(clauses),
            tuple(params),
            order="work_date DESC, work_mode_on_time DESC",
            limit=limit,
        )
