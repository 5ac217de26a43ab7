from __future__ import annotations

import logging

from flask import Flask, request

from ..common.coordinates import parse_coordinates
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import domain_failure, fail, ok
from ..core.constants import DEFAULT_HISTORY_LIMIT, HR_HISTORY_LIMIT
from ..core.enums import EmployeeKind
from ..core.exceptions import DomainError, ValidationError
from ..employees.model import EmployeeRef
from ..container import Container
from .model import TravelSample

logger = logging.getLogger(__name__)


def employee_ref(kind: str, employee_id: str) -> EmployeeRef:
    try:
        return EmployeeRef(kind=EmployeeKind.from_slug(kind), employee_id=employee_id)
    except ValueError:
        raise ValidationError(f"Unknown employee type: {kind}")


def _json() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _coordinates_payload(payload: dict):
    # Accept {"coordinates": {...}} or latitude/longitude at the top level.
    nested = payload.get("coordinates")
    return nested if nested is not None else payload


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/employees/<kind>/<employee_id>/attendance/today", methods=["GET"], endpoint="attendance_today")
    def attendance_today(kind: str, employee_id: str):
        try:
            summary = service.get_today(employee_ref(kind, employee_id))
            if summary is None:
                return ok(None, message="No attendance record for today")
            return ok(summary.to_dict())
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to load today's attendance")
            return fail("Server error", 500)

    @app.route(
        "/api/employees/<kind>/<employee_id>/attendance/active-session",
        methods=["GET"],
        endpoint="attendance_active_session",
    )
    def attendance_active_session(kind: str, employee_id: str):
        try:
            record = service.get_active_session(employee_ref(kind, employee_id))
            if record is None:
                return ok({"isActive": False})
            location = record.current_location
            return ok(
                {
                    "isActive": True,
                    "id": str(record.attendance_id),
                    "workModeOnTime": record.work_mode_on_time.isoformat(),
                    "workType": record.work_type,
                    "totalDistanceTravelled": record.total_distance_travelled,
                    "startingLocation": record.work_mode_on_coordinates.to_dict()
                    if record.work_mode_on_coordinates
                    else None,
                    "currentLocation": location.to_dict() if location else None,
                    "travelLogs": [log.to_dict() for log in record.travel_logs],
                }
            )
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to load active session")
            return fail("Server error", 500)

    @app.route(
        "/api/employees/<kind>/<employee_id>/attendance/work-mode-on",
        methods=["POST"],
        endpoint="attendance_work_mode_on",
    )
    def attendance_work_mode_on(kind: str, employee_id: str):
        try:
            payload = _json()
            summary = service.open_session(
                employee_ref(kind, employee_id),
                _coordinates_payload(payload),
                payload.get("workType"),
            )
            return ok(summary.to_dict(), message="Work mode turned on", status=201)
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to turn work mode on")
            return fail("Server error", 500)

    @app.route(
        "/api/employees/<kind>/<employee_id>/attendance/travel-log",
        methods=["POST"],
        endpoint="attendance_travel_log",
    )
    def attendance_travel_log(kind: str, employee_id: str):
        try:
            payload = _json()
            ref = employee_ref(kind, employee_id)
            raw_date = payload.get("date")
            work_date = parse_iso_date(raw_date) if raw_date else container.clock.today()
            raw_ts = payload.get("timestamp")
            sample = TravelSample(
                coordinates=parse_coordinates(_coordinates_payload(payload)),
                distance_from_start=payload.get("distanceFromStart", 0),
                timestamp=parse_iso_datetime(raw_ts) if raw_ts else None,
            )
            record = service.append_travel_sample(ref, work_date, sample)
            return ok(
                {
                    "id": str(record.attendance_id),
                    "totalDistanceTravelled": record.total_distance_travelled,
                    "travelLogs": len(record.travel_logs),
                }
            )
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to append travel log")
            return fail("Server error", 500)

    @app.route(
        "/api/employees/<kind>/<employee_id>/attendance/work-mode-off",
        methods=["POST"],
        endpoint="attendance_work_mode_off",
    )
    def attendance_work_mode_off(kind: str, employee_id: str):
        try:
            payload = _json()
            coords = _coordinates_payload(payload)
            has_coords = isinstance(coords, dict) and (
                coords.get("latitude") is not None or coords.get("longitude") is not None
            )
            summary = service.close_session(
                employee_ref(kind, employee_id),
                coords if has_coords else None,
                payload.get("totalDistance"),
            )
            return ok(summary.to_dict(), message="Work mode turned off")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to turn work mode off")
            return fail("Server error", 500)

    @app.route("/api/employees/<kind>/<employee_id>/attendance/history", methods=["GET"], endpoint="attendance_history")
    def attendance_history(kind: str, employee_id: str):
        try:
            records = service.history(
                employee_ref(kind, employee_id),
                month=request.args.get("month") or None,
                limit=request.args.get("limit") or DEFAULT_HISTORY_LIMIT,
            )
            return ok([r.to_dict() for r in records])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to load attendance history")
            return fail("Server error", 500)

    @app.route("/api/hr/employees/<kind>/<employee_id>/attendance", methods=["POST"], endpoint="hr_manual_attendance")
    def hr_manual_attendance(kind: str, employee_id: str):
        try:
            payload = _json()
            record = service.record_manual_attendance(
                employee_ref(kind, employee_id),
                parse_iso_date(payload.get("date") or ""),
                payload.get("status"),
                description=payload.get("description"),
                work_type=payload.get("workType"),
                approved_by=payload.get("approvedBy"),
            )
            return ok(record.to_dict(), message="Attendance recorded")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to record manual attendance")
            return fail("Server error", 500)

    @app.route("/api/hr/pending-requests", methods=["GET"], endpoint="hr_pending_requests")
    def hr_pending_requests():
        try:
            raw_date = request.args.get("date")
            records = service.pending_requests(
                work_date=parse_iso_date(raw_date) if raw_date else None,
                department=request.args.get("department") or None,
                status=request.args.get("status") or None,
            )
            return ok([r.to_dict() for r in records])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to load pending requests")
            return fail("Server error", 500)

    @app.route("/api/hr/update-status/<record_id>", methods=["PUT"], endpoint="hr_update_status")
    def hr_update_status(record_id: str):
        try:
            payload = _json()
            record = service.set_status(
                record_id,
                payload.get("status"),
                payload.get("remarks"),
                approved_by=payload.get("approvedBy"),
            )
            return ok(record.to_dict(), message="Attendance status updated")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to update attendance status")
            return fail("Server error", 500)

    @app.route("/api/hr/approve-attendance/<record_id>", methods=["PUT"], endpoint="hr_approve_attendance")
    def hr_approve_attendance(record_id: str):
        try:
            payload = _json()
            record = service.approve(
                record_id,
                payload.get("status"),
                payload.get("remarks"),
                approved_by=payload.get("approvedBy"),
            )
            return ok(record.to_dict(), message="Attendance approved")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to approve attendance")
            return fail("Server error", 500)

    @app.route("/api/hr/attendance-history", methods=["GET"], endpoint="hr_attendance_history")
    def hr_attendance_history():
        try:
            args = request.args
            records = service.hr_history(
                start_date=parse_iso_date(args["startDate"]) if args.get("startDate") else None,
                end_date=parse_iso_date(args["endDate"]) if args.get("endDate") else None,
                department=args.get("department") or None,
                status=args.get("status") or None,
                employee_id=args.get("employeeId") or None,
                limit=args.get("limit") or HR_HISTORY_LIMIT,
            )
            return ok([r.to_dict() for r in records])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to load HR attendance history")
            return fail("Server error", 500)
