from __future__ import annotations

import logging

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import domain_failure, fail, ok
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    def holidays_create():
        try:
            payload = request.get_json(silent=True) or {}
            departments = payload.get("departments") or []
            if isinstance(departments, str):
                departments = [departments]
            holiday_id = service.create_holiday(
                holiday_date=parse_iso_date(payload.get("date") or ""),
                title=payload.get("title") or "",
                departments=departments,
                status=payload.get("status") or "",
                description=payload.get("description") or "",
                start_time=payload.get("startTime"),
                end_time=payload.get("endTime"),
                created_by=payload.get("createdBy"),
            )
            return ok({"id": holiday_id}, message="Holiday created", status=201)
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to create holiday")
            return fail("Server error", 500)

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_on_date")
    def holidays_on_date():
        try:
            raw = request.args.get("date")
            target = parse_iso_date(raw) if raw else container.clock.today()
            return ok([h.to_dict() for h in service.holidays_on(target)])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to list holidays")
            return fail("Server error", 500)

    @app.route("/api/holidays/range", methods=["GET"], endpoint="holidays_range")
    def holidays_range():
        try:
            start = request.args.get("startDate")
            end = request.args.get("endDate")
            if not start or not end:
                raise ValidationError("startDate and endDate are required")
            holidays = service.list_range(
                start=parse_iso_date(start),
                end=parse_iso_date(end),
                department=request.args.get("department") or None,
            )
            return ok([h.to_dict() for h in holidays])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to list holiday range")
            return fail("Server error", 500)

    @app.route("/api/holidays/check/<department>/<day>", methods=["GET"], endpoint="holidays_check")
    def holidays_check(department: str, day: str):
        try:
            holiday = service.check(department=department, holiday_date=parse_iso_date(day))
            return ok(
                {
                    "isHoliday": holiday is not None,
                    "holiday": holiday.to_dict() if holiday else None,
                }
            )
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to check holiday")
            return fail("Server error", 500)

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    def holidays_delete(holiday_id: int):
        try:
            service.delete_holiday(holiday_id)
            return ok(None, message="Holiday deleted")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to delete holiday")
            return fail("Server error", 500)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="holidays_update")
    def holidays_update(holiday_id: int):
        try:
            payload = request.get_json(silent=True) or {}
            departments = payload.get("departments")
            if isinstance(departments, str):
                departments = [departments]
            raw_date = payload.get("date")
            holiday = service.update_holiday(
                holiday_id,
                holiday_date=parse_iso_date(raw_date) if raw_date else None,
                title=payload.get("title"),
                departments=departments,
                status=payload.get("status"),
                description=payload.get("description"),
                start_time=payload.get("startTime"),
                end_time=payload.get("endTime"),
            )
            return ok(holiday.to_dict(), message="Holiday updated")
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to update holiday %s", holiday_id)
            return fail("Server error", 500)

    @app.route("/api/holidays/fetch", methods=["GET"], endpoint="holidays_fetch")
    def holidays_fetch():
        try:
            holidays = service.list_holidays(
                department=request.args.get("department"),
                month=request.args.get("month"),
                year=request.args.get("year"),
                status=request.args.get("status"),
            )
            return ok([h.to_dict() for h in holidays])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to fetch holidays")
            return fail("Server error", 500)

    @app.route("/api/holidays/department/<department>", methods=["GET"], endpoint="holidays_by_department")
    def holidays_by_department(department: str):
        try:
            holidays = service.by_department(department, year=request.args.get("year"))
            return ok([h.to_dict() for h in holidays])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to list holidays for %s", department)
            return fail("Server error", 500)
