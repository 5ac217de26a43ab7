from __future__ import annotations

import logging

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import domain_failure, fail, ok
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hr/daily-attendance", methods=["GET"], endpoint="hr_daily_attendance")
    def hr_daily_attendance():
        try:
            raw = request.args.get("date")
            target = parse_iso_date(raw) if raw else container.clock.today()
            return ok(container.roster_service.daily_roster(target).to_dict())
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to build daily attendance")
            return fail("Server error", 500)
