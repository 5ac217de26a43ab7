from __future__ import annotations

import logging

from flask import Flask

from ..common.http import domain_failure, fail, ok
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    directory = container.directory

    @app.route("/api/hr/employees", methods=["GET"], endpoint="hr_employees")
    def hr_employees():
        try:
            return ok([e.to_dict() for e in directory.roster()])
        except DomainError as e:
            return domain_failure(e)
        except Exception:
            logger.exception("Failed to list employees")
            return fail("Server error", 500)
