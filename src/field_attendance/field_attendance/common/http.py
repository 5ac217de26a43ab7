from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import (
    ConflictError,
    DomainError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    InvalidOperationError: 422,
}


def status_for(error: DomainError) -> int:
    for exc_type, code in _STATUS_CODES.items():
        if isinstance(error, exc_type):
            return code
    return 400


def ok(data=None, *, message: str | None = None, status: int = 200):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def domain_failure(error: DomainError):
    code = status_for(error)
    logger.info("Request rejected (%s): %s", code, error)
    return fail(str(error), code)
