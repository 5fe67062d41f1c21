from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int):
    return jsonify({"error": {"code": code, "message": message}}), status


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to stable codes; anything else becomes a 500."""

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if exc.http_status >= 500:
            logger.error("%s: %s", exc.code, exc, exc_info=exc)
        return error_response(exc.code, str(exc) or exc.code, exc.http_status)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = (exc.name or "HTTP error").upper().replace(" ", "_")
        return error_response(code, exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error")
        return error_response("INTERNAL_ERROR", "Internal server error", 500)
