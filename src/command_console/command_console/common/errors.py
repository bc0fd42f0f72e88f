from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.exceptions import DomainError, InvariantViolation, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

# Most specific first; DomainError catches the rest.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvariantViolation, 409),
    (StorageError, 500),
)


def status_for(error: DomainError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error("Request failed: %s", error)
        return jsonify({"error": str(error), "type": type(error).__name__}), status

    @app.errorhandler(500)
    def handle_internal_error(error):
        original = getattr(error, "original_exception", None) or error
        logger.error("Unexpected error: %s", original, exc_info=original)
        return jsonify({"error": "An unexpected error occurred"}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Resource not found"}), 404
