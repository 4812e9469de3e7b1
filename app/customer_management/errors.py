"""
Error kinds raised by the customer store and service.

Each error carries the HTTP status it maps to; `register_error_handlers`
turns them into bodiless responses.
"""

from __future__ import annotations

from flask import Flask, g
from werkzeug.exceptions import HTTPException


class CustomerManagementError(Exception):
    status_code = 500


class NotFound(CustomerManagementError):
    status_code = 404


class Conflict(CustomerManagementError):
    status_code = 409


class ValidationError(CustomerManagementError):
    status_code = 400

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class StorageError(CustomerManagementError):
    status_code = 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        app.logger.info("Rejected request: %s (request_id=%s)", e, getattr(g, "request_id", None))
        return "", e.status_code

    @app.errorhandler(NotFound)
    @app.errorhandler(Conflict)
    def _client_error(e: CustomerManagementError):
        app.logger.info("%s: %s (request_id=%s)", type(e).__name__, e, getattr(g, "request_id", None))
        return "", e.status_code

    @app.errorhandler(StorageError)
    def _storage_error(e: StorageError):
        app.logger.exception("Storage failure (request_id=%s)", getattr(g, "request_id", None))
        return "", e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        # 404 for unknown routes, 405 for wrong methods, 400 for unreadable JSON
        return "", e.code or 500

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return "", 500
