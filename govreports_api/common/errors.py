# govreports_api/common/errors.py
from flask import Blueprint, current_app
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError
from govreports_api.common.http import fail

bp_errors = Blueprint("errors", __name__)


class APIError(Exception):
    """Custom API Error class."""
    def __init__(self, code, message, status_code=400, payload=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.payload = payload


class InvalidArgumentError(APIError):
    """Bad report type, schedule, format or period parameters."""
    def __init__(self, message, payload=None):
        super().__init__("INVALID_ARGUMENT", message, 422, payload)


class UnsupportedExportError(APIError):
    """The generator does not declare the requested output format."""
    def __init__(self, message, payload=None):
        super().__init__("UNSUPPORTED_EXPORT", message, 400, payload)


class TemplateNotFoundError(APIError):
    def __init__(self, path):
        super().__init__(
            "TEMPLATE_NOT_FOUND",
            f"BIR 2316 template not found at: {path}",
            500,
            payload={"path": str(path)},
        )


class NoDataError(APIError):
    def __init__(self, message, payload=None):
        super().__init__("NO_DATA", message, 404, payload)


@bp_errors.app_errorhandler(HTTPException)
def _http(e: HTTPException):
    return fail(message=e.description or "HTTP error", status=e.code or 400)

@bp_errors.app_errorhandler(IntegrityError)
def _integrity(e: IntegrityError):
    # 409 for unique/FK violations
    return fail(message="Conflict / integrity error", status=409, detail=str(e.orig) if getattr(e, "orig", None) else str(e))

@bp_errors.app_errorhandler(APIError)
def _api_error(e: APIError):
    if e.status_code >= 500:
        current_app.logger.error("%s: %s", e.code, e.message)
    return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)

@bp_errors.app_errorhandler(Exception)
def _unhandled(e: Exception):
    current_app.logger.exception(e)
    return fail(message="Internal Server Error", status=500, detail=str(e))
