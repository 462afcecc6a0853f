"""Centralized error handling and responses - DRY principle"""
from typing import Dict, Optional, Tuple

from flask import current_app, has_app_context

from kbcms.exceptions.exceptions import AppError, InternalError
from kbcms.logging_logs.log_config import get_logger
from kbcms.utils.constants import RESPONSE_MESSAGES

logger = get_logger(__name__)


def _is_development() -> bool:
    if not has_app_context():
        return False
    return current_app.config.get("APP_ENV") == "development"


def handle_service_error(e: Exception, context: Optional[Dict] = None) -> Tuple[dict, int]:
    """Convert an exception raised below the API layer into an envelope"""
    if isinstance(e, AppError):
        if e.status >= 500:
            logger.error("%s: %s %s", e.error_type, e.message, context or "")
        else:
            logger.info("%s: %s", e.error_type, e.message)
        return e.to_response(), e.status

    sanitized_error = str(e).replace('\n', ' ').replace('\r', ' ')[:500]
    logger.error("Unexpected error: %s %s", sanitized_error, context or "", exc_info=e)
    error = InternalError(RESPONSE_MESSAGES["serverError"])
    if _is_development():
        error.detail = sanitized_error
    return error.to_response(), error.status


# Mapped onto flask_restful.Api(errors=...) for HTTP errors raised before a handler runs
HTTP_ERRORS = {
    "RateLimitExceeded": {
        "success": False,
        "error": "Too many requests, please try again later",
        "type": "RATE_LIMIT_EXCEEDED",
        "status": 429,
    },
    "RequestEntityTooLarge": {
        "success": False,
        "error": "File too large. Maximum upload size is 50MB",
        "type": "FILE_TOO_LARGE",
        "status": 413,
    },
    "MethodNotAllowed": {
        "success": False,
        "error": "Method not allowed",
        "type": "METHOD_NOT_ALLOWED",
        "status": 405,
    },
    "NotFound": {
        "success": False,
        "error": "Route not found",
        "type": "ROUTE_NOT_FOUND",
        "status": 404,
    },
}
