"""
HTTP Error Conversion

Routers catch ServiceError and anything unexpected around each service
call and convert them here into structured HTTPExceptions:
{"error": <error_code>, "message": <message>}.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import InterfaceError, OperationalError

from placement.modules.shared.errors import ServiceError, StoreUnavailableError

logger = logging.getLogger(__name__)


def to_http_exception(e: ServiceError) -> HTTPException:
    """Convert a service error to an HTTPException."""
    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
        headers=headers,
    )


def unexpected_error(e: Exception, context: str) -> HTTPException:
    """
    Convert an exception no service anticipated.

    Lost database connections become 503 STORE_UNAVAILABLE; anything else is
    logged with its traceback and returned as a generic 500.
    """
    if isinstance(e, (OperationalError, InterfaceError)):
        logger.error(f"Store unavailable while {context}: {e}")
        return to_http_exception(StoreUnavailableError())

    logger.exception(f"Error {context}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
