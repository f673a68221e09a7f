"""Conversion of service-layer errors into HTTP failure envelopes."""

import logging

from fastapi.responses import JSONResponse

from menuorder.exceptions import (
    ConstraintViolationError,
    DuplicateError,
    MenuServiceError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses come before DatabaseError
_STATUS_BY_ERROR: list[tuple[type[MenuServiceError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (DuplicateError, 409),
    (ConstraintViolationError, 409),
    (TransientStoreError, 503),
]


def status_for(error: MenuServiceError) -> int:
    """HTTP status for a service-layer error; anything unmapped is a 500."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def error_response(error: MenuServiceError, message: str) -> JSONResponse:
    """
    Log an error and wrap it in the failure envelope.

    Client errors carry the validation or lookup message; server errors carry
    the generic message with the underlying error as details.
    """
    status_code = status_for(error)
    if status_code >= 500:
        logger.exception("%s: %s", message, error)
        content = {"success": False, "error": message, "details": str(error)}
    else:
        logger.warning("%s: %s", message, error)
        content = {"success": False, "error": str(error)}
    return JSONResponse(status_code=status_code, content=content)
