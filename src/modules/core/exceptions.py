"""Shared exceptions and the API error contract.

Every error returned by the API has the shape::

    {"error": "<code>", "message": "<client-safe text>", ...extra}

``error`` comes from a closed set of codes; raw exception text is logged,
never returned.  Views translate the domain exceptions they expect;
``api_exception_handler`` (wired as DRF's ``EXCEPTION_HANDLER``) turns
everything else into the same shape.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

DATABASE_UNAVAILABLE = "database_unavailable"
DATABASE_ERROR = "database_error"
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
INTERNAL_ERROR = "internal_error"


# ---------------------------------------------------------------------------
# Storage exceptions (raised by repositories)
# ---------------------------------------------------------------------------


class StorageUnavailable(Exception):
    """The document store could not be reached."""


class StorageError(Exception):
    """The document store failed or rejected an operation."""


class DatabaseNotReady(APIException):
    """Raised by the connection guard before any operation runs."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = DATABASE_UNAVAILABLE
    default_detail = (
        "Database connection not available. Please try again once the "
        "database connection has been restored."
    )

    def __init__(self, ready_state: int) -> None:
        super().__init__()
        self.ready_state = int(ready_state)


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def error_response(
    code: str, message: str, status_code: int, **extra: Any
) -> Response:
    return Response({"error": code, "message": message, **extra}, status=status_code)


def validation_error_response(exc: PydanticValidationError) -> Response:
    """400 response listing each failing field with its message."""
    details: List[Dict[str, Optional[str]]] = [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "non_field_errors",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return error_response(
        VALIDATION_ERROR,
        "The request failed validation.",
        status.HTTP_400_BAD_REQUEST,
        details=details,
    )


def _current_ready_state() -> int:
    from modules.core.database import get_connection

    return int(get_connection().ready_state)


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    view = context.get("view")
    log = logger.bind(view=type(view).__name__ if view is not None else None)

    if isinstance(exc, DatabaseNotReady):
        return error_response(
            DATABASE_UNAVAILABLE,
            str(exc.detail),
            exc.status_code,
            readyState=exc.ready_state,
        )

    if isinstance(exc, StorageUnavailable):
        log.warning("api.database_unavailable")
        return error_response(
            DATABASE_UNAVAILABLE,
            "Unable to connect to the database. Please try again later.",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            readyState=_current_ready_state(),
        )

    if isinstance(exc, StorageError):
        log.warning("api.database_error")
        return error_response(
            DATABASE_ERROR,
            "The database could not complete the request.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail", "") if isinstance(response.data, dict) else ""
        code = getattr(detail, "code", None) or getattr(exc, "default_code", "error")
        response.data = {"error": code, "message": str(detail)}
        return response

    log.exception("api.unhandled_exception")
    return error_response(
        INTERNAL_ERROR,
        "An unexpected error occurred.",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
