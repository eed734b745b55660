from __future__ import annotations

import structlog
from django.conf import settings
from rest_framework.permissions import SAFE_METHODS, BasePermission
from rest_framework.request import Request
from rest_framework.views import APIView

from modules.core.database import ReadyState, get_connection
from modules.core.exceptions import DatabaseNotReady

logger = structlog.get_logger(__name__)


class DatabaseConnectionGuard(BasePermission):
    """Rejects requests with 503 while the document store is not connected.

    Runs before the view handler, so no operation-specific work happens
    against an unavailable database.  Write methods are guarded too unless
    ``PRODUCTS_GUARD_WRITES`` is disabled.
    """

    def has_permission(self, request: Request, view: APIView) -> bool:
        if request.method not in SAFE_METHODS and not settings.PRODUCTS_GUARD_WRITES:
            return True

        state = get_connection().ready_state
        if state != ReadyState.CONNECTED:
            logger.warning(
                "database.not_ready",
                ready_state=int(state),
                method=request.method,
                path=request.path,
            )
            raise DatabaseNotReady(state)
        return True
