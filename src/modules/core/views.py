import time
from typing import Any, Dict

import structlog
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from pymongo.errors import PyMongoError

from modules.core.database import get_connection

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    connection = get_connection()
    database: Dict[str, Any] = {}

    try:
        start = time.monotonic()
        connection.ping()
        database = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except PyMongoError as exc:
        database = {"status": "down"}
        logger.error("health_check_db_failure", error=str(exc))

    database["ready_state"] = int(connection.ready_state)
    healthy = database["status"] == "up"

    logger.info("health_check_completed", status="healthy" if healthy else "unhealthy")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": {"database": database},
        },
        status=200 if healthy else 503,
    )
