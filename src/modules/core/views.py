"""Operational endpoints that live outside the versioned API."""

import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

logger = structlog.get_logger()


def _check_database(alias: str = "default") -> Dict[str, Any]:
    start = time.monotonic()
    conn = connections[alias]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


@require_GET
def health_check(request: HttpRequest) -> JsonResponse:
    """Report whether the database answers; 503 when it does not.

    Public on purpose: load balancers call it without credentials.
    """
    services: Dict[str, Dict[str, Any]] = {}

    try:
        services["database"] = _check_database()
    except DatabaseError:
        services["database"] = {"status": "down"}
        logger.error("health_check.database_down", exc_info=True)

    healthy = all(s["status"] == "up" for s in services.values())
    overall = "healthy" if healthy else "unhealthy"
    logger.info("health_check.completed", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
