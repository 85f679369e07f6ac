import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from kombu.exceptions import OperationalError as BrokerError

from config.celery import app as celery_app

logger = structlog.get_logger()


def _probe(name: str, check: Callable[[], None], errors: tuple) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        check()
    except errors as exc:
        logger.error("health_check_probe_failed", probe=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_broker() -> None:
    with celery_app.connection_for_write() as conn:
        conn.ensure_connection(max_retries=1)


def health_check(request: HttpRequest) -> JsonResponse:
    """Report database and broker reachability.

    Only the database decides the status code: the HTTP gateway and the
    direct listener keep serving while the broker is away.
    """
    services = {
        "database": _probe("database", _check_database, (DatabaseError,)),
        "broker": _probe("broker", _check_broker, (BrokerError, OSError)),
    }
    healthy = services["database"]["status"] == "up"

    logger.info("health_check_completed", status="healthy" if healthy else "unhealthy")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "port": settings.SERVICE_ENVS.port,
            "services": services,
        },
        status=200 if healthy else 503,
    )
