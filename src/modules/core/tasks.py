"""Core asynchronous tasks."""

import structlog
from celery import shared_task

logger = structlog.get_logger(__name__)


@shared_task(name="core.ping")
def ping():
    """Diagnostic task: confirms the broker listener is consuming."""
    logger.info("ping.executed", status="ok")
    return {"status": "ok", "message": "Products listener is alive"}
