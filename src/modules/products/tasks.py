"""Broker listener (variant A): one Celery task per products command.

Task names are the command names themselves, so any Celery client can
call ``send_task("product.find_one", kwargs={"id": 1})`` and read the
reply envelope from the result backend.

``BackendUnavailable`` is retried with exponential backoff; once the
retries are exhausted the caller receives a 503 envelope.
"""

from __future__ import annotations

from typing import Any, Dict

import structlog
from celery import Task, shared_task

from modules.core.exceptions import BackendUnavailable
from modules.core.middleware import bind_correlation_id
from modules.products.controller import MessagePatterns, ProductMessageController

logger = structlog.get_logger(__name__)

RETRY_OPTIONS: Dict[str, Any] = {
    "bind": True,
    "autoretry_for": (BackendUnavailable,),
    "retry_backoff": True,
    "retry_backoff_max": 30,
    "retry_jitter": True,
    "max_retries": 3,
}


def _run(task: Task, cmd: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    bind_correlation_id(task.request.id, transport="broker", cmd=cmd)
    exhausted = task.request.retries >= task.max_retries
    propagate = () if exhausted else (BackendUnavailable,)
    if exhausted:
        logger.warning("rpc.retries_exhausted", retries=task.request.retries)
    return ProductMessageController.default().dispatch(cmd, payload, propagate=propagate)


@shared_task(name=MessagePatterns.CREATE, **RETRY_OPTIONS)
def create_product(self, **payload):
    return _run(self, MessagePatterns.CREATE, payload)


@shared_task(name=MessagePatterns.FIND_ALL, **RETRY_OPTIONS)
def find_all_products(self, **payload):
    return _run(self, MessagePatterns.FIND_ALL, payload)


@shared_task(name=MessagePatterns.FIND_ALL_PAGED, **RETRY_OPTIONS)
def find_all_products_paged(self, **payload):
    return _run(self, MessagePatterns.FIND_ALL_PAGED, payload)


@shared_task(name=MessagePatterns.FIND_ONE, **RETRY_OPTIONS)
def find_one_product(self, **payload):
    return _run(self, MessagePatterns.FIND_ONE, payload)


@shared_task(name=MessagePatterns.UPDATE, **RETRY_OPTIONS)
def update_product(self, **payload):
    return _run(self, MessagePatterns.UPDATE, payload)


@shared_task(name=MessagePatterns.REMOVE, **RETRY_OPTIONS)
def remove_product(self, **payload):
    return _run(self, MessagePatterns.REMOVE, payload)


@shared_task(name=MessagePatterns.VALIDATE, **RETRY_OPTIONS)
def validate_products(self, **payload):
    return _run(self, MessagePatterns.VALIDATE, payload)
