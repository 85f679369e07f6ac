import uuid
from typing import Callable, Optional

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger()


def bind_correlation_id(cid: Optional[str] = None, **extra: str) -> str:
    """Bind ``cid`` (or a fresh UUID4) to the structlog context and return it.

    Shared by the HTTP middleware and both message listeners so every log
    line of one request carries the same ``correlation_id``.
    """
    cid = cid or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=cid, **extra)
    return cid


class CorrelationIdMiddleware:
    """Middleware that extracts or generates a correlation ID for each request.

    Reads X-Request-ID header from the incoming request. If absent,
    generates a new UUID4. The ID is returned to the client via the
    X-Request-ID response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = bind_correlation_id(
            request.META.get("HTTP_X_REQUEST_ID"), transport="http"
        )

        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
        )

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
        )

        response["X-Request-ID"] = cid
        return response
