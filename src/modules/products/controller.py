"""Message controller for the products commands.

Both message transports (the Celery broker listener and the direct TCP
listener) route every inbound command through ``ProductMessageController``:
the payload is validated against its DTO, the service is called, and the
result or the domain error is rendered as an ``RpcReply`` envelope.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple, Type

import structlog
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import BackendUnavailable
from modules.products.dtos import (
    CreateProductDTO,
    PaginationDTO,
    ProductIdDTO,
    ProductOutputDTO,
    UpdateProductMessage,
    ValidateProductsDTO,
)
from modules.products.exceptions import ProductNotFound, ProductsValidationFailed
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService
from shared.domain.rpc import UnknownCommand, reply_error, reply_ok

logger = structlog.get_logger(__name__)


class MessagePatterns:
    CREATE = "product.create"
    FIND_ALL = "product.find_all"
    FIND_ALL_PAGED = "product.find_all_paged"
    FIND_ONE = "product.find_one"
    UPDATE = "product.update"
    REMOVE = "product.remove"
    VALIDATE = "product.validate"

    ALL = (CREATE, FIND_ALL, FIND_ALL_PAGED, FIND_ONE, UPDATE, REMOVE, VALIDATE)


# Domain error -> (status, code).  Order matters only for subclasses.
ERROR_STATUS: Tuple[Tuple[Type[Exception], int, str], ...] = (
    (ProductNotFound, 404, "not_found"),
    (ProductsValidationFailed, 412, "precondition_failed"),
    (BackendUnavailable, 503, "backend_unavailable"),
    (UnknownCommand, 404, "unknown_command"),
)


def format_validation_errors(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into ``"field: message"`` strings."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "payload"
        messages.append(f"{loc}: {err['msg']}")
    return messages


class ProductMessageController:
    """Maps command names onto ``ProductService`` operations."""

    def __init__(self, service: ProductService) -> None:
        self._service = service
        self._handlers: Dict[str, Callable[[Any], Any]] = {
            MessagePatterns.CREATE: self.create,
            MessagePatterns.FIND_ALL: self.find_all,
            MessagePatterns.FIND_ALL_PAGED: self.find_all_paged,
            MessagePatterns.FIND_ONE: self.find_one,
            MessagePatterns.UPDATE: self.update,
            MessagePatterns.REMOVE: self.remove,
            MessagePatterns.VALIDATE: self.validate,
        }

    @classmethod
    def default(cls) -> ProductMessageController:
        return cls(ProductService(repository=ProductDjangoRepository()))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def execute(self, cmd: str, payload: Any) -> Any:
        """Run ``cmd`` and return its JSON-ready result; domain errors propagate."""
        handler = self._handlers.get(cmd) if isinstance(cmd, str) else None
        if handler is None:
            raise UnknownCommand(cmd)
        return handler({} if payload is None else payload)

    def dispatch(
        self,
        cmd: str,
        payload: Any,
        propagate: Tuple[Type[Exception], ...] = (),
    ) -> Dict[str, Any]:
        """Run ``cmd`` and wrap the outcome in a reply envelope.

        Exceptions listed in ``propagate`` are re-raised instead of being
        rendered, so the caller can apply its own retry policy.
        """
        log = logger.bind(cmd=cmd)
        log.info("rpc.request_received")
        try:
            data = self.execute(cmd, payload)
        except propagate:
            raise
        except PydanticValidationError as exc:
            log.info("rpc.validation_error", errors=exc.error_count())
            return reply_error(400, "validation_error", format_validation_errors(exc))
        except tuple(exc_type for exc_type, _, _ in ERROR_STATUS) as exc:
            status, code = next(
                (s, c) for exc_type, s, c in ERROR_STATUS if isinstance(exc, exc_type)
            )
            log.info("rpc.request_failed", status=status, code=code)
            return reply_error(status, code, str(exc))
        log.info("rpc.request_completed")
        return reply_ok(data)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def create(self, payload: Any) -> Dict[str, Any]:
        dto = CreateProductDTO.model_validate(payload)
        return ProductOutputDTO.from_entity(self._service.create_product(dto)).to_payload()

    def find_all(self, payload: Any) -> List[Dict[str, Any]]:
        return [
            ProductOutputDTO.from_entity(p).to_payload()
            for p in self._service.list_products()
        ]

    def find_all_paged(self, payload: Any) -> Any:
        dto = PaginationDTO.model_validate(payload)
        return self._service.list_products_paged(dto).to_payload()

    def find_one(self, payload: Any) -> Dict[str, Any]:
        dto = ProductIdDTO.model_validate(payload)
        return ProductOutputDTO.from_entity(self._service.get_product(dto.id)).to_payload()

    def update(self, payload: Any) -> Dict[str, Any]:
        dto = UpdateProductMessage.model_validate(payload)
        product = self._service.update_product(dto.id, dto)
        return ProductOutputDTO.from_entity(product).to_payload()

    def remove(self, payload: Any) -> Dict[str, Any]:
        dto = ProductIdDTO.model_validate(payload)
        return ProductOutputDTO.from_entity(self._service.remove_product(dto.id)).to_payload()

    def validate(self, payload: Any) -> List[Dict[str, Any]]:
        dto = ValidateProductsDTO.model_validate(payload)
        return [
            ProductOutputDTO.from_entity(p).to_payload()
            for p in self._service.validate_products(dto.ids)
        ]
