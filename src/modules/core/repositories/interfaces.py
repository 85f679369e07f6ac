"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.

Also provides ``translate_backend_errors``: concrete repositories wrap
their ORM calls with it so that connectivity failures surface as
``BackendUnavailable`` instead of driver-specific exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, Iterator, List, Optional, TypeVar

import structlog
from django.db import InterfaceError, OperationalError

from modules.core.exceptions import BackendUnavailable

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve a visible entity by its primary key."""

    @abstractmethod
    def list(self) -> List[T]:
        """List visible entities."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: int) -> Optional[T]:
        """Soft-delete an entity by ID, returning it (``None`` if absent)."""


@contextmanager
def translate_backend_errors(operation: str) -> Iterator[None]:
    """Re-raise database connectivity errors as ``BackendUnavailable``."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("backend.unavailable", operation=operation, error=str(exc))
        raise BackendUnavailable(f"Database unavailable during {operation}.") from exc
