"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the paged
listing and the batch existence check.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def count_available(self) -> int:
        """Number of products with ``available=True``."""

    @abstractmethod
    def list_page(self, offset: int, limit: int) -> List["Product"]:
        """Available products sliced at ``offset``, at most ``limit`` rows."""

    @abstractmethod
    def get_many_by_ids(self, ids: Iterable[int]) -> List["Product"]:
        """All products whose id is in ``ids``, regardless of availability."""
