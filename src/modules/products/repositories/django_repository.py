"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising; the Service Layer decides how to translate a missing
entity.  Connectivity failures are re-raised as ``BackendUnavailable``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog

from django.db import transaction

from modules.core.repositories.interfaces import translate_backend_errors
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve an available product by primary key.

        Returns ``None`` for unknown ids and for soft-deleted products.
        """
        with translate_backend_errors("get_by_id"):
            return Product.objects.available().filter(id=id).first()

    def list(self) -> List[Product]:
        """All available products in default (id) order."""
        with translate_backend_errors("list"):
            return list(Product.objects.available())

    def count_available(self) -> int:
        with translate_backend_errors("count_available"):
            return Product.objects.available().count()

    def list_page(self, offset: int, limit: int) -> List[Product]:
        with translate_backend_errors("list_page"):
            return list(Product.objects.available()[offset : offset + limit])

    def get_many_by_ids(self, ids: Iterable[int]) -> List[Product]:
        with translate_backend_errors("get_many_by_ids"):
            return list(Product.objects.filter(id__in=list(ids)))

    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        with translate_backend_errors("save"), transaction.atomic():
            entity.save()
        logger.debug("product.saved", product_id=entity.id)
        return entity

    def delete(self, id: int) -> Optional[Product]:
        """Soft-delete an available product by ID.

        Returns the now-unavailable product, or ``None`` if no available
        product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return None
        with translate_backend_errors("delete"), transaction.atomic():
            product.mark_unavailable()
        logger.debug("product.soft_deleted", product_id=id)
        return product
