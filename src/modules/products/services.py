"""Product service layer (Use Cases).

Orchestrates the catalog operations for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Rules enforced here:
- Every caller-facing read only sees available products.
- Update and remove first look the product up as a caller would, so an
  unknown or already removed id fails with ``ProductNotFound``.
- Remove is a soft delete (``available=False``); nothing is hard-deleted.
- The batch existence check ignores availability.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

import structlog

from modules.products.dtos import PageMetaDTO, ProductOutputDTO, ProductPageDTO
from modules.products.exceptions import ProductNotFound, ProductsValidationFailed
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateProductDTO,
        PaginationDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    Holds no state besides the repository handle.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        """Insert one product; ``available`` defaults to ``True``."""
        product = Product(
            name=dto.name,
            price=dto.price,
            available=dto.available,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=product.id)
        return product

    def update_product(self, id: int, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an available product.

        An ``id`` inside ``dto`` is ignored; the product keeps its identity.

        Raises:
            ProductNotFound: if no available product has this id.
        """
        product = self.get_product(id)
        log = logger.bind(product_id=id)

        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        log.info("product.updated", fields=sorted(changes))
        return product

    def remove_product(self, id: int) -> Product:
        """Soft-delete an available product and return it.

        Raises:
            ProductNotFound: if no available product has this id, including
                a product that was already removed.
        """
        self.get_product(id)
        product = self._repo.delete(id)
        if not product:
            raise ProductNotFound(id)
        logger.info("product.removed", product_id=id)
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every available product."""
        return self._repo.list()

    def list_products_paged(self, pagination: PaginationDTO) -> ProductPageDTO:
        """Return one page of available products plus page metadata.

        When ``page`` exceeds the page count (always the case for an empty
        catalog) the result carries no rows and no metadata.
        """
        page, limit = pagination.page, pagination.limit
        total = self._repo.count_available()
        total_pages = math.ceil(total / limit)

        if page > total_pages:
            logger.info(
                "product.page_out_of_range",
                page=page,
                limit=limit,
                total_pages=total_pages,
            )
            return ProductPageDTO(data=[])

        rows = self._repo.list_page(offset=(page - 1) * limit, limit=limit)
        return ProductPageDTO(
            data=[ProductOutputDTO.from_entity(p) for p in rows],
            meta=PageMetaDTO(total=total, current=page, total_pages=total_pages),
        )

    def get_product(self, id: int) -> Product:
        """Retrieve a single available product by ID.

        Raises:
            ProductNotFound: if the product does not exist or is unavailable.
        """
        product = self._repo.get_by_id(id)
        if not product:
            logger.info("product.not_found", product_id=id)
            raise ProductNotFound(id)
        return product

    def validate_products(self, ids: List[int]) -> List[Product]:
        """Confirm every id names a stored product, available or not.

        Duplicates are collapsed before comparing counts.  The returned
        rows are not guaranteed to follow the input order.

        Raises:
            ProductsValidationFailed: if at least one id matches no product.
        """
        unique_ids = set(ids)
        products = self._repo.get_many_by_ids(unique_ids)

        if len(products) != len(unique_ids):
            missing = unique_ids - {p.id for p in products}
            logger.warning("product.validation_failed", missing_ids=sorted(missing))
            raise ProductsValidationFailed(missing)

        return products
