"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
Each transport adapter (HTTP views, message controller) catches these
and translates them into its own wire convention.
"""

from __future__ import annotations

from typing import Iterable


class ProductNotFound(Exception):
    """The requested product does not exist or is no longer available."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product with id #{product_id} not found")


class ProductsValidationFailed(Exception):
    """At least one id in a batch does not match any stored product.

    Availability is ignored: soft-deleted products still count as existing.
    """

    def __init__(self, missing_ids: Iterable[int]) -> None:
        self.missing_ids = sorted(missing_ids)
        super().__init__("Some products were not found")
