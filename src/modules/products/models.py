"""Product model with availability-flag soft delete.

Rules implemented here:
- Price must be zero or greater, with at most 4 decimal places.
- Name must not be blank.
- Soft delete via ``available`` (inherited from AvailabilityModel);
  rows are never physically removed by the service layer.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import AvailabilityModel


class Product(AvailabilityModel):
    """Product aggregate root.

    ``id`` is system assigned and never changes.  ``available=False``
    marks the product as removed; it then disappears from every caller
    facing read except the batch existence check.
    """

    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name is not None:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({"name": "Name must not be empty."})
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"#{self.id} - {self.name}"
