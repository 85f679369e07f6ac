"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the transport adapters (HTTP views,
broker tasks, direct listener) and the Service layer.  DTOs are
immutable (``frozen=True``) and reject unknown fields (``extra="forbid"``),
so a malformed payload never reaches the service.

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``UpdateProductMessage``: update input carrying the target ``id``.
- ``ProductIdDTO``: input for find-one / remove.
- ``PaginationDTO``: input for the paged listing.
- ``ValidateProductsDTO``: input for the batch existence check.
- ``ProductOutputDTO`` / ``ProductPageDTO``: output shapes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_serializer, field_validator

if TYPE_CHECKING:
    from modules.products.models import Product

# Column bounds of the products table.
NAME_MAX_LENGTH = 255
PRICE_MAX_DIGITS = 14
PRICE_DECIMAL_PLACES = 4

# Keeps LIMIT/OFFSET inside a 64-bit integer on every backend.
MAX_PAGE_LIMIT = 100
MAX_PAGE = 2**31 - 1

# BigAutoField range.
MAX_PRODUCT_ID = 2**63 - 1
ProductId = Annotated[int, Field(gt=0, le=MAX_PRODUCT_ID)]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-empty string of at most 255 characters.
    - ``price`` is a number >= 0 that fits ``numeric(14, 4)``.
    - ``available`` defaults to ``True``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(
        ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    )
    available: bool = True

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``id`` is accepted so callers may echo the full record back, but it is
    never applied as a change.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Optional[ProductId] = None
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    available: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    def changes(self) -> Dict[str, Any]:
        """Fields the caller supplied, without ``id``."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})


class UpdateProductMessage(UpdateProductDTO):
    """Update payload on the message transports, where ``id`` selects the row."""

    id: ProductId


class ProductIdDTO(BaseModel):
    """Payload for commands addressed at one product."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: ProductId


class PaginationDTO(BaseModel):
    """Page selection: 1-based ``page`` and page size ``limit`` (at most 100)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    page: PositiveInt = Field(default=1, le=MAX_PAGE)
    limit: PositiveInt = Field(default=10, le=MAX_PAGE_LIMIT)


class ValidateProductsDTO(BaseModel):
    """Ids an external caller wants confirmed before referencing them."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ids: List[ProductId] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product responses."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Decimal
    available: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("price")
    def serialize_price(self, v: Decimal) -> float:
        return float(v)

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            available=product.available,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class PageMetaDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    current: int
    total_pages: int = Field(serialization_alias="totalPages")


class ProductPageDTO(BaseModel):
    """One page of available products.

    ``meta`` is ``None`` when the requested page lies past the last page;
    that branch is rendered as a bare empty list on every transport.
    """

    model_config = ConfigDict(frozen=True)

    data: List[ProductOutputDTO]
    meta: Optional[PageMetaDTO] = None

    @property
    def is_out_of_range(self) -> bool:
        return self.meta is None

    def to_payload(self) -> Union[List[Any], Dict[str, Any]]:
        if self.is_out_of_range:
            return []
        return self.model_dump(mode="json", by_alias=True)
